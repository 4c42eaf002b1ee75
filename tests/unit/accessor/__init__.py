"""Test package for the cache-aside data accessor."""
