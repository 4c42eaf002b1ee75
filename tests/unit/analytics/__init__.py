"""Test package for coverage and dashboard analytics."""
