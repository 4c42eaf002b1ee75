"""Fake collaborators for unit testing."""
