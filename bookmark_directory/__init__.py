"""Bookmark directory API with passwordless email sign-in."""

__version__ = "0.1.0"
