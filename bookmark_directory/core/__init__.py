"""Core auth, errors and logging."""
