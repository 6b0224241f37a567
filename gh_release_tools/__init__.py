"""Tools for publishing code directories as GitHub releases."""

__version__ = "0.1.0"
