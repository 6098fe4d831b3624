"""stool: interactive helper for everyday terminal chores."""

__version__ = "0.1.0"
