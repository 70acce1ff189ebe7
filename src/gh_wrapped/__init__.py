"""GitHub year-in-review statistics."""

__version__ = "0.1.0"
