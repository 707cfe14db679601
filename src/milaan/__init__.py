"""milaan — community help-matching domain services."""

__version__ = "0.1.0"
