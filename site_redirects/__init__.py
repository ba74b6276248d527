"""Site migration redirect service."""

__version__ = "0.1.0"
