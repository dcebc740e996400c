"""Universal mod template generator."""

__version__ = "0.1.0"
