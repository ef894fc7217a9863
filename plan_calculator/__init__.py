"""Investment plan returns calculator."""

__version__ = "0.1.0"
