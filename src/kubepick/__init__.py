"""kubepick - interactive selection pipelines over kubectl."""

__version__ = "0.1.0"
