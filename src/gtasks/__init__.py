"""gtasks - a command-line client for Google Tasks."""

__version__ = "0.1.0"
