"""Daily VOD game schedule with a self-advancing countdown."""

__version__ = "0.1.0"
