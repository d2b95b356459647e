"""quickref - find references to Unity assets from the command line."""

__version__ = "0.1.0"
