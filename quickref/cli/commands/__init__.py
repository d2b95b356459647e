"""CLI commands module."""

from . import config, find, guid, history

__all__ = ["find", "guid", "history", "config"]
