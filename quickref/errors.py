"""Exceptions shared across quickref."""


class QuickrefError(Exception):
    """Base error for quickref."""

    pass


class InvalidArgumentError(QuickrefError, ValueError):
    """Search request rejected before any process was spawned."""

    pass


class SearchUnavailableError(QuickrefError):
    """The platform search tool is not installed or not on PATH."""

    pass
