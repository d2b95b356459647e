"""Configuration schema definitions.

Uses TypedDict for type safety without runtime overhead.
These types match the structure of config.toml.
"""

from typing import TypedDict


class DefaultsConfig(TypedDict, total=False):
    """Default settings applied to every search.

    Attributes:
        project_dir: Unity project directory (contains Assets/).
        roots: Root directories to search, relative to project_dir.
        extensions: File extensions to search, without leading dot.
        max_results: Result cap per search.
        max_workers: Number of concurrent search processes.
        history_limit: Number of past searches kept in history.
        log_level: Logging level name (DEBUG, INFO, WARNING, ...).
    """

    project_dir: str
    roots: list[str]
    extensions: list[str]
    max_results: int
    max_workers: int
    history_limit: int
    log_level: str


class QuickrefConfig(TypedDict, total=False):
    """Root configuration structure.

    Attributes:
        defaults: Default settings for all operations.
    """

    defaults: DefaultsConfig
