"""Data models for reference search."""

from collections.abc import Hashable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

MIN_SEARCH_LENGTH = 3
MAX_RESULTS = 500


@dataclass(frozen=True)
class SearchRequest:
    """What to search for and where.

    Extensions are stored without a leading dot; "prefab" and ".prefab"
    are treated the same.
    """

    search_text: str
    root_directories: tuple[Path, ...]
    file_extensions: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(
            self, "root_directories", tuple(Path(r) for r in self.root_directories)
        )
        object.__setattr__(
            self,
            "file_extensions",
            tuple(ext.lstrip(".") for ext in self.file_extensions if ext.lstrip(".")),
        )


@dataclass(frozen=True)
class Invocation:
    """One search-tool run scoped to a single root and extension."""

    root: Path
    extension: str
    argv: tuple[str, ...]


@dataclass
class InvocationOutput:
    """Captured result of one invocation.

    ``stdout`` has its line endings normalized to "\\n". A failed
    invocation carries empty ``stdout`` and a description in ``error``.
    """

    invocation: Invocation
    stdout: str = ""
    ok: bool = True
    error: str = ""
    tool_missing: bool = False


@dataclass
class SearchResult:
    """Aggregate outcome of one reference search.

    ``matched`` holds resolved entities and ``unresolved`` holds raw
    ``path:line`` strings for hits outside any tracked asset. Both lists
    are duplicate-free and keep first-seen order. Together they never
    exceed the result cap.
    """

    search_text: str
    target: Hashable | None = None
    matched: list = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)
    hit_lines: dict = field(default_factory=dict)  # entity -> [line, ...]
    truncated: bool = False
    cancelled: bool = False
    unavailable: bool = False
    failed_invocations: int = 0
    duration: float = 0.0
    searched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self) -> int:
        """Number of entries across both result lists."""
        return len(self.matched) + len(self.unresolved)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "search_text": self.search_text,
            "target": _entity_to_json(self.target),
            "matched": [
                {**_entity_to_json(e), "lines": self.hit_lines.get(e, [])}
                for e in self.matched
            ],
            "unresolved": list(self.unresolved),
            "truncated": self.truncated,
            "cancelled": self.cancelled,
            "unavailable": self.unavailable,
            "failed_invocations": self.failed_invocations,
            "duration": round(self.duration, 3),
            "searched_at": self.searched_at.isoformat(),
        }


def _entity_to_json(entity) -> dict | None:
    if entity is None:
        return None
    if hasattr(entity, "to_dict"):
        return entity.to_dict()
    return {"path": str(entity)}
