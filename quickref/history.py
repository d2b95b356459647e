"""Search history.

Keeps a bounded, newest-first log of past searches so results can be
revisited without re-running the search tool.

History is stored in ~/.config/quickref/history.json
"""

import json
import logging
from pathlib import Path

from quickref.config.paths import HISTORY_FILE
from quickref.search.models import SearchResult

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class SearchHistory:
    """Bounded log of past search results.

    Entries are the JSON form of SearchResult (see SearchResult.to_dict),
    newest first. Index 0 is the most recent search.

    Example:
        history = SearchHistory()
        history.add(result)
        latest = history.entries()[0]
        history.remove(3)
    """

    def __init__(self, path: Path | None = None, limit: int = DEFAULT_HISTORY_LIMIT):
        self._path = path or HISTORY_FILE
        self._limit = max(1, limit)
        self._entries: list[dict] | None = None

    @property
    def path(self) -> Path:
        """Get the path to the history file."""
        return self._path

    def load(self) -> list[dict]:
        """Load history from disk.

        Returns:
            List of entries, empty if the file is missing or corrupted.
        """
        if not self._path.exists():
            self._entries = []
            return self._entries

        try:
            data = json.loads(self._path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable history file %s: %s", self._path, e)
            data = []

        if not isinstance(data, list):
            data = []

        self._entries = [entry for entry in data if isinstance(entry, dict)]
        return self._entries

    def entries(self) -> list[dict]:
        """Return a copy of all entries, newest first."""
        if self._entries is None:
            self.load()
        return list(self._entries)

    def add(self, result: SearchResult) -> None:
        """Record a search, dropping the oldest entries beyond the limit."""
        entries = [result.to_dict(), *self.entries()]
        self._save(entries[: self._limit])

    def remove(self, index: int) -> dict:
        """Remove one entry by position.

        Returns:
            The removed entry.

        Raises:
            IndexError: If no entry exists at ``index``.
        """
        entries = self.entries()
        if not 0 <= index < len(entries):
            raise IndexError(f"No history entry at index {index}")

        removed = entries[index]
        self._save(entries[:index] + entries[index + 1 :])
        return removed

    def clear(self) -> None:
        """Delete all history."""
        if self._path.exists():
            self._path.unlink()
        self._entries = []

    def _save(self, entries: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        self._path.write_text(json.dumps(entries, indent=2))
        self._entries = entries
