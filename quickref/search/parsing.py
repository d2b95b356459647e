"""Parsing of search-tool output.

Both grep -n and findstr /N print one hit per line:

    /proj/Assets/Player.prefab:42:  m_Script: {fileID: 11500000, guid: ...}
    C:\\proj\\Assets\\Player.prefab:42:  m_Script: ...

The content part may itself contain colons, and so may a POSIX file
name. The path ends at the first ":<digits>:" separator.
"""

import re
from dataclasses import dataclass
from pathlib import Path

# "C:\" or "C:/" at the start of a Windows path
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:[\\/]")
_HIT_LINE = re.compile(r"(.+?):(\d+):(.*)")


@dataclass(frozen=True)
class Hit:
    """One parsed line of search output."""

    path: str  # path exactly as printed by the tool
    line: int
    content: str

    @property
    def raw(self) -> str:
        """The ``path:line`` form used for unresolved results."""
        return f"{self.path}:{self.line}"


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse_line(line: str) -> Hit | None:
    """Split one ``path:line:content`` line.

    Returns:
        The parsed hit, or None when the line has no ":<line>:" separator.
    """
    match = _HIT_LINE.fullmatch(line)
    if match is None:
        return None

    path, line_number, content = match.groups()
    return Hit(path=path, line=int(line_number), content=content)


def parse_output(text: str):
    """Yield hits from search output, skipping blank and malformed lines."""
    for line in normalize_line_endings(text).split("\n"):
        if not line:
            continue
        hit = parse_line(line)
        if hit is not None:
            yield hit


def normalize_separators(path: str) -> str:
    """Use forward slashes throughout."""
    return path.replace("\\", "/")


def to_logical_path(path: str, roots: list[Path]) -> str:
    """Rewrite an absolute hit path into the project's logical form.

    The parent directory of the longest matching root is stripped, so a
    hit under root ``/proj/Assets`` becomes ``Assets/...``. Paths outside
    every root are returned with normalized separators only.
    """
    normalized = normalize_separators(path)
    best = None
    for root in roots:
        root_str = normalize_separators(str(root)).rstrip("/")
        if _is_under(normalized, root_str) and (
            best is None or len(root_str) > len(best)
        ):
            best = root_str

    if best is None:
        return normalized

    parent = best.rsplit("/", 1)[0] if "/" in best else ""
    if not parent:
        return normalized.lstrip("/")
    return normalized[len(parent) :].lstrip("/")


def _is_under(path: str, root: str) -> bool:
    if _DRIVE_PREFIX.match(root):
        # Windows paths compare case-insensitively
        path, root = path.lower(), root.lower()
    return path == root or path.startswith(root + "/")
