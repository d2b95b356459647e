"""Locate the serialized object that owns a line in a Unity YAML file.

Scenes, prefabs and other serialized assets are multi-document YAML
files. Each document starts with a header naming the object's class ID
and its local file identifier:

    --- !u!114 &1234567890
    MonoBehaviour:
      m_Script: {fileID: 11500000, guid: 8f1e0c6b2a9d4e3f9a7b6c5d4e3f2a1b, type: 3}

Given the line numbers of search hits, we report which object (fileID)
each hit belongs to.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

NO_ANCHOR = -1

_DOCUMENT_HEADER = re.compile(r"^--- !u!\d+ &(-?\d+)")


def find_anchors(file_path: Path, line_numbers: list[int]) -> list[int]:
    """Return the fileID of the document enclosing each line.

    Args:
        file_path: Serialized Unity file to read.
        line_numbers: 1-based line numbers, in any order.

    Returns:
        One fileID per input line number, in the same order. NO_ANCHOR is
        used for lines before the first document header, past the end of
        the file, or when the file cannot be read.
    """
    if not line_numbers:
        return []

    try:
        with open(file_path, encoding="utf-8", errors="replace") as f:
            headers = _scan_headers(f, max(line_numbers))
    except OSError as e:
        logger.warning("Cannot read %s for anchors: %s", file_path, e)
        return [NO_ANCHOR] * len(line_numbers)

    return [_anchor_for_line(headers, line) for line in line_numbers]


def _scan_headers(lines, last_line: int) -> list[tuple[int, int]]:
    """Collect (line_number, file_id) for headers up to last_line."""
    headers = []
    line_number = 0
    for line_number, text in enumerate(lines, start=1):
        if line_number > last_line:
            break
        match = _DOCUMENT_HEADER.match(text)
        if match:
            headers.append((line_number, int(match.group(1))))
    headers.append((line_number + 1, NO_ANCHOR))  # end-of-scan sentinel
    return headers


def _anchor_for_line(headers: list[tuple[int, int]], line: int) -> int:
    anchor = NO_ANCHOR
    for header_line, file_id in headers:
        if header_line > line:
            break
        anchor = file_id
    return anchor
