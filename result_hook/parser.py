"""Result screenshot filename parser.

Screenshots are saved with names such as::

    Title Here FULL COMBO A 1700000000_123.png
    20240101_123456_Title Here HARD CLEAR AA.png

The parser pulls the pieces out in a fixed order (timestamp, rank, clear
type) and whatever text is left over is the chart title.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

# A trailing "_" separator is swallowed with the timestamp
_TIMESTAMP_RE = re.compile(r"(\d+_\d+)_?", re.ASCII)
_RANK_RE = re.compile(r"\s[A-F]+$", re.ASCII)
# Order matters: the first alternative that matches wins
_CLEAR_TYPE_RE = re.compile(
    r"PERFECT"
    r"|FULL COMBO"
    r"|LIGHT ASSIST EASY CLEAR"
    r"|EXHARD CLEAR"
    r"|HARD CLEAR"
    r"|EASY CLEAR"
    r"|FAILED"
    r"|CLEAR$",
    re.ASCII,
)

CLEAR_TYPES = (
    "PERFECT",
    "FULL COMBO",
    "LIGHT ASSIST EASY CLEAR",
    "EXHARD CLEAR",
    "HARD CLEAR",
    "EASY CLEAR",
    "FAILED",
    "CLEAR",
)


@dataclass(frozen=True)
class ParsedResult:
    """Fields read from a result screenshot's filename."""

    title: str
    rank: str
    clear_type: str
    timestamp: str

    def upload_name(self, ext: str) -> str:
        """Return the attachment filename, ``<timestamp><ext>``."""
        return f"{self.timestamp}{ext}"


@dataclass(frozen=True)
class ParseFailure:
    """The filename is not a result screenshot."""

    reason: str

    def __bool__(self) -> bool:
        return False


def parse_filename(filename: str) -> ParsedResult | ParseFailure:
    """Parse a bare *filename* into a ``ParsedResult``.

    Returns a ``ParseFailure`` (which is falsy) when any of the three
    required pieces is missing.  Matching is case-sensitive.
    """
    stem, _ext = os.path.splitext(filename)

    match = _TIMESTAMP_RE.search(stem)
    if match is None:
        return ParseFailure("no timestamp")
    timestamp = match.group(1)
    rest = _TIMESTAMP_RE.sub("", stem).strip()

    match = _RANK_RE.search(rest)
    if match is None:
        return ParseFailure("no rank")
    rank = match.group(0).strip()
    rest = _RANK_RE.sub("", rest)

    match = _CLEAR_TYPE_RE.search(rest)
    if match is None:
        return ParseFailure("no clear type")
    clear_type = match.group(0)
    title = _CLEAR_TYPE_RE.sub("", rest).strip()

    return ParsedResult(
        title=title,
        rank=rank,
        clear_type=clear_type,
        timestamp=timestamp,
    )
