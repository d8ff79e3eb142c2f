"""Syntax tree data classes for parsed CUE sheets.

These nodes mirror the statement structure of the sheet and carry the
source position of every statement. Values are raw: nothing here has been
checked against the CUE format rules yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Keywords that may only appear inside a TRACK block
TRACK_ONLY_KEYWORDS: frozenset[str] = frozenset(
    {"FLAGS", "INDEX", "ISRC", "PREGAP", "POSTGAP"}
)

# Keywords that may only appear before the first TRACK command
GLOBAL_ONLY_KEYWORDS: frozenset[str] = frozenset({"CATALOG", "CDTEXTFILE"})


@dataclass
class RawTime:
    """A time value as written: either ``mm:ss:ff`` or a bare frame count.

    Exactly one of ``components`` and ``frames`` is set.
    """

    text: str
    components: tuple[int, int, int] | None = None
    frames: int | None = None


@dataclass
class Statement:
    """One CUE command with its arguments.

    ``args`` by keyword:
        - ``CATALOG``, ``ISRC``: ``(code,)``
        - ``CDTEXTFILE``, ``PERFORMER``, ``SONGWRITER``, ``TITLE``,
          ``ARRANGER``, ``REM``: ``(text,)``
        - ``FILE``: ``(path, format_or_None)``
        - ``FLAGS``: one string per flag
        - ``INDEX``: ``(number, RawTime_or_None)``
        - ``PREGAP``, ``POSTGAP``: ``(RawTime,)``
        - ``TRACK``: ``(number, mode)``
    """

    keyword: str
    args: tuple[Any, ...]
    line: int
    column: int
    offset: int


@dataclass
class TrackBlock:
    """A ``TRACK`` command and the statements that belong to it."""

    command: Statement
    statements: list[Statement] = field(default_factory=list)


@dataclass
class SheetSyntax:
    """Top-level syntax tree: global statements then the track blocks."""

    global_statements: list[Statement] = field(default_factory=list)
    tracks: list[TrackBlock] = field(default_factory=list)
