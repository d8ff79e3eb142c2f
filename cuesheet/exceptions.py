"""Exception hierarchy for cuesheet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CueSheetError(Exception):
    """Base exception for all cuesheet errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all cuesheet errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(CueSheetError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Reading Errors
class CueReadError(CueSheetError):
    """A cue file could not be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


# Time Errors
class InvalidTimeError(ValueError):
    """An MSF time component is out of range."""

    def __init__(self, component: str, value: int, limit: int) -> None:
        self.component = component
        self.value = value
        self.limit = limit
        super().__init__(f"{component} must be below {limit}, got {value}")


# Parse Errors
@dataclass(frozen=True)
class Position:
    """A location in the sheet text.

    ``line`` and ``column`` are 1-based, ``offset`` is the 0-based
    character offset into the input.
    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class IssueKind(str, Enum):
    """Semantic validation failures."""

    CATALOG_LENGTH = "catalog_length"
    CATALOG_CHARACTERS = "catalog_characters"
    ISRC_LENGTH = "isrc_length"
    ISRC_FORMAT = "isrc_format"
    TRACK_NUMBER_RANGE = "track_number_range"
    DUPLICATE_TRACK = "duplicate_track"
    TRACK_ORDER = "track_order"
    INDEX_NUMBER_RANGE = "index_number_range"
    DUPLICATE_INDEX = "duplicate_index"
    INDEX_ORDER = "index_order"
    MISSING_INDEX = "missing_index"
    MISSING_INDEX_TIME = "missing_index_time"
    TIME_RANGE = "time_range"
    TRACK_PROPERTY_OUTSIDE_TRACK = "track_property_outside_track"
    UNEXPECTED_STATEMENT = "unexpected_statement"


@dataclass(frozen=True)
class SemanticIssue:
    """One validation failure found by the model builder.

    ``component`` and ``value`` name the offending part of a value when the
    check can single one out, e.g. ``("frames", 80)`` for ``00:00:80``.
    """

    kind: IssueKind
    message: str
    position: Position
    component: str | None = None
    value: int | None = None

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"


class CueParseError(CueSheetError):
    """Raised when a cue sheet cannot be parsed."""

    position: Position | None = None


class CueSyntaxError(CueParseError):
    """The text does not match the CUE grammar.

    Attributes:
        position: Earliest failing position.
        expected: Human-readable descriptions of what would have been accepted.
        kind: ``unexpected_token``, ``unexpected_character``,
            ``unterminated_string`` or ``unexpected_end``.
        found: The offending text, empty at end of input.
    """

    def __init__(
        self,
        position: Position,
        expected: frozenset[str],
        kind: str,
        found: str = "",
    ) -> None:
        self.position = position
        self.expected = expected
        self.kind = kind
        self.found = found
        self.detail = self._describe()
        super().__init__(f"Syntax error at {position}: {self.detail}")

    def _describe(self) -> str:
        if self.kind == "unterminated_string":
            detail = "unterminated string"
        elif self.kind == "unexpected_end":
            detail = "unexpected end of input"
        else:
            detail = f"unexpected {self.found!r}"
        if self.expected:
            detail += f", expected one of: {', '.join(sorted(self.expected))}"
        return detail


class CueSemanticError(CueParseError):
    """The sheet is well formed but violates the CUE format rules.

    Carries every issue found in the sheet, ordered by position.
    """

    def __init__(self, issues: list[SemanticIssue]) -> None:
        self.issues = tuple(issues)
        first = self.issues[0]
        self.position = first.position
        self.kind = first.kind
        lines = [f"{len(self.issues)} semantic error(s) in cue sheet:"]
        lines.extend(f"  {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))

    @property
    def kinds(self) -> set[IssueKind]:
        return {issue.kind for issue in self.issues}
