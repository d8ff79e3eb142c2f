"""cuesheet: parse and validate CUE sheets."""

from cuesheet.cue import (
    Disc,
    FileFormat,
    FileRef,
    Index,
    Time,
    Track,
    TrackFlag,
    TrackMode,
    dumps,
    parse,
    parse_file,
)
from cuesheet.exceptions import (
    CueParseError,
    CueReadError,
    CueSemanticError,
    CueSheetError,
    CueSyntaxError,
    IssueKind,
    Position,
    SemanticIssue,
)

__version__ = "0.1.0"

__all__ = [
    "CueParseError",
    "CueReadError",
    "CueSemanticError",
    "CueSheetError",
    "CueSyntaxError",
    "Disc",
    "FileFormat",
    "FileRef",
    "Index",
    "IssueKind",
    "Position",
    "SemanticIssue",
    "Time",
    "Track",
    "TrackFlag",
    "TrackMode",
    "__version__",
    "dumps",
    "parse",
    "parse_file",
]
