"""CUE sheet model, validation, parsing and writing."""

from cuesheet.cue.builder import ModelBuilder, build_disc
from cuesheet.cue.models import (
    Disc,
    FileFormat,
    FileRef,
    Index,
    Time,
    Track,
    TrackFlag,
    TrackMode,
)
from cuesheet.cue.parser import parse, parse_file
from cuesheet.cue.writer import dumps

__all__ = [
    "Disc",
    "FileFormat",
    "FileRef",
    "Index",
    "ModelBuilder",
    "Time",
    "Track",
    "TrackFlag",
    "TrackMode",
    "build_disc",
    "dumps",
    "parse",
    "parse_file",
]
