"""Helpers shared by the sheet commands."""

from __future__ import annotations

from pathlib import Path

from cuesheet.config import Config
from cuesheet.cue.models import Disc
from cuesheet.cue.parser import parse_file
from cuesheet.exceptions import (
    CueParseError,
    CueReadError,
    CueSemanticError,
    CueSyntaxError,
)
from cuesheet.utils.output import debug, error, print_location

# Exit codes
EXIT_INVALID_SHEET = 1


def report_parse_error(path: Path, exc: CueParseError) -> None:
    """Print every diagnostic carried by a parse error."""
    if isinstance(exc, CueSemanticError):
        for issue in exc.issues:
            print_location(str(path), issue.position.line, issue.position.column, issue.message)
    elif isinstance(exc, CueSyntaxError):
        print_location(str(path), exc.position.line, exc.position.column, exc.detail)
    else:
        error(f"{path}: {exc}")


def load_sheet(path: Path, config: Config, encoding: str | None = None) -> Disc | None:
    """Parse a sheet with the configured options, reporting failures.

    Returns:
        The Disc, or None when the file could not be read or parsed.
    """
    debug(f"Parsing {path} (encoding: {encoding or config.encoding or 'auto'})")
    try:
        return parse_file(
            path,
            encoding=encoding or config.encoding,
            require_sequential_tracks=config.require_sequential_tracks,
        )
    except CueReadError as e:
        error(str(e))
    except CueParseError as e:
        report_parse_error(path, e)
    return None
