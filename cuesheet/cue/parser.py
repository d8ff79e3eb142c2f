"""CUE sheet parser.

Public entry points: :func:`parse` for text already in memory and
:func:`parse_file` for sheets on disk. Parsing is all-or-nothing: either a
fully validated :class:`Disc` is returned or a :class:`CueParseError` is
raised.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cuesheet.cue.builder import build_disc
from cuesheet.cue.models import Disc
from cuesheet.exceptions import CueReadError
from cuesheet.grammar.parser import parse_syntax

logger = logging.getLogger(__name__)


def parse(text: str, *, require_sequential_tracks: bool = True) -> Disc:
    """Parse CUE sheet text into a Disc.

    Args:
        text: The complete sheet.
        require_sequential_tracks: Reject sheets whose track numbers do not
            start at 1 and strictly increase.

    Returns:
        The validated Disc.

    Raises:
        CueSyntaxError: If the text does not match the CUE grammar.
        CueSemanticError: If the sheet breaks the format rules; carries
            every problem found.
    """
    syntax = parse_syntax(text)
    disc = build_disc(syntax, require_sequential_tracks=require_sequential_tracks)
    logger.debug("Parsed cue sheet with %d track(s)", len(disc.tracks))
    return disc


def read_cue_text(path: Path, encoding: str | None = None) -> str:
    """Read a cue file with encoding fallback."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise CueReadError(path, e.strerror or str(e)) from e

    if encoding is not None:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise CueReadError(path, f"cannot decode with encoding '{encoding}': {e}") from e

    # Fallback chain: UTF-8 (BOM stripped) → CP1252 → Latin-1
    # CP1252 is tried before Latin-1 because it's a superset that handles
    # Windows-generated cue files with smart quotes and other extended chars.
    # Latin-1 is last resort as it accepts any byte sequence.
    for enc in ("utf-8-sig", "cp1252", "latin-1"):
        try:
            text = data.decode(enc)
        except UnicodeDecodeError:
            continue
        logger.debug("Decoded %s as %s", path, enc)
        return text

    raise CueReadError(
        path,
        "failed with UTF-8, CP1252, and Latin-1 encodings. "
        "Use --encoding to specify the correct encoding.",
    )


def parse_file(
    path: str | Path,
    encoding: str | None = None,
    *,
    require_sequential_tracks: bool = True,
) -> Disc:
    """Read and parse a .cue file.

    Args:
        path: Path to the .cue file.
        encoding: Character encoding. If None, tries UTF-8, CP1252 then Latin-1.
        require_sequential_tracks: See :func:`parse`.

    Raises:
        CueReadError: If the file cannot be read or decoded.
        CueParseError: If the sheet cannot be parsed.
    """
    text = read_cue_text(Path(path), encoding)
    return parse(text, require_sequential_tracks=require_sequential_tracks)
