"""Serialize a Disc back to CUE sheet text."""

from __future__ import annotations

from cuesheet.cue.models import Disc, FileRef, Track, TrackFlag

_TRACK_INDENT = "  "
_PROPERTY_INDENT = "    "


def _quote(value: str) -> str:
    if '"' in value or "\n" in value or "\r" in value:
        raise ValueError(f"Cannot write {value!r}: quotes and line breaks are not representable")
    return f'"{value}"'


def _file_line(ref: FileRef) -> str:
    if ref.format is None:
        return f"FILE {_quote(ref.path)}"
    return f"FILE {_quote(ref.path)} {ref.format.value}"


def _text_lines(owner: Disc | Track) -> list[str]:
    lines = []
    for keyword, value in (
        ("PERFORMER", owner.performer),
        ("SONGWRITER", owner.songwriter),
        ("TITLE", owner.title),
        ("ARRANGER", owner.arranger),
    ):
        if value is not None:
            lines.append(f"{keyword} {_quote(value)}")
    return lines


def _remark_lines(remarks: tuple[str, ...]) -> list[str]:
    return [f"REM {remark}" if remark else "REM" for remark in remarks]


def _track_lines(track: Track) -> list[str]:
    lines = [f"TRACK {track.number:02d} {track.mode.value}"]
    body: list[str] = []
    if track.file is not None:
        body.append(_file_line(track.file))
    if track.flags:
        # Stable order regardless of how FLAGS was written
        flags = [flag.value for flag in TrackFlag if flag in track.flags]
        body.append("FLAGS " + " ".join(flags))
    body.extend(_text_lines(track))
    if track.isrc is not None:
        body.append(f"ISRC {track.isrc}")
    body.extend(_remark_lines(track.remarks))
    if track.pregap is not None:
        body.append(f"PREGAP {track.pregap}")
    for idx in track.indices:
        body.append(f"INDEX {idx.number:02d} {idx.time}")
    if track.postgap is not None:
        body.append(f"POSTGAP {track.postgap}")
    lines.extend(_PROPERTY_INDENT + line for line in body)
    return [_TRACK_INDENT + lines[0], *lines[1:]]


def dumps(disc: Disc) -> str:
    """Render a Disc as normalized CUE sheet text.

    Global commands come first, then each track with its properties
    indented. Times keep the form they were parsed in. Parsing the output
    yields a Disc equal to the input.

    Raises:
        ValueError: If a text field contains a quote or a line break.
    """
    lines = _remark_lines(disc.remarks)
    if disc.catalog is not None:
        lines.append(f"CATALOG {disc.catalog}")
    if disc.cd_text_file is not None:
        lines.append(f"CDTEXTFILE {_quote(disc.cd_text_file)}")
    lines.extend(_text_lines(disc))
    if disc.file is not None:
        lines.append(_file_line(disc.file))
    for track in disc.tracks:
        lines.extend(_track_lines(track))
    return "\n".join(lines) + "\n"
