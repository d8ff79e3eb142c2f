"""Display the layout of a cue sheet."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from rich.markup import escape

from cuesheet.cli import Context, pass_context
from cuesheet.commands._common import EXIT_INVALID_SHEET, load_sheet
from cuesheet.cue.models import Disc, FileRef, Time
from cuesheet.utils.output import console, create_table


def _file_dict(ref: FileRef | None) -> dict[str, Any] | None:
    if ref is None:
        return None
    return {"path": ref.path, "format": ref.format.value if ref.format else None}


def _time_value(time: Time | None) -> int | None:
    return time.total_frames if time is not None else None


def disc_to_dict(disc: Disc) -> dict[str, Any]:
    """Convert a Disc into JSON-serializable data. Times are frame counts."""
    return {
        "catalog": disc.catalog,
        "cd_text_file": disc.cd_text_file,
        "file": _file_dict(disc.file),
        "performer": disc.performer,
        "songwriter": disc.songwriter,
        "title": disc.title,
        "arranger": disc.arranger,
        "remarks": list(disc.remarks),
        "tracks": [
            {
                "number": track.number,
                "mode": track.mode.value,
                "file": _file_dict(track.file),
                "flags": sorted(flag.value for flag in track.flags),
                "performer": track.performer,
                "songwriter": track.songwriter,
                "title": track.title,
                "arranger": track.arranger,
                "isrc": track.isrc,
                "pregap": _time_value(track.pregap),
                "postgap": _time_value(track.postgap),
                "remarks": list(track.remarks),
                "indices": [
                    {"number": idx.number, "frames": idx.time.total_frames}
                    for idx in track.indices
                ],
            }
            for track in disc.tracks
        ],
    }


def _print_disc(disc: Disc) -> None:
    for label, value in (
        ("Title", disc.title),
        ("Performer", disc.performer),
        ("Songwriter", disc.songwriter),
        ("Catalog", disc.catalog),
    ):
        if value is not None:
            console.print(f"[bold]{label}:[/bold] {escape(value)}")

    table = create_table(show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Mode")
    table.add_column("Start")
    table.add_column("Title", style="track.title")
    table.add_column("Performer")
    table.add_column("File")

    for track, ref in disc.track_files():
        start = track.start
        table.add_row(
            f"{track.number:02d}",
            track.mode.value,
            start.format_msf() if start is not None else "",
            escape(track.title or ""),
            escape(track.performer or disc.performer or ""),
            escape(ref.path) if ref is not None else "",
        )

    console.print(table)


@click.command("show")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--encoding",
    "-e",
    default=None,
    help="Character encoding of the cue file (default: auto-detect)",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the parsed sheet as JSON")
@pass_context
def cli(ctx: Context, file: Path, encoding: str | None, as_json: bool) -> None:
    """Show disc metadata and the track list of a CUE sheet."""
    disc = load_sheet(file, ctx.get_config(), encoding)
    if disc is None:
        raise SystemExit(EXIT_INVALID_SHEET)

    if as_json:
        click.echo(json.dumps(disc_to_dict(disc), indent=2, ensure_ascii=False))
        return

    _print_disc(disc)
