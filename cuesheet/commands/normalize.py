"""Rewrite a cue sheet in normalized form."""

from __future__ import annotations

from pathlib import Path

import click

from cuesheet.cli import Context, pass_context
from cuesheet.commands._common import EXIT_INVALID_SHEET, load_sheet
from cuesheet.cue.writer import dumps
from cuesheet.utils.fileops import atomic_write
from cuesheet.utils.output import error, success


@click.command("format")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout",
)
@click.option(
    "--encoding",
    "-e",
    default=None,
    help="Character encoding of the cue file (default: auto-detect)",
)
@pass_context
def cli(ctx: Context, file: Path, output: Path | None, encoding: str | None) -> None:
    """Re-emit a valid CUE sheet with normalized layout.

    Commands are written in a fixed order with two-space indentation for
    TRACK lines and four for track properties. The sheet is validated
    first; invalid sheets are reported and not written.
    """
    disc = load_sheet(file, ctx.get_config(), encoding)
    if disc is None:
        raise SystemExit(EXIT_INVALID_SHEET)

    try:
        text = dumps(disc)
    except ValueError as e:
        error(str(e))
        raise SystemExit(EXIT_INVALID_SHEET)

    if output is None:
        click.echo(text, nl=False)
        return

    try:
        atomic_write(output, text)
    except OSError as e:
        error(f"Failed to write {output}: {e}")
        raise SystemExit(EXIT_INVALID_SHEET)

    if not ctx.quiet:
        success(f"Wrote {output}")
