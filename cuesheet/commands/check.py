"""Validate cue sheets and report every problem found."""

from __future__ import annotations

from pathlib import Path

import click

from cuesheet.cli import Context, pass_context
from cuesheet.commands._common import EXIT_INVALID_SHEET, load_sheet
from cuesheet.utils.output import error, success, verbose


@click.command("check")
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--encoding",
    "-e",
    default=None,
    help="Character encoding of the cue files (default: auto-detect)",
)
@pass_context
def cli(ctx: Context, files: tuple[Path, ...], encoding: str | None) -> None:
    """Validate CUE sheets.

    Parses each FILE and prints every syntax or format problem as
    path:line:column. Exits with code 1 if any sheet is invalid.

    Examples:

    \b
      cuesheet check album.cue
      cuesheet check --encoding cp1252 *.cue
    """
    config = ctx.get_config()
    failed = 0

    for path in files:
        disc = load_sheet(path, config, encoding)
        if disc is None:
            failed += 1
            continue
        verbose(f"{path}: {len(disc.tracks)} track(s)")
        if not ctx.quiet:
            success(f"OK: {path}")

    if failed:
        error(f"{failed} of {len(files)} sheet(s) invalid")
        raise SystemExit(EXIT_INVALID_SHEET)
