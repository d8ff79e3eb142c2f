"""Command-line interface for cuesheet."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from rich.logging import RichHandler

from cuesheet import __version__
from cuesheet.config import Config, load_config
from cuesheet.exceptions import ConfigError
from cuesheet.utils.output import (
    error,
    error_console,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """State shared by the sheet commands: loaded config and output mode."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    def get_config(self) -> Config:
        """Return the loaded config, or defaults when run without the group."""
        if self.config is None:
            self.config = Config()
        return self.config


pass_context = click.make_pass_decorator(Context, ensure=True)


def _setup_logging(debug: bool) -> None:
    """Route library log records through rich when debugging."""
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


def _color_disabled(no_color: bool) -> bool:
    """--no-color and the NO_COLOR convention both turn colors off."""
    return no_color or os.environ.get("NO_COLOR") is not None


def _load_into(app_ctx: Context, config_path: Path | None, *, color_forced_off: bool) -> None:
    """Load the config file into the context and apply its display settings.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    loaded, warnings = load_config(config_path)
    app_ctx.config = loaded

    if not color_forced_off and not loaded.colored_output:
        set_color(False)

    # A missing config file is the common case; only mention it on request
    if app_ctx.verbose and not app_ctx.quiet:
        for message in warnings:
            warning(message)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/cuesheet/config.toml)",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log parser internals to stderr (implies --verbose)",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Suppress non-error output")
@click.version_option(version=__version__, prog_name="cuesheet")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """cuesheet: Parse and validate CUE sheets.

    Reads .cue files describing the track layout of CD images, checks
    them against the CUE format rules and reports every problem with
    its line and column.

    Configuration is loaded from ~/.config/cuesheet/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Validate sheets
        cuesheet check album.cue other.cue

        # Show the track layout
        cuesheet show album.cue
    """
    app_ctx = ctx.ensure_object(Context)
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug)
    _setup_logging(debug)

    color_off = _color_disabled(no_color)
    if color_off:
        set_color(False)

    try:
        _load_into(app_ctx, config, color_forced_off=color_off)
    except ConfigError as e:
        error(str(e), hint="Fix the file or regenerate it with: cuesheet init-config --force")
        ctx.exit(1)


@cli.command("help")
@click.argument("command", required=False)
@click.pass_context
def help_cmd(ctx: click.Context, command: str | None) -> None:
    """Show help for COMMAND, or for cuesheet itself."""
    if command is None:
        click.echo(cli.get_help(ctx.parent or ctx))
        return

    target = cli.get_command(ctx, command)
    if target is None:
        error(f"Unknown command: {command}", hint="Run 'cuesheet help' for the list")
        ctx.exit(1)
        return

    with click.Context(target, info_name=command, parent=ctx.parent) as sub_ctx:
        click.echo(target.get_help(sub_ctx))


def register_commands() -> None:
    """Attach the discovered sheet commands to the root group."""
    from cuesheet.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


register_commands()
