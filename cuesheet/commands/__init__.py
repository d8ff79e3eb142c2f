"""Sheet commands.

Every public module in this package exposes its click command as ``cli``;
the root group picks them up through :func:`discover_commands`.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil

import click

logger = logging.getLogger(__name__)


def _command_modules() -> list[str]:
    """Names of the public modules in this package, sorted."""
    return sorted(
        info.name for info in pkgutil.iter_modules(__path__) if not info.name.startswith("_")
    )


def discover_commands() -> list[click.Command]:
    """Import each command module and collect its ``cli`` command.

    Modules without a click command named ``cli`` are skipped.
    """
    commands: list[click.Command] = []
    for name in _command_modules():
        module = importlib.import_module(f"{__name__}.{name}")
        command = getattr(module, "cli", None)
        if not isinstance(command, click.Command):
            logger.debug("Module %s defines no command", name)
            continue
        commands.append(command)
    return commands
