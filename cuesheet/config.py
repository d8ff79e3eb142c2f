"""Configuration management for cuesheet."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cuesheet.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "cuesheet" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        require_sequential_tracks: Reject sheets whose track numbers do not
            start at 1 and strictly increase.
        encoding: Character encoding of cue files. None means auto-detect
            (UTF-8, then CP1252, then Latin-1).
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    require_sequential_tracks: bool = True
    encoding: str | None = None
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if self.encoding is not None:
            try:
                codecs.lookup(self.encoding)
            except LookupError:
                raise ConfigValidationError(
                    "reader.encoding", self.encoding, "unknown encoding"
                ) from None

        if not self.require_sequential_tracks:
            warnings.append("Track order checks are disabled (parser.require_sequential_tracks)")

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: cuesheet init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [parser] section
    parser = data.get("parser", {})
    if "require_sequential_tracks" in parser:
        value = parser["require_sequential_tracks"]
        if not isinstance(value, bool):
            raise ConfigValidationError(
                "parser.require_sequential_tracks", value, "must be a boolean"
            )
        config.require_sequential_tracks = value

    # Parse [reader] section
    reader = data.get("reader", {})
    if "encoding" in reader:
        value = reader["encoding"]
        if not isinstance(value, str):
            raise ConfigValidationError("reader.encoding", value, "must be a string")
        config.encoding = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config
