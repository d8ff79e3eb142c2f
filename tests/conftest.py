"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[parser]
require_sequential_tracks = false

[reader]
encoding = "cp1252"

[display]
colored_output = true
""")
    return config_path


@pytest.fixture
def write_cue(temp_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes cue text to a file in temp_dir."""

    def _write(content: str, name: str = "test.cue", encoding: str = "utf-8") -> Path:
        cue_file = temp_dir / name
        cue_file.write_bytes(content.encode(encoding))
        return cue_file

    return _write
