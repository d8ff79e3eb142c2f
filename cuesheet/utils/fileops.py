"""File writing helpers for generated sheets and config files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write(path: Path, content: str, *, encoding: str = "utf-8", mode: int = 0o644) -> None:
    """Write content to *path* atomically.

    Creates the parent directory if it doesn't exist. Uses a temporary
    file in the same directory and an atomic rename so readers never see
    a partially-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".tmp")
    try:
        os.fchmod(fd, mode)
        with open(fd, "w", encoding=encoding, newline="") as f:
            f.write(content)
        Path(tmp_path).replace(path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise
