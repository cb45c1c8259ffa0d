"""Filesystem helpers for generated output."""

from __future__ import annotations

import shutil
import uuid
from pathlib import Path


def write_text_atomic(path: Path, text: str) -> None:
    """Write *text* to *path* so readers never observe a partial file.

    Parent directories are created as needed.  The content goes to a
    temporary sibling first and is renamed over *path*.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def empty_dir(path: Path) -> None:
    """Ensure *path* exists as a directory and remove everything inside it."""
    path.mkdir(parents=True, exist_ok=True)
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
