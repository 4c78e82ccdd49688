"""Atomic file writes and directory helpers.

State files and exported resources are never written in place: content goes to
a sibling temp file, is fsync'd, then replaces the target in one ``os.replace``.
A reader therefore sees either the old file or the new one.
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Callable, ContextManager, Optional, TextIO

ENCODING = "utf-8"


def ensure_directory(path: Path | str) -> Path:
    """Create ``path`` (and parents) unless it already exists as a directory.

    Raises:
        NotADirectoryError: ``path`` exists but is a file.
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise NotADirectoryError(f"Path exists but is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: Path | str,
    write_fn: Callable[[TextIO], None],
    *,
    lock_cm: Optional[ContextManager[Any]] = None,
) -> None:
    """Let ``write_fn`` fill a temp file next to ``path``, then swap it in."""
    target = Path(path)
    ensure_directory(target.parent)

    tmp_name: Optional[str] = None
    try:
        with lock_cm or nullcontext():
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
            with os.fdopen(fd, "w", encoding=ENCODING) as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                write_fn(f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
            tmp_name = None
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass


def read_text(path: Path | str) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileNotFoundError: the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Text file not found: {path}")
    return path.read_text(encoding=ENCODING)


def write_text(path: Path | str, content: str) -> None:
    """Atomically replace ``path`` with ``content``."""
    atomic_write(path, lambda f: f.write(content))


__all__ = ["ENCODING", "ensure_directory", "atomic_write", "read_text", "write_text"]
