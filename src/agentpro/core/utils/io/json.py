"""JSON state files: shared-lock reads, locked atomic writes."""
from __future__ import annotations

import fcntl
import json
from pathlib import Path
from typing import Any

from .core import ENCODING, atomic_write
from .locking import acquire_file_lock

LOCK_TIMEOUT_SECONDS = 5.0

_MISSING = object()


def read_json(file_path: Path | str, *, default: Any = _MISSING) -> Any:
    """Load ``file_path``; return ``default`` when it does not exist, if given.

    Raises:
        FileNotFoundError: the file is missing and no ``default`` was passed.
    """
    path = Path(file_path)
    if not path.exists():
        if default is _MISSING:
            raise FileNotFoundError(f"JSON file not found: {path}")
        return default

    with open(path, "r", encoding=ENCODING) as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        try:
            return json.load(f)
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def write_json_atomic(file_path: Path | str, data: Any) -> None:
    """Write ``data`` as indented, key-sorted JSON under the file's ``.lock``.

    A lock that stays busy past ``LOCK_TIMEOUT_SECONDS`` is skipped rather than
    failing the write; the atomic replace still keeps readers consistent.
    """
    path = Path(file_path)
    atomic_write(
        path,
        lambda f: json.dump(data, f, indent=2, sort_keys=True, ensure_ascii=False),
        lock_cm=acquire_file_lock(path, timeout=LOCK_TIMEOUT_SECONDS, fail_open=True),
    )


__all__ = ["read_json", "write_json_atomic"]
