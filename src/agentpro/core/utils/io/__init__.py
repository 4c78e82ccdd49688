"""File I/O helpers shared by state, config and export code.

- core: atomic text writes, directory creation
- json: locked JSON state files
- yaml: configuration reads and YAML rendering
- locking: advisory ``fcntl`` locks with timeouts
"""
from __future__ import annotations

from .core import atomic_write, ensure_directory, read_text, write_text
from .json import read_json, write_json_atomic
from .locking import LockTimeoutError, acquire_file_lock
from .yaml import dump_yaml_string, read_yaml

__all__ = [
    "atomic_write",
    "ensure_directory",
    "read_text",
    "write_text",
    "read_json",
    "write_json_atomic",
    "read_yaml",
    "dump_yaml_string",
    "acquire_file_lock",
    "LockTimeoutError",
]
