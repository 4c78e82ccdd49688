"""
Agent Pro data resource helpers.

Provides utilities for accessing bundled configuration files, schemas and the
bundled resource tree using importlib.resources.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/agentpro/data/config/defaults.yaml')
    """
    pkg = resources.files("agentpro.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


def get_bundled_resources_path() -> Path:
    """Return the bundled category/document tree shipped with the package."""
    return get_data_path("resources")


@lru_cache(maxsize=64)
def read_json(subpackage: str, filename: str) -> dict[str, Any]:
    """Read and parse a JSON data file (cached)."""
    path = get_data_path(subpackage, filename)
    return json.loads(path.read_text(encoding="utf-8"))


def clear_caches() -> None:
    """Clear all read caches."""
    read_json.cache_clear()


__all__ = [
    "get_data_path",
    "get_bundled_resources_path",
    "read_json",
    "clear_caches",
]
