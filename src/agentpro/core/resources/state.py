"""Persisted per-user key/value state and the installed-version marker.

``KeyValueState`` is a small JSON-file memento (one object, string keys).
``VersionMarker`` wraps a single key of it as a versioned cache slot so the
"record only after the copy succeeded" rule lives in one place.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from agentpro.core.utils.io import read_json, write_json_atomic

logger = logging.getLogger(__name__)

INSTALLED_VERSION_KEY = "agentPro.installedVersion"
STATE_FILENAME = "state.json"


class KeyValueState:
    """JSON-file backed key/value store that survives across sessions."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        data = read_json(self.path, default={})
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed state file %s", self.path)
            return {}
        return data

    def keys(self) -> List[str]:
        return sorted(self._load().keys())

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def update(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``; ``None`` removes the key."""
        data = self._load()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        write_json_atomic(self.path, data)

    def delete(self, key: str) -> None:
        if key in self._load():
            self.update(key, None)


class VersionMarker:
    """Single-slot versioned cache over ``KeyValueState``.

    Invariant: when present, the stored value is the version whose install last
    completed. ``record`` must only be called after the copy has succeeded.
    """

    def __init__(self, state: KeyValueState, key: str = INSTALLED_VERSION_KEY) -> None:
        self.state = state
        self.key = key

    def get(self) -> Optional[str]:
        value = self.state.get(self.key)
        return str(value) if value is not None else None

    def is_stale(self, running_version: str) -> bool:
        return self.get() != running_version

    def record(self, version: str) -> None:
        self.state.update(self.key, str(version))

    def clear(self) -> None:
        self.state.delete(self.key)


__all__ = ["INSTALLED_VERSION_KEY", "STATE_FILENAME", "KeyValueState", "VersionMarker"]
