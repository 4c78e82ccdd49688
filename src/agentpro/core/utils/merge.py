"""Layering of configuration mappings."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


def deep_merge(base: Mapping[str, Any], override: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` laid over it; inputs are not mutated.

    Nested mappings merge key by key. Any other value in ``override``, lists
    included, replaces the one in ``base``: a user layer that sets
    ``resources.document_extensions`` states the whole list.

        >>> deep_merge({"export": {"overwrite": False, "project_dir": ".github"}},
        ...            {"export": {"overwrite": True}})
        {'export': {'overwrite': True, 'project_dir': '.github'}}
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
