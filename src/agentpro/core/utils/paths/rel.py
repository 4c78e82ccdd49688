"""Relative path helpers.

Centralizes "relative to a root" formatting and containment checks so domain
code avoids duplicating subtle Path.resolve/relative_to handling.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def safe_relpath(path: Path, *, root: Path) -> str:
    """Return a best-effort root-relative path string."""
    try:
        return str(Path(path).resolve().relative_to(Path(root).resolve()))
    except (OSError, ValueError):
        return str(path)


def path_within(child: Path, parent: Path) -> bool:
    """Return True when ``child`` resolves to ``parent`` or a path below it."""
    try:
        c = Path(child).resolve()
        p = Path(parent).resolve()
    except OSError:
        return False
    return c == p or c.is_relative_to(p)


def to_posix_segments(raw: str) -> list[str]:
    """Split a logical path on either separator, dropping empty and ``.`` segments."""
    normalized = str(raw).replace("\\", "/")
    return [part for part in PurePosixPath(normalized).parts if part not in ("/", ".", "")]


__all__ = ["safe_relpath", "path_within", "to_posix_segments"]
