"""Recursive directory copy used to distribute the bundled resource tree."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path

from agentpro.core.exceptions import CopyFailureError, SourceMissingError
from agentpro.core.utils.io import ensure_directory

logger = logging.getLogger(__name__)


def copy_recursive(source: Path, destination: Path) -> int:
    """Copy the tree at ``source`` into ``destination``.

    Directories are created as needed and existing destination content is
    merged into, never cleared; replacing a tree wholesale is the caller's job.
    There is no atomicity across the tree: when a copy fails part-way the files
    already written stay in place.

    Returns:
        Number of files copied.

    Raises:
        SourceMissingError: ``source`` does not exist.
        CopyFailureError: any I/O failure while copying, naming the failing path.
    """
    source = Path(source)
    destination = Path(destination)
    if not source.exists():
        raise SourceMissingError(
            f"Source directory not found: {source}",
            context={"source": str(source)},
        )
    return _copy_tree(source, destination)


def _copy_tree(source: Path, destination: Path) -> int:
    current = source
    try:
        ensure_directory(destination)
        items = sorted(source.iterdir())
        logger.debug("Copying %d items from %s", len(items), source)

        copied = 0
        for item in items:
            current = item
            target = destination / item.name
            if item.is_dir():
                copied += _copy_tree(item, target)
            else:
                shutil.copyfile(item, target)
                copied += 1
        return copied
    except CopyFailureError:
        raise
    except OSError as exc:
        raise CopyFailureError(
            f"Failed to copy resources: {exc}",
            context={"source": str(source), "destination": str(destination), "path": str(current)},
        ) from exc


__all__ = ["copy_recursive"]
