"""Read-only virtual filesystem over the installed resource tree.

Resources are addressed as ``<scheme>:/<relative-path>`` (forward slashes on
every platform). Every address is translated by ``resolve`` into a real path
that must stay inside the canonical, symlink-resolved resource root; anything
else is reported as not found and never read. All mutations are rejected.
"""
from __future__ import annotations

import logging
import re
import stat as stat_mod
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union
from urllib.parse import quote, unquote

from agentpro.core.exceptions import (
    FileIsADirectoryError,
    FileNotADirectoryError,
    NoPermissionsError,
    ResourceNotFoundError,
)
from agentpro.core.utils.paths import to_posix_segments

logger = logging.getLogger(__name__)

_URI_RE = re.compile(r"^(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]+):(?P<path>.*)$")


class FileType(IntEnum):
    """File kinds, numbered like the host filesystem-provider contract."""

    UNKNOWN = 0
    FILE = 1
    DIRECTORY = 2
    SYMBOLIC_LINK = 64


@dataclass(frozen=True)
class FileStat:
    type: FileType
    ctime: int
    mtime: int
    size: int


@dataclass(frozen=True)
class VirtualURI:
    """``<scheme>:/<path>`` where ``path`` is a posix path relative to the resource root."""

    scheme: str
    path: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", "/".join(to_posix_segments(self.path)))

    def __str__(self) -> str:
        return f"{self.scheme}:/{quote(self.path, safe='/')}"

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1] if self.path else ""

    @classmethod
    def parse(cls, raw: str, *, default_scheme: str) -> "VirtualURI":
        """Parse ``scheme:/path`` (or a bare relative path, which gets ``default_scheme``)."""
        match = _URI_RE.match(str(raw))
        if match is None:
            return cls(default_scheme, str(raw))
        path = match.group("path")
        # Tolerate the authority form scheme:///path
        if path.startswith("//"):
            path = path.lstrip("/")
        return cls(match.group("scheme"), unquote(path))


class Disposable:
    """Handle returned by registrations; ``dispose`` runs the release callback once."""

    def __init__(self, callback: Optional[Callable[[], None]] = None) -> None:
        self._callback = callback
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        if self._callback is not None:
            self._callback()


UriLike = Union[VirtualURI, str]


class ReadOnlyResourceFS:
    """Filesystem provider backed by the installed resource directory."""

    def __init__(self, root: Path, *, scheme: str = "agentpro") -> None:
        self.root = Path(root)
        self.scheme = scheme

    # ---- addressing -------------------------------------------------------

    def uri(self, relative_path: str = "") -> VirtualURI:
        return VirtualURI(self.scheme, relative_path)

    def to_uri(self, target: UriLike) -> VirtualURI:
        uri = target if isinstance(target, VirtualURI) else VirtualURI.parse(target, default_scheme=self.scheme)
        if uri.scheme != self.scheme:
            raise ResourceNotFoundError(
                f"File not found: {uri} (unsupported scheme)",
                context={"uri": str(uri)},
            )
        return uri

    def resolve(self, target: UriLike) -> Path:
        """Translate an address into a real path inside the resource root.

        The root is canonicalised (symlinks resolved) and the candidate is
        resolved the same way, so ``..`` segments, either path separator and
        symlinks pointing elsewhere cannot escape it.
        """
        uri = self.to_uri(target)
        root = self.root.resolve()
        candidate = root.joinpath(*to_posix_segments(uri.path)).resolve()
        if candidate != root and not candidate.is_relative_to(root):
            logger.warning("Rejected path outside resource root: %s", uri)
            raise ResourceNotFoundError(
                f"File not found: {uri}",
                context={"uri": str(uri), "reason": "outside resource root"},
            )
        return candidate

    # ---- read operations --------------------------------------------------

    def stat(self, target: UriLike) -> FileStat:
        path = self.resolve(target)
        try:
            st = path.stat()
        except FileNotFoundError as exc:
            raise self._not_found(target) from exc
        if stat_mod.S_ISDIR(st.st_mode):
            kind = FileType.DIRECTORY
        elif stat_mod.S_ISREG(st.st_mode):
            kind = FileType.FILE
        else:
            kind = FileType.UNKNOWN
        return FileStat(
            type=kind,
            ctime=int(st.st_ctime * 1000),
            mtime=int(st.st_mtime * 1000),
            size=st.st_size,
        )

    def read_directory(self, target: UriLike = "") -> List[Tuple[str, FileType]]:
        path = self.resolve(target)
        try:
            children = sorted(path.iterdir(), key=lambda p: p.name)
        except FileNotFoundError as exc:
            raise self._not_found(target) from exc
        except NotADirectoryError as exc:
            raise FileNotADirectoryError(
                f"File is not a directory: {target}", context={"uri": str(target)}
            ) from exc
        entries: List[Tuple[str, FileType]] = []
        for child in children:
            if child.is_dir():
                entries.append((child.name, FileType.DIRECTORY))
            elif child.is_file():
                entries.append((child.name, FileType.FILE))
            else:
                entries.append((child.name, FileType.UNKNOWN))
        return entries

    def read_file(self, target: UriLike) -> bytes:
        path = self.resolve(target)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise self._not_found(target) from exc
        except IsADirectoryError as exc:
            raise FileIsADirectoryError(
                f"File is a directory: {target}", context={"uri": str(target)}
            ) from exc

    def read_text(self, target: UriLike, *, encoding: str = "utf-8") -> str:
        return self.read_file(target).decode(encoding)

    def watch(self, target: UriLike, *, recursive: bool = False, excludes: Tuple[str, ...] = ()) -> Disposable:
        """Accepted but inert: the tree only changes during installation."""
        return Disposable()

    # ---- rejected mutations -----------------------------------------------

    def write_file(self, target: UriLike, content: bytes, *, create: bool = True, overwrite: bool = True) -> None:
        raise self._no_permissions("write", target)

    def create_directory(self, target: UriLike) -> None:
        raise self._no_permissions("create directory", target)

    def delete(self, target: UriLike, *, recursive: bool = False) -> None:
        raise self._no_permissions("delete", target)

    def rename(self, old: UriLike, new: UriLike, *, overwrite: bool = False) -> None:
        raise self._no_permissions("rename", old)

    def _no_permissions(self, operation: str, target: UriLike) -> NoPermissionsError:
        return NoPermissionsError(
            f"No permissions: {self.scheme} resources are read-only ({operation} {target})",
            context={"operation": operation, "uri": str(target)},
        )

    def _not_found(self, target: UriLike) -> ResourceNotFoundError:
        return ResourceNotFoundError(f"File not found: {target}", context={"uri": str(target)})


__all__ = [
    "FileType",
    "FileStat",
    "VirtualURI",
    "Disposable",
    "ReadOnlyResourceFS",
]
