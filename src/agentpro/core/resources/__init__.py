"""Global resource distribution and the read-only views over it.

- copier: recursive directory copy
- state: persisted key/value state and the installed-version marker
- installer: version-gated install into the per-user storage directory
- vfs: read-only virtual filesystem under a dedicated URI scheme
- tree: category → document projection for a tree panel
- commands: open / insert / export over a picked resource
"""
from __future__ import annotations

from .commands import (
    EXPORT_COMMAND_ID,
    INSERT_COMMAND_ID,
    CommandResult,
    ResourceCommands,
)
from .copier import copy_recursive
from .installer import RESOURCES_DIRNAME, InstallResult, ResourceInstaller
from .state import INSTALLED_VERSION_KEY, KeyValueState, VersionMarker
from .tree import (
    OPEN_COMMAND_ID,
    ResourceKind,
    ResourceNode,
    ResourceTreeProvider,
    TreeItem,
    TreeItemCollapsibleState,
)
from .vfs import Disposable, FileStat, FileType, ReadOnlyResourceFS, VirtualURI

__all__ = [
    "copy_recursive",
    "INSTALLED_VERSION_KEY",
    "KeyValueState",
    "VersionMarker",
    "RESOURCES_DIRNAME",
    "InstallResult",
    "ResourceInstaller",
    "Disposable",
    "FileStat",
    "FileType",
    "ReadOnlyResourceFS",
    "VirtualURI",
    "ResourceKind",
    "ResourceNode",
    "ResourceTreeProvider",
    "TreeItem",
    "TreeItemCollapsibleState",
    "OPEN_COMMAND_ID",
    "INSERT_COMMAND_ID",
    "EXPORT_COMMAND_ID",
    "CommandResult",
    "ResourceCommands",
]
