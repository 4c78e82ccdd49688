"""Category → document tree projection of the installed resources.

Nodes are derived from disk on every query through the read-only filesystem;
nothing is cached, so ``refresh`` only notifies listeners that the next query
will see a fresh scan.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar, Union

from agentpro.core.exceptions import FileNotADirectoryError, ResourceNotFoundError

from .vfs import Disposable, FileType, ReadOnlyResourceFS, VirtualURI

logger = logging.getLogger(__name__)

OPEN_COMMAND_ID = "agentPro.openResource"

T = TypeVar("T")


class ResourceKind(str, Enum):
    CATEGORY = "category"
    DOCUMENT = "document"


@dataclass(frozen=True)
class ResourceNode:
    """A category (directory) or document (file) below the resource root."""

    label: str
    relative_path: str
    kind: ResourceKind

    @property
    def is_category(self) -> bool:
        return self.kind is ResourceKind.CATEGORY

    @property
    def category(self) -> str:
        return self.relative_path.split("/", 1)[0]


class TreeItemCollapsibleState(IntEnum):
    NONE = 0
    COLLAPSED = 1
    EXPANDED = 2


@dataclass(frozen=True)
class TreeItem:
    label: str
    collapsible_state: TreeItemCollapsibleState
    resource_uri: VirtualURI
    context_value: str
    tooltip: str = ""
    command: Optional[Dict[str, Any]] = None


class EventEmitter(Generic[T]):
    """Minimal listener registry: ``event(listener)`` subscribes, ``fire`` notifies."""

    def __init__(self) -> None:
        self._listeners: List[Callable[[T], None]] = []

    def event(self, listener: Callable[[T], None]) -> Disposable:
        self._listeners.append(listener)
        return Disposable(lambda: self._remove(listener))

    def _remove(self, listener: Callable[[T], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fire(self, value: T) -> None:
        for listener in list(self._listeners):
            listener(value)

    def dispose(self) -> None:
        self._listeners.clear()


NodeLike = Union[ResourceNode, str, None]


class ResourceTreeProvider:
    """Tree data provider for the resources panel."""

    def __init__(
        self,
        fs: ReadOnlyResourceFS,
        *,
        document_extensions: Sequence[str] = (".md",),
        open_command: str = OPEN_COMMAND_ID,
    ) -> None:
        self.fs = fs
        self.document_extensions = tuple(ext.lower() for ext in document_extensions)
        self.open_command = open_command
        self._on_did_change = EventEmitter[Optional[ResourceNode]]()

    @property
    def on_did_change_tree_data(self) -> Callable[[Callable[[Optional[ResourceNode]], None]], Disposable]:
        return self._on_did_change.event

    def refresh(self) -> None:
        self._on_did_change.fire(None)

    def is_document(self, name: str) -> bool:
        return name.lower().endswith(self.document_extensions)

    def get_children(self, node: NodeLike = None) -> List[ResourceNode]:
        """Children of ``node`` (a node or relative path); categories when omitted.

        A missing resource tree (nothing installed yet) yields an empty list.
        """
        parent = self._relative(node)
        try:
            entries = self.fs.read_directory(parent)
        except (ResourceNotFoundError, FileNotADirectoryError):
            logger.debug("No resources to list under %r", parent or "<root>")
            return []

        categories: List[ResourceNode] = []
        documents: List[ResourceNode] = []
        for name, kind in entries:
            rel = f"{parent}/{name}" if parent else name
            if kind is FileType.DIRECTORY:
                categories.append(ResourceNode(name, rel, ResourceKind.CATEGORY))
            elif parent and kind is FileType.FILE and self.is_document(name):
                documents.append(ResourceNode(name, rel, ResourceKind.DOCUMENT))
        return categories + documents

    def get_tree_item(self, node: ResourceNode) -> TreeItem:
        uri = self.fs.uri(node.relative_path)
        if node.is_category:
            return TreeItem(
                label=node.label,
                collapsible_state=TreeItemCollapsibleState.COLLAPSED,
                resource_uri=uri,
                context_value="category",
                tooltip=node.relative_path,
            )
        return TreeItem(
            label=node.label,
            collapsible_state=TreeItemCollapsibleState.NONE,
            resource_uri=uri,
            context_value="document",
            tooltip=str(uri),
            command={"command": self.open_command, "title": "Open Resource", "arguments": [node]},
        )

    def walk_documents(self, node: NodeLike = None) -> List[ResourceNode]:
        """Every document below ``node``, depth first."""
        documents: List[ResourceNode] = []
        for child in self.get_children(node):
            if child.is_category:
                documents.extend(self.walk_documents(child))
            else:
                documents.append(child)
        return documents

    def dispose(self) -> None:
        self._on_did_change.dispose()

    @staticmethod
    def _relative(node: NodeLike) -> str:
        if node is None:
            return ""
        if isinstance(node, ResourceNode):
            return node.relative_path
        return "/".join(part for part in str(node).replace("\\", "/").split("/") if part)


__all__ = [
    "OPEN_COMMAND_ID",
    "ResourceKind",
    "ResourceNode",
    "TreeItem",
    "TreeItemCollapsibleState",
    "EventEmitter",
    "ResourceTreeProvider",
]
