"""Pick-and-act commands over installed resources.

Every command resolves its target first (explicitly passed, or picked from a
flat alphabetical list of every document) and reads content only through the
read-only filesystem. Precondition failures become host warnings and never
escape as exceptions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from agentpro.core.config import ExportConfig
from agentpro.core.exceptions import (
    FileIsADirectoryError,
    NoActiveEditorError,
    NoTrustedWorkspaceError,
    ResourceNotFoundError,
)
from agentpro.core.host import Host, QuickPickItem, TextEditor
from agentpro.core.utils.io import write_text
from agentpro.core.utils.paths import path_within

from .tree import OPEN_COMMAND_ID, ResourceKind, ResourceNode, ResourceTreeProvider
from .vfs import FileType, ReadOnlyResourceFS, VirtualURI

logger = logging.getLogger(__name__)

INSERT_COMMAND_ID = "agentPro.insertResource"
EXPORT_COMMAND_ID = "agentPro.exportResource"

Target = Union[ResourceNode, VirtualURI, str, None]


@dataclass
class CommandResult:
    """What a command did; ``status`` is ok, cancelled, warning or error."""

    command: str
    status: str
    message: str = ""
    uri: Optional[str] = None
    path: Optional[Path] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"command": self.command, "status": self.status, "message": self.message}
        if self.uri is not None:
            payload["uri"] = self.uri
        if self.path is not None:
            payload["path"] = str(self.path)
        payload.update(self.details)
        return payload


class ResourceCommands:
    def __init__(
        self,
        fs: ReadOnlyResourceFS,
        tree: ResourceTreeProvider,
        host: Host,
        *,
        export_config: Optional[ExportConfig] = None,
    ) -> None:
        self.fs = fs
        self.tree = tree
        self.host = host
        self.export_config = export_config or ExportConfig()

    # ---- target resolution --------------------------------------------

    def build_pick_list(self) -> List[QuickPickItem]:
        """Every document of every category, sorted by its ``category/name`` label."""
        items = [
            QuickPickItem(label=node.relative_path, description=node.category, value=node)
            for node in self.tree.walk_documents()
        ]
        return sorted(items, key=lambda item: item.label.lower())

    def resolve_target(self, target: Target = None, *, placeholder: str = "Select a resource") -> Optional[ResourceNode]:
        """Return the node for ``target``, asking the host to pick when omitted.

        Returns None when the user cancels the pick list or nothing is installed.

        Raises:
            ResourceNotFoundError: an explicit target does not exist.
        """
        if target is None:
            picked = self.host.window.show_quick_pick(self.build_pick_list(), placeholder=placeholder)
            return picked.value if picked is not None else None
        if isinstance(target, ResourceNode):
            return target

        uri = self.fs.to_uri(target if isinstance(target, VirtualURI) else str(target))
        kind = self.fs.stat(uri).type
        resource_kind = ResourceKind.CATEGORY if kind is FileType.DIRECTORY else ResourceKind.DOCUMENT
        return ResourceNode(uri.name, uri.path, resource_kind)

    def _resolve_document(self, command: str, target: Target, placeholder: str) -> Union[ResourceNode, CommandResult]:
        try:
            node = self.resolve_target(target, placeholder=placeholder)
        except ResourceNotFoundError as exc:
            self.host.window.show_error_message(f"Could not open resource: {exc}")
            return CommandResult(command, "error", str(exc), uri=str(target))
        if node is None:
            return CommandResult(command, "cancelled", "No resource selected")
        if node.is_category:
            message = f"{node.relative_path} is a category, not a document"
            self.host.window.show_warning_message(message)
            return CommandResult(command, "warning", message, uri=str(self.fs.uri(node.relative_path)))
        return node

    def _read_document(self, command: str, uri: VirtualURI) -> Union[str, CommandResult]:
        try:
            return self.fs.read_text(uri)
        except (ResourceNotFoundError, FileIsADirectoryError) as exc:
            message = str(exc)
        except UnicodeDecodeError:
            message = f"{uri} is not UTF-8 text"
        self.host.window.show_error_message(f"Could not open resource: {message}")
        return CommandResult(command, "error", message, uri=str(uri))

    # ---- commands -----------------------------------------------------

    def open_resource(self, target: Target = None) -> CommandResult:
        """Show a resource read-only through the virtual filesystem."""
        resolved = self._resolve_document(OPEN_COMMAND_ID, target, "Select a resource to open")
        if isinstance(resolved, CommandResult):
            return resolved
        uri = self.fs.uri(resolved.relative_path)
        content = self._read_document(OPEN_COMMAND_ID, uri)
        if isinstance(content, CommandResult):
            return content
        self.host.window.show_text_document(str(uri), content, read_only=True)
        return CommandResult(OPEN_COMMAND_ID, "ok", f"Opened {uri}", uri=str(uri))

    def insert_resource(self, target: Target = None) -> CommandResult:
        """Insert a resource's text verbatim at the active cursor."""
        try:
            editor = self._active_editor()
        except NoActiveEditorError as exc:
            self.host.window.show_warning_message(str(exc))
            return CommandResult(INSERT_COMMAND_ID, "warning", str(exc))

        resolved = self._resolve_document(INSERT_COMMAND_ID, target, "Select a resource to insert")
        if isinstance(resolved, CommandResult):
            return resolved
        uri = self.fs.uri(resolved.relative_path)
        text = self._read_document(INSERT_COMMAND_ID, uri)
        if isinstance(text, CommandResult):
            return text

        editor.insert(text)
        logger.info("Inserted %s into %s", uri, editor.document_path)
        return CommandResult(
            INSERT_COMMAND_ID,
            "ok",
            f"Inserted {resolved.relative_path}",
            uri=str(uri),
            path=editor.document_path,
            details={"characters": len(text)},
        )

    def export_resource(self, target: Target = None) -> CommandResult:
        """Copy a resource into the trusted project's discovery directory."""
        try:
            project = self._trusted_project()
        except NoTrustedWorkspaceError as exc:
            self.host.window.show_warning_message(str(exc))
            return CommandResult(EXPORT_COMMAND_ID, "warning", str(exc))

        resolved = self._resolve_document(EXPORT_COMMAND_ID, target, "Select a resource to export")
        if isinstance(resolved, CommandResult):
            return resolved
        uri = self.fs.uri(resolved.relative_path)
        text = self._read_document(EXPORT_COMMAND_ID, uri)
        if isinstance(text, CommandResult):
            return text

        discovery_dir = project / self.export_config.project_dir
        destination = discovery_dir.joinpath(*resolved.relative_path.split("/"))
        if not path_within(destination, project):
            message = f"Refusing to export outside the project: {destination}"
            self.host.window.show_error_message(message)
            return CommandResult(EXPORT_COMMAND_ID, "error", message, uri=str(uri))

        if destination.exists() and not self.export_config.overwrite:
            if not self.host.window.confirm(f"{destination} already exists. Overwrite?"):
                return CommandResult(
                    EXPORT_COMMAND_ID, "cancelled", f"Kept existing {destination}", uri=str(uri), path=destination
                )

        write_text(destination, text)
        logger.info("Exported %s to %s", uri, destination)
        self.host.window.show_information_message(f"Exported {resolved.relative_path} to {destination}")
        return CommandResult(EXPORT_COMMAND_ID, "ok", f"Exported to {destination}", uri=str(uri), path=destination)

    def _active_editor(self) -> TextEditor:
        editor = self.host.window.active_text_editor
        if editor is None:
            raise NoActiveEditorError("No active editor to insert into")
        return editor

    def _trusted_project(self) -> Path:
        workspace = self.host.workspace
        if workspace.folder is None:
            raise NoTrustedWorkspaceError("Open a project folder before exporting resources")
        if not workspace.is_trusted:
            raise NoTrustedWorkspaceError(
                f"Project {workspace.folder} is not trusted; exporting is disabled",
                context={"folder": str(workspace.folder)},
            )
        return Path(workspace.folder)

    def as_registry(self) -> Dict[str, Callable[..., CommandResult]]:
        return {
            OPEN_COMMAND_ID: self.open_resource,
            INSERT_COMMAND_ID: self.insert_resource,
            EXPORT_COMMAND_ID: self.export_resource,
        }


__all__ = [
    "OPEN_COMMAND_ID",
    "INSERT_COMMAND_ID",
    "EXPORT_COMMAND_ID",
    "CommandResult",
    "ResourceCommands",
]
