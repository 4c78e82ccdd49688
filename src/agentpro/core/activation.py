"""Activation sequence: install, then register the providers and commands.

The installer runs to completion before anything that reads the resource
tree is constructed. Installer failures are reported to the host once and do
not abort activation; the providers then simply see an empty tree.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from agentpro import __version__
from agentpro.core.config import (
    ConfigManager,
    ExportConfig,
    InstallConfig,
    PathsConfig,
    ResourcesConfig,
)
from agentpro.core.exceptions import AgentProError
from agentpro.core.host import Host
from agentpro.core.resources.commands import CommandResult, ResourceCommands
from agentpro.core.resources.installer import InstallResult, ResourceInstaller
from agentpro.core.resources.state import STATE_FILENAME, KeyValueState, VersionMarker
from agentpro.core.resources.tree import ResourceTreeProvider
from agentpro.core.resources.vfs import Disposable, ReadOnlyResourceFS
from agentpro.core.utils.io import LockTimeoutError
from agentpro.core.utils.paths import get_storage_dir
from agentpro.data import get_bundled_resources_path

logger = logging.getLogger(__name__)

DISPLAY_NAME = "Agent Pro"


@dataclass
class ExtensionContext:
    """Everything activation needs from its environment."""

    storage_path: Path
    bundled_resources_path: Path
    version: str
    global_state: KeyValueState
    config: Mapping[str, Any]
    host: Host
    home_dir: Optional[Path] = None
    subscriptions: List[Any] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        host: Host,
        *,
        config: Optional[Mapping[str, Any]] = None,
        version: str = __version__,
        bundled_resources_path: Optional[Path] = None,
    ) -> "ExtensionContext":
        """Build a context from configuration and the per-user storage convention."""
        if config is None:
            config = ConfigManager().load_config()
        storage_path = get_storage_dir(PathsConfig(config).storage_dir)
        return cls(
            storage_path=storage_path,
            bundled_resources_path=bundled_resources_path or get_bundled_resources_path(),
            version=version,
            global_state=KeyValueState(storage_path / STATE_FILENAME),
            config=config,
            host=host,
        )


@dataclass
class Extension:
    """Handle to the activated surfaces."""

    context: ExtensionContext
    installer: ResourceInstaller
    fs: ReadOnlyResourceFS
    tree: ResourceTreeProvider
    commands: ResourceCommands
    install_result: Optional[InstallResult] = None
    install_error: Optional[BaseException] = None
    registry: Dict[str, Callable[..., CommandResult]] = field(default_factory=dict)

    def execute(self, command_id: str, *args: Any) -> CommandResult:
        if command_id not in self.registry:
            raise KeyError(f"Unknown command: {command_id}")
        return self.registry[command_id](*args)


def build_installer(context: ExtensionContext) -> ResourceInstaller:
    return ResourceInstaller(
        storage_path=context.storage_path,
        bundled_path=context.bundled_resources_path,
        marker=VersionMarker(context.global_state),
        install_config=InstallConfig(context.config),
        home_dir=context.home_dir,
    )


def activate(context: ExtensionContext, *, force_install: bool = False) -> Extension:
    logger.info("%s: Activating (version %s)", DISPLAY_NAME, context.version)
    window = context.host.window
    installer = build_installer(context)

    install_result: Optional[InstallResult] = None
    install_error: Optional[BaseException] = None
    try:
        install_result = installer.ensure_installed(context.version, force=force_install)
    except (AgentProError, LockTimeoutError, OSError) as exc:
        install_error = exc
        logger.error("%s: Activation failed: %s", DISPLAY_NAME, exc)
        window.show_error_message(f"{DISPLAY_NAME}: {exc}")
    else:
        for warning in install_result.warnings:
            window.show_warning_message(f"{DISPLAY_NAME}: {warning}")

    resources = ResourcesConfig(context.config)
    fs = ReadOnlyResourceFS(installer.resources_path, scheme=resources.scheme)
    tree = ResourceTreeProvider(fs, document_extensions=resources.document_extensions)
    commands = ResourceCommands(fs, tree, context.host, export_config=ExportConfig(context.config))

    extension = Extension(
        context=context,
        installer=installer,
        fs=fs,
        tree=tree,
        commands=commands,
        install_result=install_result,
        install_error=install_error,
        registry=commands.as_registry(),
    )
    context.subscriptions.append(Disposable(tree.dispose))
    context.subscriptions.append(Disposable(extension.registry.clear))

    if install_result is not None and install_result.installed:
        count = len(tree.walk_documents())
        window.show_information_message(
            f"{DISPLAY_NAME}: Activated! {count} resources installed for version {install_result.version}."
        )

    logger.info("%s: Ready", DISPLAY_NAME)
    return extension


def deactivate(extension: Extension) -> None:
    subscriptions = extension.context.subscriptions
    while subscriptions:
        item = subscriptions.pop()
        dispose = getattr(item, "dispose", None)
        if callable(dispose):
            dispose()


__all__ = [
    "DISPLAY_NAME",
    "ExtensionContext",
    "Extension",
    "build_installer",
    "activate",
    "deactivate",
]
