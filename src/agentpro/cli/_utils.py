"""Shared CLI utility functions.

Every resource command activates first: configuration is loaded, logging is
pointed at the user log file and the installer runs before any provider is
used.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from agentpro.core.activation import Extension, ExtensionContext, activate
from agentpro.core.config import ConfigManager, LoggingConfig, WorkspaceConfig
from agentpro.core.host import Host, TerminalWindow, TerminalWorkspace, TextEditor
from agentpro.core.resources import OPEN_COMMAND_ID, CommandResult
from agentpro.core.stdlib_logging import configure_stdlib_logging
from agentpro.core.utils.paths import get_user_config_dir

from ._output import OutputFormatter


def load_config() -> Mapping[str, Any]:
    return ConfigManager().load_config()


def configure_logging(config: Mapping[str, Any]) -> None:
    logging_cfg = LoggingConfig(config)
    log_path = Path(logging_cfg.file).expanduser()
    if not log_path.is_absolute():
        log_path = get_user_config_dir() / log_path
    configure_stdlib_logging(log_path=log_path, level=logging_cfg.level)


def build_workspace(args: argparse.Namespace, config: Mapping[str, Any]) -> TerminalWorkspace:
    """Project folder from ``--project`` (default: CWD); trusted by flag or config."""
    raw = getattr(args, "project", None)
    folder = Path(raw).expanduser().resolve() if raw else Path.cwd()
    trusted = bool(getattr(args, "trust", False)) or WorkspaceConfig(config).is_trusted(folder)
    return TerminalWorkspace(folder=folder, is_trusted=trusted)


def context_from_args(args: argparse.Namespace, *, editor: Optional[TextEditor] = None) -> ExtensionContext:
    config = load_config()
    configure_logging(config)
    window = TerminalWindow(
        editor=editor,
        assume_yes=bool(getattr(args, "force", False)),
        interactive=False if getattr(args, "json", False) else None,
    )
    host = Host(window=window, workspace=build_workspace(args, config))
    return ExtensionContext.create(host, config=config)


def activate_from_args(
    args: argparse.Namespace,
    *,
    editor: Optional[TextEditor] = None,
    force_install: bool = False,
) -> Extension:
    return activate(context_from_args(args, editor=editor), force_install=force_install)


def report_command_result(formatter: OutputFormatter, result: CommandResult) -> int:
    """Print a command outcome; only 'ok' exits 0."""
    if formatter.json_mode:
        formatter.json_output(result.to_dict())
    elif result.ok and result.command != OPEN_COMMAND_ID:
        formatter.text(result.message)
    return 0 if result.ok else 1


__all__ = [
    "load_config",
    "configure_logging",
    "build_workspace",
    "context_from_args",
    "activate_from_args",
    "report_command_result",
]
