"""Host seams (window, editor, workspace) and their terminal implementation."""
from __future__ import annotations

from .base import Host, QuickPickItem, TextEditor, Window, Workspace
from .terminal import FileTextEditor, TerminalWindow, TerminalWorkspace

__all__ = [
    "Host",
    "QuickPickItem",
    "TextEditor",
    "Window",
    "Workspace",
    "FileTextEditor",
    "TerminalWindow",
    "TerminalWorkspace",
]
