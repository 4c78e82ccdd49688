"""Host application seams used by the command surface.

The command surface never talks to a terminal or an IDE directly; it goes
through these protocols so the same commands run from the CLI and in tests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class QuickPickItem:
    label: str
    description: str = ""
    value: Any = field(default=None, compare=False)


@runtime_checkable
class TextEditor(Protocol):
    """An editable document with a cursor."""

    @property
    def document_path(self) -> Path: ...

    def insert(self, text: str) -> None:
        """Insert ``text`` verbatim at the cursor."""
        ...


class Window(Protocol):
    @property
    def active_text_editor(self) -> Optional[TextEditor]: ...

    def show_information_message(self, message: str) -> None: ...

    def show_warning_message(self, message: str) -> None: ...

    def show_error_message(self, message: str) -> None: ...

    def show_quick_pick(
        self, items: Sequence[QuickPickItem], *, placeholder: str = ""
    ) -> Optional[QuickPickItem]:
        """Return the picked item, or None when the user cancels."""
        ...

    def show_text_document(self, uri: str, content: str, *, read_only: bool = True) -> None: ...

    def confirm(self, message: str) -> bool: ...


class Workspace(Protocol):
    @property
    def folder(self) -> Optional[Path]: ...

    @property
    def is_trusted(self) -> bool: ...


@dataclass
class Host:
    window: Window
    workspace: Workspace


__all__ = ["QuickPickItem", "TextEditor", "Window", "Workspace", "Host"]
