"""Terminal implementation of the host seams, used by the ``agentpro`` CLI."""
from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

from agentpro.core.utils.io import read_text, write_text

from .base import QuickPickItem, TextEditor


class FileTextEditor:
    """A file on disk with a 1-based (line, column) cursor.

    Lines or columns past the end of the document clamp to its end, the way an
    editor cursor cannot sit beyond the text.
    """

    def __init__(self, path: Path, *, line: Optional[int] = None, column: int = 1) -> None:
        self.path = Path(path)
        self.line = line
        self.column = max(1, int(column))

    @property
    def document_path(self) -> Path:
        return self.path

    def offset(self, text: str) -> int:
        if self.line is None:
            return len(text)
        lines = text.splitlines(keepends=True)
        index = max(1, int(self.line)) - 1
        if index >= len(lines):
            return len(text)
        start = sum(len(line) for line in lines[:index])
        body = lines[index].rstrip("\r\n")
        return start + min(self.column - 1, len(body))

    def insert(self, text: str) -> None:
        current = read_text(self.path)
        at = self.offset(current)
        write_text(self.path, current[:at] + text + current[at:])


class TerminalWindow:
    """Messages go to stderr, documents and pick lists to stdout."""

    def __init__(
        self,
        *,
        editor: Optional[TextEditor] = None,
        assume_yes: bool = False,
        interactive: Optional[bool] = None,
        input_fn: Callable[[str], str] = input,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        self._editor = editor
        self.assume_yes = assume_yes
        self.interactive = sys.stdin.isatty() if interactive is None else interactive
        self._input = input_fn
        self._out = out
        self._err = err
        self.messages: List[tuple[str, str]] = []

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    @property
    def active_text_editor(self) -> Optional[TextEditor]:
        return self._editor

    def _message(self, level: str, message: str) -> None:
        self.messages.append((level, message))
        print(f"[{level}] {message}", file=self.err)

    def show_information_message(self, message: str) -> None:
        self._message("info", message)

    def show_warning_message(self, message: str) -> None:
        self._message("warning", message)

    def show_error_message(self, message: str) -> None:
        self._message("error", message)

    def show_quick_pick(
        self, items: Sequence[QuickPickItem], *, placeholder: str = ""
    ) -> Optional[QuickPickItem]:
        if not items or not self.interactive:
            return None
        if placeholder:
            print(placeholder, file=self.out)
        for number, item in enumerate(items, start=1):
            suffix = f"  ({item.description})" if item.description else ""
            print(f"{number:>3}. {item.label}{suffix}", file=self.out)
        try:
            answer = self._input("Select a number (empty to cancel): ").strip()
        except EOFError:
            return None
        if not answer.isdigit():
            return None
        choice = int(answer)
        if 1 <= choice <= len(items):
            return items[choice - 1]
        return None

    def show_text_document(self, uri: str, content: str, *, read_only: bool = True) -> None:
        banner = f"--- {uri}" + (" [read-only]" if read_only else "")
        print(banner, file=self.out)
        print(content, file=self.out, end="" if content.endswith("\n") else "\n")

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        if not self.interactive:
            return False
        try:
            answer = self._input(f"{message} [y/N]: ").strip().lower()
        except EOFError:
            return False
        return answer in {"y", "yes"}


@dataclass
class TerminalWorkspace:
    folder: Optional[Path] = None
    is_trusted: bool = False


__all__ = ["FileTextEditor", "TerminalWindow", "TerminalWorkspace"]
