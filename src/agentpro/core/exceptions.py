from __future__ import annotations

from typing import Any, Dict, Mapping


class AgentProError(Exception):
    """Base exception for Agent Pro."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class SourceMissingError(AgentProError, FileNotFoundError):
    """Raised when the bundled resource tree is absent at install time."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class CopyFailureError(AgentProError, OSError):
    """Raised when an I/O failure interrupts a recursive copy."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class ResourceNotFoundError(AgentProError, FileNotFoundError):
    """Raised when a virtual path does not resolve to an installed resource."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class FileIsADirectoryError(AgentProError, IsADirectoryError):
    """Raised when file contents are requested for a directory resource."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        IsADirectoryError.__init__(self, message)


class FileNotADirectoryError(AgentProError, NotADirectoryError):
    """Raised when a listing is requested for a file resource."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        NotADirectoryError.__init__(self, message)


class NoPermissionsError(AgentProError, PermissionError):
    """Raised for every mutation attempted through the read-only filesystem."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        PermissionError.__init__(self, message)


class NoActiveEditorError(AgentProError):
    """Raised when insert is requested without an editable document."""


class NoTrustedWorkspaceError(AgentProError):
    """Raised when export is requested without an open, trusted project."""


class ConfigError(AgentProError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        AgentProError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "AgentProError",
    "SourceMissingError",
    "CopyFailureError",
    "ResourceNotFoundError",
    "FileIsADirectoryError",
    "FileNotADirectoryError",
    "NoPermissionsError",
    "NoActiveEditorError",
    "NoTrustedWorkspaceError",
    "ConfigError",
]
