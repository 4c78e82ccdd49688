"""Domain-specific configuration accessors."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List

from .base import BaseDomainConfig


class PathsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "paths"

    @cached_property
    def storage_dir(self) -> str:
        return str(self.section.get("storage_dir") or "globalStorage")


class ResourcesConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "resources"

    @cached_property
    def scheme(self) -> str:
        return str(self.section.get("scheme") or "agentpro")

    @cached_property
    def document_extensions(self) -> tuple[str, ...]:
        raw = self.section.get("document_extensions") or [".md"]
        return tuple(str(ext).lower() for ext in raw)


class InstallConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "install"

    @cached_property
    def lock_timeout_seconds(self) -> float:
        return float(self.section.get("lock_timeout_seconds", 30))

    @cached_property
    def _discovery(self) -> dict:
        value = self.section.get("external_discovery")
        return value if isinstance(value, dict) else {}

    @cached_property
    def external_discovery_enabled(self) -> bool:
        return bool(self._discovery.get("enabled", False))

    @cached_property
    def external_discovery_dir(self) -> str:
        return str(self._discovery.get("dir") or ".github")

    @cached_property
    def external_discovery_categories(self) -> List[str]:
        return [str(c) for c in (self._discovery.get("categories") or [])]


class ExportConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "export"

    @cached_property
    def project_dir(self) -> str:
        return str(self.section.get("project_dir") or ".github")

    @cached_property
    def overwrite(self) -> bool:
        return bool(self.section.get("overwrite", False))


class WorkspaceConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "workspace"

    @cached_property
    def trusted_folders(self) -> List[Path]:
        return [Path(p).expanduser().resolve() for p in (self.section.get("trusted_folders") or [])]

    def is_trusted(self, folder: Path) -> bool:
        """Return True when ``folder`` is, or lives below, a configured trusted folder."""
        candidate = Path(folder).expanduser().resolve()
        return any(candidate == t or candidate.is_relative_to(t) for t in self.trusted_folders)


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "INFO").upper()

    @cached_property
    def file(self) -> str:
        return str(self.section.get("file") or "logs/agentpro.log")


__all__ = [
    "PathsConfig",
    "ResourcesConfig",
    "InstallConfig",
    "ExportConfig",
    "WorkspaceConfig",
    "LoggingConfig",
]
