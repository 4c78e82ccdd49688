"""Agent Pro configuration system.

Usage:
    from agentpro.core.config import ConfigManager, ResourcesConfig

    config = ConfigManager().load_config()
    scheme = ResourcesConfig(config).scheme
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .domains import (
    ExportConfig,
    InstallConfig,
    LoggingConfig,
    PathsConfig,
    ResourcesConfig,
    WorkspaceConfig,
)
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "PathsConfig",
    "ResourcesConfig",
    "InstallConfig",
    "ExportConfig",
    "WorkspaceConfig",
    "LoggingConfig",
]
