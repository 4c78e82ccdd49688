"""User-level path resolution.

This module centralizes detection of the user-level Agent Pro directory
(default: ``~/.agentpro``) and of the per-user storage directory that holds
the installed resource tree and persisted state.

Precedence (highest to lowest):
1. Environment variable: AGENTPRO_paths__user_config_dir
2. Bundled defaults: agentpro.data/config/defaults.yaml (paths.user_config_dir)
3. Hardcoded fallback: ".agentpro"

The directory name is resolved relative to the user's home directory unless an
absolute path is provided.
"""

from __future__ import annotations

import os
from pathlib import Path

from agentpro.data import get_data_path

DEFAULT_USER_CONFIG_PRIMARY = ".agentpro"
USER_DIR_ENV = "AGENTPRO_paths__user_config_dir"


def _load_user_dir_from_yaml(path: Path) -> str | None:
    """Extract ``paths.user_config_dir`` from a YAML file when present."""
    from agentpro.core.utils.io import read_yaml

    if not path.exists() or not path.is_file():
        return None

    data = read_yaml(path, default={})
    if not isinstance(data, dict):
        return None

    paths_section = data.get("paths")
    if isinstance(paths_section, dict):
        value = paths_section.get("user_config_dir")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _resolve_user_dir_from_configs() -> str:
    """Resolve the user dir name using precedence.

    There is no user-level override location for this value (it would be
    self-referential); the environment variable is the customization point.
    """
    env_override = os.environ.get(USER_DIR_ENV)
    if isinstance(env_override, str) and env_override.strip():
        return env_override.strip()

    bundled_paths = get_data_path("config", "defaults.yaml")
    value = _load_user_dir_from_yaml(bundled_paths)
    return value or DEFAULT_USER_CONFIG_PRIMARY


def get_user_config_dir(*, create: bool = True) -> Path:
    """Return the user config directory resolved via config/env.

    The resolved path is absolute. Relative values are treated as relative to
    the user's home directory (not CWD).
    """
    from agentpro.core.utils.io import ensure_directory

    raw = _resolve_user_dir_from_configs()
    p = Path(str(raw)).expanduser()
    if not p.is_absolute():
        p = Path.home() / p

    resolved = p.resolve()
    if create:
        ensure_directory(resolved)
    return resolved


def get_storage_dir(storage_dir: str = "globalStorage", *, create: bool = False) -> Path:
    """Return the per-user storage directory (parent of the installed resources)."""
    from agentpro.core.utils.io import ensure_directory

    p = Path(storage_dir).expanduser()
    if not p.is_absolute():
        p = get_user_config_dir(create=create) / p
    if create:
        ensure_directory(p)
    return p


def get_home_dir() -> Path:
    """Return the user's home directory (secondary discovery copies land below it)."""
    return Path.home()


__all__ = [
    "DEFAULT_USER_CONFIG_PRIMARY",
    "USER_DIR_ENV",
    "get_user_config_dir",
    "get_storage_dir",
    "get_home_dir",
]
