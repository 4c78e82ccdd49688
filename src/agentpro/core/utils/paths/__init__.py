"""Path resolution helpers for Agent Pro."""
from __future__ import annotations

from .rel import path_within, safe_relpath, to_posix_segments
from .user import (
    DEFAULT_USER_CONFIG_PRIMARY,
    USER_DIR_ENV,
    get_home_dir,
    get_storage_dir,
    get_user_config_dir,
)

__all__ = [
    "DEFAULT_USER_CONFIG_PRIMARY",
    "USER_DIR_ENV",
    "get_user_config_dir",
    "get_storage_dir",
    "get_home_dir",
    "safe_relpath",
    "path_within",
    "to_posix_segments",
]
