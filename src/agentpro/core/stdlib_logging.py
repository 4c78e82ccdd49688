from __future__ import annotations

import logging
import sys
from pathlib import Path

from agentpro.core.utils.io import ensure_directory

_CONFIGURED_LOG_PATH: str | None = None
_AGENTPRO_FILE_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Configure Python stdlib logging to write to `log_path` (no stderr handler).

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _AGENTPRO_FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _AGENTPRO_FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # FileHandler is also a StreamHandler: only drop the stdout/stderr ones.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            h.close()

    if _AGENTPRO_FILE_HANDLER is not None:
        root.removeHandler(_AGENTPRO_FILE_HANDLER)
        _AGENTPRO_FILE_HANDLER.close()
        _AGENTPRO_FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(fh)

    _AGENTPRO_FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED_LOG_PATH, _AGENTPRO_FILE_HANDLER
    root = logging.getLogger()
    if _AGENTPRO_FILE_HANDLER is not None:
        root.removeHandler(_AGENTPRO_FILE_HANDLER)
        _AGENTPRO_FILE_HANDLER.close()
    _CONFIGURED_LOG_PATH = None
    _AGENTPRO_FILE_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
