"""File locking utilities for atomic I/O operations."""
from __future__ import annotations

import fcntl
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

from .core import ensure_directory

_THREAD_MUTEXES: Dict[str, threading.Lock] = {}

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POLL_INTERVAL_SECONDS = 0.05


class LockTimeoutError(TimeoutError):
    """Raised when an OS file lock cannot be acquired within timeout."""


def _thread_mutex(path: Path) -> threading.Lock:
    key = str(path.resolve())
    lock = _THREAD_MUTEXES.get(key)
    if lock is None:
        lock = _THREAD_MUTEXES.setdefault(key, threading.Lock())
    return lock


def _validate_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {value})")


@contextmanager
def acquire_file_lock(
    file_path: Path | str,
    timeout: Optional[float] = None,
    *,
    fail_open: bool = False,
    poll_interval: Optional[float] = None,
) -> Iterator[Optional[object]]:
    """Acquire an exclusive lock on ``<file_path>.lock`` with a timeout.

    - Uses ``fcntl.flock`` with ``LOCK_EX | LOCK_NB`` in a retry loop.
    - A per-path thread mutex serialises threads of the same process, since
      ``flock`` locks are shared by all threads holding the same open file.
    - When ``fail_open`` is True, the context yields ``None`` after ``timeout``
      instead of raising.

    Args:
        file_path: Target path; the lock is taken on a ``.lock`` sidecar.
        timeout: Maximum seconds to wait before raising ``LockTimeoutError``.
        fail_open: If True, return control after ``timeout`` without raising.
        poll_interval: Sleep duration between non-blocking attempts.

    Yields:
        The opened sidecar file object kept locked for the duration of the context.
    """
    effective_timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else float(timeout)
    effective_poll_interval = (
        DEFAULT_POLL_INTERVAL_SECONDS if poll_interval is None else float(poll_interval)
    )
    _validate_positive("timeout", effective_timeout)
    _validate_positive("poll_interval", effective_poll_interval)

    start = time.time()
    target = Path(file_path)
    lock_target = target.with_name(target.name + ".lock")
    ensure_directory(lock_target.parent)

    mutex = _thread_mutex(lock_target)
    if not mutex.acquire(timeout=effective_timeout):
        if fail_open:
            yield None
            return
        raise LockTimeoutError(f"Could not acquire lock on {target} within {effective_timeout}s")

    fh = open(lock_target, "a+")
    acquired = False
    try:
        while True:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                acquired = True
                break
            except OSError:
                if (time.time() - start) >= effective_timeout:
                    if fail_open:
                        break
                    raise LockTimeoutError(
                        f"Could not acquire lock on {target} within {effective_timeout}s"
                    )
                time.sleep(effective_poll_interval)

        yield fh if acquired else None
    finally:
        try:
            if acquired:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        finally:
            fh.close()
            mutex.release()


__all__ = ["acquire_file_lock", "LockTimeoutError"]
