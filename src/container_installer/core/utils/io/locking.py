"""File locking utilities for atomic I/O operations."""
from __future__ import annotations

import fcntl
import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO

_THREAD_MUTEXES: dict[str, threading.Lock] = {}
_THREAD_MUTEXES_GUARD = threading.Lock()

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_POLL_INTERVAL_SECONDS = 0.05


class LockTimeoutError(TimeoutError):
    """Raised when an OS file lock cannot be acquired within timeout."""


def _thread_mutex(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _THREAD_MUTEXES_GUARD:
        return _THREAD_MUTEXES.setdefault(key, threading.Lock())


def _lock_path(target: Path) -> Path:
    return target.with_name(target.name + ".lock")


def _same_file(fh: TextIO, path: Path) -> bool:
    try:
        return os.fstat(fh.fileno()).st_ino == os.stat(path).st_ino
    except FileNotFoundError:
        return False


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
) -> Iterator[Optional[TextIO]]:
    """Acquire an exclusive lock on the ``<file>.lock`` sidecar of ``file_path``.

    - Uses ``fcntl.flock`` with ``LOCK_EX | LOCK_NB`` (non-blocking) in a retry loop.
    - The target itself is never opened, so it can be atomically replaced while
      the lock is held.
    - The sidecar is removed on release; a waiter that locked a sidecar which
      was removed meanwhile retries on the fresh one.
    - When ``fail_open`` is True, the context yields ``None`` after ``timeout``
      even if the lock could not be obtained.

    Args:
        file_path: File whose sidecar lock should be taken.
        timeout: Maximum seconds to wait before raising ``LockTimeoutError``.
        fail_open: If True, return control after ``timeout`` without raising.
        poll_interval: Sleep duration between non-blocking attempts.

    Yields:
        The opened lock file kept locked for the duration of the context.
    """
    effective_timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else float(timeout)
    effective_poll_interval = (
        DEFAULT_POLL_INTERVAL_SECONDS if poll_interval is None else float(poll_interval)
    )
    _validate_positive("timeout", effective_timeout)
    _validate_positive("poll_interval", effective_poll_interval)

    start = time.monotonic()
    target = Path(file_path)
    lock_target = _lock_path(target)
    lock_target.parent.mkdir(parents=True, exist_ok=True)

    mutex = _thread_mutex(lock_target)
    if not mutex.acquire(timeout=effective_timeout):
        if fail_open:
            yield None
            return
        raise LockTimeoutError(
            f"Could not acquire lock on {target} within {effective_timeout}s"
        )

    fh: Optional[TextIO] = None
    acquired = False
    try:
        while True:
            fh = open(lock_target, "a+", encoding="utf-8")
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except OSError:
                fh.close()
                fh = None
            else:
                if _same_file(fh, lock_target):
                    acquired = True
                    break
                fh.close()
                fh = None
                continue

            if (time.monotonic() - start) >= effective_timeout:
                if fail_open:
                    break
                raise LockTimeoutError(
                    f"Could not acquire lock on {target} within {effective_timeout}s"
                )
            time.sleep(effective_poll_interval)

        yield fh if acquired else None
    finally:
        try:
            if acquired and fh is not None:
                lock_target.unlink(missing_ok=True)
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        finally:
            try:
                if fh is not None:
                    fh.close()
            finally:
                mutex.release()


def is_locked(target: Path) -> bool:
    """Return True when a lock file exists for target."""
    return _lock_path(Path(target)).exists()


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "LockTimeoutError",
    "acquire_file_lock",
    "is_locked",
]
