"""Scoped read-then-write access to the generated containers module."""
from __future__ import annotations

import logging
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from container_installer.core.exceptions import PersistenceReadError, PersistenceWriteError
from container_installer.core.utils.io import LockTimeoutError, acquire_file_lock, read_text, write_text
from .codec import parse_entries

logger = logging.getLogger(__name__)


class ContainersFile:
    """Handle on the containers module, valid while its lock is held.

    The previous content is read at most once and the new content written at
    most once, through a temp file that replaces the target atomically.
    """

    def __init__(self, path: Path, *, variable: str = "CONTAINERS") -> None:
        self.path = Path(path)
        self.variable = variable
        self._previous: Optional[List[Dict[str, Any]]] = None
        self._written = False

    @property
    def written(self) -> bool:
        return self._written

    def read_strict(self) -> List[Dict[str, Any]]:
        """Return the previous entries, raising ``PersistenceReadError`` on bad content."""
        if not self.path.exists():
            return []
        try:
            source = read_text(self.path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceReadError(
                f"Cannot read {self.path}: {exc}", context={"path": str(self.path)}
            ) from exc
        try:
            return parse_entries(source, variable=self.variable)
        except PersistenceReadError as exc:
            raise PersistenceReadError(
                f"Cannot parse {self.path}: {exc}", context={"path": str(self.path)}
            ) from exc

    def read(self) -> List[Dict[str, Any]]:
        """Return the previous entries; an unreadable file counts as empty."""
        if self._previous is None:
            try:
                self._previous = self.read_strict()
            except PersistenceReadError as exc:
                logger.warning("%s; regenerating without previous entries", exc)
                self._previous = []
        return list(self._previous)

    def write(self, content: str) -> None:
        if self._written:
            raise RuntimeError(f"{self.path} was already written in this session")
        try:
            write_text(self.path, content)
        except OSError as exc:
            raise PersistenceWriteError(
                f"Cannot write {self.path}: {exc}",
                context={"path": str(self.path), "stage": "persist"},
            ) from exc
        self._written = True
        logger.info("Wrote %s", self.path)


@contextmanager
def open_containers_file(
    path: Path,
    *,
    variable: str = "CONTAINERS",
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    fail_open: bool = False,
) -> Iterator[ContainersFile]:
    """Lock ``path`` for one regeneration and yield its ``ContainersFile``.

    Raises:
        PersistenceWriteError: if the lock cannot be acquired in time.
    """
    target = Path(path)
    with ExitStack() as stack:
        try:
            handle = stack.enter_context(
                acquire_file_lock(
                    target, timeout=timeout, poll_interval=poll_interval, fail_open=fail_open
                )
            )
        except LockTimeoutError as exc:
            raise PersistenceWriteError(
                f"Another regeneration holds the lock on {target}: {exc}",
                context={"path": str(target), "stage": "persist"},
            ) from exc
        except OSError as exc:
            raise PersistenceWriteError(
                f"Cannot lock {target}: {exc}",
                context={"path": str(target), "stage": "persist"},
            ) from exc
        if handle is None:
            logger.warning("Proceeding without a lock on %s", target)

        yield ContainersFile(target, variable=variable)


__all__ = ["ContainersFile", "open_containers_file"]
