"""Stdlib logging setup for hosts that ask the installer to log to a file."""
from __future__ import annotations

import logging
from pathlib import Path

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None

LOGGER_NAME = "container_installer"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Send ``container_installer`` log records to ``log_path``.

    Only the package logger is touched; the host's root logger keeps its
    handlers. Idempotent per-process: if already configured for the same file,
    only the level is updated.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    pkg_logger = logging.getLogger(LOGGER_NAME)
    pkg_logger.setLevel(_level_from_name(level))

    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_level_from_name(level))
        return

    Path(resolved).parent.mkdir(parents=True, exist_ok=True)

    # Replace the previously installed handler when switching paths.
    if _FILE_HANDLER is not None:
        pkg_logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    pkg_logger.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the installed file handler."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER
    if _FILE_HANDLER is not None:
        logging.getLogger(LOGGER_NAME).removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests", "LOGGER_NAME"]
