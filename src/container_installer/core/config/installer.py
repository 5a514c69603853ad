"""Typed access to the installer configuration.

Usage:
    cfg = InstallerConfig(repo_root=Path("/path/to/project"))
    cfg.output_path   # /path/to/project/containers.py
    cfg.on_cycle      # "warn"
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .manager import ConfigManager


class InstallerConfig:
    """Cached, typed accessors over the merged configuration."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        manager = ConfigManager(repo_root, environ=environ)
        self.repo_root = manager.repo_root
        if config is None:
            config = manager.load_config()
        else:
            manager.validate(config)
        self._config = config

    def _section(self, name: str) -> Dict[str, Any]:
        return self._config.get(name, {}) or {}

    @property
    def raw(self) -> Dict[str, Any]:
        return self._config

    @cached_property
    def output_path(self) -> Path:
        """Absolute path of the generated containers module."""
        configured = Path(str(self._section("containers")["outputFile"])).expanduser()
        if not configured.is_absolute():
            configured = self.repo_root / configured
        return configured

    @cached_property
    def variable(self) -> str:
        return str(self._section("containers")["variable"])

    @cached_property
    def on_cycle(self) -> str:
        return str(self._section("ordering")["onCycle"])

    @cached_property
    def lock_timeout(self) -> float:
        return float(self._section("file_locking")["timeout_seconds"])

    @cached_property
    def lock_poll_interval(self) -> float:
        return float(self._section("file_locking")["poll_interval_seconds"])

    @cached_property
    def lock_fail_open(self) -> bool:
        return bool(self._section("file_locking").get("fail_open", False))

    @cached_property
    def log_level(self) -> str:
        return str(self._section("logging").get("level") or "INFO").upper()

    @cached_property
    def log_file(self) -> Optional[Path]:
        """Log file path, or None when logging is left to the host."""
        raw = self._section("logging").get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.repo_root / path


__all__ = ["InstallerConfig"]
