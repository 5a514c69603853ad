"""Layered configuration: bundled defaults, project YAML, environment."""
from __future__ import annotations

from .manager import ConfigManager, PROJECT_CONFIG_NAME, ENV_PREFIX
from .installer import InstallerConfig

__all__ = [
    "ConfigManager",
    "PROJECT_CONFIG_NAME",
    "ENV_PREFIX",
    "InstallerConfig",
]
