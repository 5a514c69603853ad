"""YAML reading with shared advisory locks."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any

import yaml


def read_yaml(
    path: Path, default: Any = None, raise_on_error: bool = False
) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.

    Examples:
        >>> config = read_yaml(Path("container-installer.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def resolve_yaml_path(path: Path) -> Path:
    """Resolve a YAML path that may be either ``.yml`` or ``.yaml``.

    Preference is given to ``.yaml`` when both exist. If no existing candidate
    is found, returns ``path`` unchanged.
    """
    p = Path(path)
    base = p.with_suffix("") if p.suffix in {".yml", ".yaml"} else p

    for ext in (".yaml", ".yml"):
        candidate = base.with_suffix(ext)
        if candidate.exists():
            return candidate

    return p


__all__ = [
    "read_yaml",
    "resolve_yaml_path",
]
