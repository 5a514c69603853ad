"""I/O utilities for the container installer.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, text I/O
- YAML: read with shared locks
- Locking: sidecar file locks held across a read-then-write cycle
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .locking import (
    LockTimeoutError,
    acquire_file_lock,
    is_locked,
)
from .yaml import (
    read_yaml,
    resolve_yaml_path,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text",
    "write_text",
    # yaml
    "read_yaml",
    "resolve_yaml_path",
    # locking
    "acquire_file_lock",
    "LockTimeoutError",
    "is_locked",
]
