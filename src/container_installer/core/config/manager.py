"""
Container installer configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

from container_installer.core.exceptions import ConfigError
from container_installer.core.schemas import iter_schema_errors
from container_installer.core.utils.io import read_yaml, resolve_yaml_path
from container_installer.core.utils.merge import deep_merge
from container_installer.data import get_data_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = "container-installer.yaml"
ENV_PREFIX = "CONTAINER_INSTALLER_"


class ConfigManager:
    """Load, merge, and validate the installer configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: CONTAINER_INSTALLER_<SECTION>__<KEY>
    2. Project config: <repo_root>/container-installer.yaml (or .yml)
    3. Bundled defaults: container_installer.data/config/defaults.yaml
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.repo_root = Path(repo_root or Path.cwd()).expanduser().resolve()
        self.environ = os.environ if environ is None else environ
        self.defaults_path = get_data_path("config", "defaults.yaml")
        self.project_config_path = resolve_yaml_path(self.repo_root / PROJECT_CONFIG_NAME)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(
                f"Cannot read configuration file {path}: {exc}", context={"path": str(path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )
        return data

    # ------------------------------------------------------------------
    # Environment overrides
    # ------------------------------------------------------------------
    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if s == "null":
            return None
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip() == "null":
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": ENV_PREFIX + raw},
            )
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
            yield self._parse_env_key(raw), self._coerce_type(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for i, seg in enumerate(path):
            # Case-insensitive match against existing keys keeps camelCase names reachable.
            existing = next((k for k in cur if isinstance(k, str) and k.lower() == seg), seg)
            if i == len(path) - 1:
                cur[existing] = value
                return
            nxt = cur.get(existing)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[existing] = nxt
            cur = nxt

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        result = deep_merge({}, cfg)
        for path, value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(result, path, value)
        return result

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def validate(self, cfg: Dict[str, Any]) -> None:
        details = iter_schema_errors(cfg, "config.schema")
        if details:
            raise ConfigError(
                "Invalid container-installer configuration:\n  " + "\n  ".join(details),
                context={"errors": details},
            )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration dictionary."""
        cfg = self.load_yaml(self.defaults_path)
        if self.project_config_path.exists():
            logger.debug("Loading project config %s", self.project_config_path)
            cfg = deep_merge(cfg, self.load_yaml(self.project_config_path))
        cfg = self.apply_env_overrides(cfg)
        if validate:
            self.validate(cfg)
        return cfg


__all__ = ["ConfigManager", "PROJECT_CONFIG_NAME", "ENV_PREFIX"]
