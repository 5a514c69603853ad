"""JSON Schema validation for bundled schemas.

Schemas are stored as YAML files (JSON Schema expressed in YAML) under
``container_installer.data/schemas/`` and validated with ``jsonschema``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema

from container_installer.data import read_yaml


@lru_cache(maxsize=8)
def _validator(schema_name: str) -> jsonschema.Draft202012Validator:
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


def iter_schema_errors(payload: Any, schema_name: str) -> List[str]:
    """Validate ``payload`` and return ``"<path>: <message>"`` strings (empty if valid)."""
    validator = _validator(schema_name)
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    return [
        f"{'/'.join(str(p) for p in err.path) or '<root>'}: {err.message}"
        for err in errors
    ]


def load_schema(schema_name: str) -> Dict[str, Any]:
    return dict(_validator(schema_name).schema)


__all__ = ["iter_schema_errors", "load_schema"]
