"""Rendering and parsing of the generated containers module.

The module holds a single assignment::

    CONTAINERS = [
        {
            'name': 'acme/foo_0',
            'description': 'Container for package acme/foo',
            'factory': acme.foo.create_container,
            'enable': True,
        },
    ]

Every value is a Python literal except ``factory``, which is the package's
factory code written verbatim. Reading goes through ``ast`` only; the module
is never executed.
"""
from __future__ import annotations

import ast
from typing import Any, Dict, List, Mapping, Sequence

from container_installer.core.exceptions import PersistenceReadError
from .entries import Expression, FactoryEntry

HEADER = (
    "# This file is generated by container-installer.\n"
    "# Factory code and descriptions are refreshed from package metadata on every run;\n"
    "# \"enable\" and any additional keys you set are kept.\n"
)
INDENT = "    "


def _render_value(value: Any) -> str:
    if isinstance(value, Expression):
        return str(value)
    return repr(value)


def render_entries(entries: Sequence[FactoryEntry], *, variable: str = "CONTAINERS") -> str:
    lines = [HEADER, f"{variable} = ["]
    for entry in entries:
        lines.append(f"{INDENT}{{")
        for key, value in entry.to_dict().items():
            lines.append(f"{INDENT * 2}{key!r}: {_render_value(value)},")
        lines.append(f"{INDENT}}},")
    lines.append("]")
    return "\n".join(lines) + "\n"


def _find_assignment(tree: ast.Module, variable: str) -> ast.expr:
    for node in tree.body:
        if isinstance(node, ast.Assign):
            if any(isinstance(t, ast.Name) and t.id == variable for t in node.targets):
                return node.value
        elif isinstance(node, ast.AnnAssign):
            if isinstance(node.target, ast.Name) and node.target.id == variable and node.value:
                return node.value
    raise PersistenceReadError(f"no top-level '{variable}' assignment found")


def _parse_value(source: str, key: str, node: ast.expr) -> Any:
    segment = ast.get_source_segment(source, node) or ""
    if key == "factory":
        return Expression(segment)
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError):
        # Hand-written expressions are carried over as they were written.
        return Expression(segment)


def _parse_entry(source: str, node: ast.expr, position: int) -> Dict[str, Any]:
    if not isinstance(node, ast.Dict):
        raise PersistenceReadError(f"entry #{position} is not a dict literal")
    entry: Dict[str, Any] = {}
    for key_node, value_node in zip(node.keys, node.values):
        if not (isinstance(key_node, ast.Constant) and isinstance(key_node.value, str)):
            raise PersistenceReadError(f"entry #{position} has a non-string key")
        entry[key_node.value] = _parse_value(source, key_node.value, value_node)
    if not isinstance(entry.get("name"), str):
        raise PersistenceReadError(f"entry #{position} has no string 'name'")
    return entry


def parse_entries(source: str, *, variable: str = "CONTAINERS") -> List[Dict[str, Any]]:
    """Parse a containers module into plain entry dicts.

    Raises:
        PersistenceReadError: when the source is not a containers module.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError as exc:
        raise PersistenceReadError(f"invalid Python syntax at line {exc.lineno}: {exc.msg}") from exc
    value = _find_assignment(tree, variable)
    if not isinstance(value, (ast.List, ast.Tuple)):
        raise PersistenceReadError(f"'{variable}' must be assigned a list literal")
    return [_parse_entry(source, node, i) for i, node in enumerate(value.elts)]


def entries_by_name(entries: Sequence[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
    """Index entries by name; the first entry with a given name wins."""
    index: Dict[str, Mapping[str, Any]] = {}
    for entry in entries:
        index.setdefault(str(entry.get("name")), entry)
    return index


__all__ = ["render_entries", "parse_entries", "entries_by_name", "HEADER"]
