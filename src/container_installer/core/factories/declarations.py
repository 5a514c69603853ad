"""Classification of ``container-factory`` declarations.

A package may declare its factories in one of five shapes::

    "code"                                    -> ScalarFactory
    ["code", "code"]                          -> ScalarList
    {"name": .., "description": .., "factory": "code"}  -> Descriptor
    [{"factory": "code"}, {"factory": "code"}]          -> DescriptorList
    ["code", {"factory": "code"}]                       -> MixedList

``classify_declaration`` is the only place that inspects the raw shape; the
rest of the pipeline works on these variants.
"""
from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from container_installer.core.exceptions import MalformedFactoryDeclarationError
from container_installer.core.schemas import iter_schema_errors
from .entries import CORE_KEYS, Expression, FactoryEntry

DESCRIPTOR_SCHEMA = "factory-descriptor.schema"


@dataclass(frozen=True)
class ScalarFactory:
    code: Expression


@dataclass(frozen=True)
class ScalarList:
    codes: Tuple[Expression, ...]


@dataclass(frozen=True)
class Descriptor:
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class DescriptorList:
    descriptors: Tuple[Descriptor, ...]


@dataclass(frozen=True)
class MixedList:
    items: Tuple[Union[Expression, Descriptor], ...]


Declaration = Union[ScalarFactory, ScalarList, Descriptor, DescriptorList, MixedList]


def parse_factory_code(code: str) -> Expression:
    """Check that ``code`` is one Python expression usable as a dict value.

    The code is parsed in the same position it takes in the generated
    module, so a trailing comment or a bare tuple is rejected here rather
    than producing an unloadable file.
    """
    text = code.strip()
    if not text:
        raise ValueError("factory code is empty")
    try:
        tree = ast.parse(f"{{'factory': {text},}}", mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"factory code is not a Python expression ({exc.msg})") from exc
    body = tree.body
    if not (isinstance(body, ast.Dict) and len(body.values) == 1):
        raise ValueError("factory code must be a single expression")
    return Expression(text)


def _sequential_values(value: Mapping[Any, Any]) -> Optional[List[Any]]:
    """Return the values of a ``{0: .., 1: ..}`` mapping in order, else None."""
    if not value:
        return None
    keys = [str(k) for k in value.keys()]
    if keys != [str(i) for i in range(len(keys))]:
        return None
    return list(value.values())


def _code(package: str, raw: Any, value: str) -> Expression:
    try:
        return parse_factory_code(value)
    except ValueError as exc:
        raise MalformedFactoryDeclarationError(package, raw, str(exc)) from exc


def _descriptor(package: str, raw: Any, value: Mapping[str, Any]) -> Descriptor:
    errors = iter_schema_errors(dict(value), DESCRIPTOR_SCHEMA)
    if errors:
        raise MalformedFactoryDeclarationError(package, raw, "; ".join(errors))
    fields = dict(value)
    fields["factory"] = _code(package, raw, fields["factory"])
    return Descriptor(fields)


def _classify_sequence(package: str, raw: Any, items: Sequence[Any]) -> Declaration:
    if all(isinstance(item, str) for item in items):
        return ScalarList(tuple(_code(package, raw, item) for item in items))
    if all(isinstance(item, Mapping) for item in items):
        return DescriptorList(tuple(_descriptor(package, raw, item) for item in items))
    mixed: List[Union[Expression, Descriptor]] = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            mixed.append(_code(package, raw, item))
        elif isinstance(item, Mapping):
            mixed.append(_descriptor(package, raw, item))
        else:
            raise MalformedFactoryDeclarationError(
                package,
                raw,
                f"list item {index} must be factory code or an object, got {type(item).__name__}",
            )
    return MixedList(tuple(mixed))


def classify_declaration(package: str, raw: Any) -> Declaration:
    """Turn a raw ``container-factory`` value into one of the declaration variants.

    Raises:
        MalformedFactoryDeclarationError: for any other shape, for descriptors
            violating the descriptor schema and for invalid factory code.
    """
    if isinstance(raw, str):
        return ScalarFactory(_code(package, raw, raw))
    if isinstance(raw, Mapping):
        items = _sequential_values(raw)
        if items is not None:
            return _classify_sequence(package, raw, items)
        return _descriptor(package, raw, raw)
    if isinstance(raw, (list, tuple)):
        return _classify_sequence(package, raw, raw)
    raise MalformedFactoryDeclarationError(
        package,
        raw,
        f"expected a string, a list or an object, got {type(raw).__name__}",
    )


def _default_description(package: str, index: int, count: int) -> str:
    if count == 1:
        return f"Container for package {package}"
    return f"Container number {index} for package {package}"


def expand_declaration(package: str, declaration: Declaration) -> List[FactoryEntry]:
    """Build the package's factory entries, synthesizing missing names and descriptions."""
    items: Sequence[Union[Expression, Descriptor]]
    if isinstance(declaration, ScalarFactory):
        items = (declaration.code,)
    elif isinstance(declaration, ScalarList):
        items = declaration.codes
    elif isinstance(declaration, Descriptor):
        items = (declaration,)
    elif isinstance(declaration, DescriptorList):
        items = declaration.descriptors
    else:
        items = declaration.items

    entries: List[FactoryEntry] = []
    for index, item in enumerate(items):
        name = f"{package}_{index}"
        description = _default_description(package, index, len(items))
        if isinstance(item, Descriptor):
            fields: Dict[str, Any] = dict(item.fields)
            entries.append(
                FactoryEntry(
                    name=fields.get("name") or name,
                    description=fields.get("description") or description,
                    factory=fields["factory"],
                    enable=fields.get("enable"),
                    extra={k: v for k, v in fields.items() if k not in CORE_KEYS},
                )
            )
        else:
            entries.append(FactoryEntry(name=name, description=description, factory=item))
    return entries


__all__ = [
    "ScalarFactory",
    "ScalarList",
    "Descriptor",
    "DescriptorList",
    "MixedList",
    "Declaration",
    "classify_declaration",
    "expand_declaration",
    "parse_factory_code",
]
