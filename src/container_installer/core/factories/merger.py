"""Build, merge and render the factory entry list.

Entries are rebuilt from package metadata on every run. Only ``enable`` and
extension keys carry over from the previous run, matched by entry name.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from container_installer.core.exceptions import MalformedFactoryDeclarationError
from container_installer.core.packages.models import PackageRecord
from .codec import entries_by_name, render_entries
from .declarations import classify_declaration, expand_declaration
from .entries import FactoryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeclarationIssue:
    """A package whose factory declaration was skipped."""

    package: str
    value: Any
    message: str

    @classmethod
    def from_error(cls, error: MalformedFactoryDeclarationError) -> "DeclarationIssue":
        return cls(package=error.package, value=error.value, message=error.reason)


class MergeResult(NamedTuple):
    entries: List[FactoryEntry]
    rendered: Optional[str]
    issues: List[DeclarationIssue]


def build_entries(
    packages: Sequence[PackageRecord],
) -> Tuple[List[FactoryEntry], List[DeclarationIssue]]:
    """Expand every package's declaration, in package order.

    A malformed declaration is recorded as an issue and the package is
    skipped; the other packages are still processed.
    """
    entries: List[FactoryEntry] = []
    issues: List[DeclarationIssue] = []
    for package in packages:
        raw = package.factory_declaration
        if raw is None:
            continue
        try:
            declaration = classify_declaration(package.name, raw)
        except MalformedFactoryDeclarationError as exc:
            logger.debug("Skipping package %s: %s", package.name, exc.reason)
            issues.append(DeclarationIssue.from_error(exc))
            continue
        entries.extend(expand_declaration(package.name, declaration))
    return entries, issues


def merge_entries(
    entries: Sequence[FactoryEntry],
    previous: Sequence[Mapping[str, Any]],
) -> List[FactoryEntry]:
    """Overlay each entry on the previous entry with the same name."""
    index = entries_by_name(previous)
    seen: Dict[str, int] = {}
    merged: List[FactoryEntry] = []
    for entry in entries:
        seen[entry.name] = seen.get(entry.name, 0) + 1
        if seen[entry.name] == 2:
            logger.warning("Container factory name '%s' is declared more than once", entry.name)
        merged.append(entry.overlay(index.get(entry.name)))
    return merged


def merge_factories(
    packages: Sequence[PackageRecord],
    previous: Sequence[Mapping[str, Any]],
    *,
    variable: str = "CONTAINERS",
) -> MergeResult:
    """Merge the ordered packages' factories with ``previous`` and render the module.

    ``rendered`` is None when no package declares any factory, so callers
    leave an existing file alone.
    """
    entries, issues = build_entries(packages)
    merged = merge_entries(entries, previous)
    rendered = render_entries(merged, variable=variable) if merged else None
    return MergeResult(merged, rendered, issues)


__all__ = [
    "DeclarationIssue",
    "MergeResult",
    "build_entries",
    "merge_entries",
    "merge_factories",
]
