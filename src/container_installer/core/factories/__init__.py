"""Container factory declarations, merging and persistence."""
from __future__ import annotations

from .entries import Expression, FactoryEntry
from .declarations import (
    Declaration,
    Descriptor,
    DescriptorList,
    MixedList,
    ScalarFactory,
    ScalarList,
    classify_declaration,
    expand_declaration,
)
from .codec import parse_entries, render_entries
from .merger import DeclarationIssue, MergeResult, build_entries, merge_entries, merge_factories
from .store import ContainersFile, open_containers_file

__all__ = [
    "Expression",
    "FactoryEntry",
    "Declaration",
    "Descriptor",
    "DescriptorList",
    "MixedList",
    "ScalarFactory",
    "ScalarList",
    "classify_declaration",
    "expand_declaration",
    "parse_entries",
    "render_entries",
    "DeclarationIssue",
    "MergeResult",
    "build_entries",
    "merge_entries",
    "merge_factories",
    "ContainersFile",
    "open_containers_file",
]
