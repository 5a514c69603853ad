"""Dependency ordering of candidate packages.

Packages are sorted with Kahn's algorithm so that every package comes after
the candidates it depends on. Ties are always broken by the original
collection order, so identical input yields an identical order.

When the candidates depend on each other in a cycle the ``on_cycle`` policy
decides:

- ``"warn"``: the cycle member that was collected first is released as if
  its remaining dependencies were satisfied, the cycle is recorded in
  ``OrderingResult.cycles`` and a warning is logged. Nothing is dropped.
- ``"error"``: ``DependencyCycleError`` is raised.
"""
from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Sequence, Set

from container_installer.core.exceptions import DependencyCycleError
from .models import PackageRecord

logger = logging.getLogger(__name__)

CYCLE_POLICIES = ("warn", "error")


class OrderingResult(NamedTuple):
    ordered: List[PackageRecord]
    cycles: List[List[str]]


def _build_graph(candidates: Sequence[PackageRecord]) -> Dict[int, Set[int]]:
    """Map each candidate index to the indices of the candidates it requires."""
    by_name: Dict[str, List[int]] = {}
    for idx, pkg in enumerate(candidates):
        by_name.setdefault(pkg.name, []).append(idx)

    graph: Dict[int, Set[int]] = {}
    for idx, pkg in enumerate(candidates):
        deps: Set[int] = set()
        for dep in pkg.dependencies:
            # Dependencies outside the candidate set do not affect ordering.
            deps.update(d for d in by_name.get(dep, ()) if d != idx)
        graph[idx] = deps
    return graph


def _cycle_members(start: int, graph: Dict[int, Set[int]], done: Set[int]) -> List[int]:
    """Follow unsatisfied dependencies from ``start`` until a node repeats."""
    path: List[int] = []
    seen: Dict[int, int] = {}
    node = start
    while node not in seen:
        seen[node] = len(path)
        path.append(node)
        pending = sorted(d for d in graph[node] if d not in done)
        if not pending:
            return [node]
        node = pending[0]
    return sorted(path[seen[node]:])


def order_packages(
    candidates: Sequence[PackageRecord], *, on_cycle: str = "warn"
) -> OrderingResult:
    """Topologically sort ``candidates`` so dependencies precede dependents."""
    if on_cycle not in CYCLE_POLICIES:
        raise ValueError(f"Unknown cycle policy: {on_cycle!r}")

    graph = _build_graph(candidates)
    indeg: Dict[int, int] = {n: len(deps) for n, deps in graph.items()}
    adj: Dict[int, List[int]] = {n: [] for n in graph}
    for node, deps in graph.items():
        for dep in deps:
            adj[dep].append(node)

    ready = [n for n, d in indeg.items() if d == 0]
    done: Set[int] = set()
    order: List[int] = []
    cycles: List[List[str]] = []

    while len(order) < len(graph):
        if not ready:
            members = _cycle_members(min(n for n in graph if n not in done), graph, done)
            blocked = members[0]
            names = [candidates[i].name for i in members]
            if on_cycle == "error":
                raise DependencyCycleError(names)
            logger.warning(
                "Dependency cycle between packages %s; keeping collection order for them",
                ", ".join(names),
            )
            cycles.append(names)
            ready.append(blocked)
        # Tie-break using original collection order
        ready.sort()
        n = ready.pop(0)
        done.add(n)
        order.append(n)
        for m in adj[n]:
            if m in done:
                continue
            indeg[m] -= 1
            if indeg[m] == 0:
                ready.append(m)

    ordered = [candidates[i] for i in order]
    logger.debug("Package order: %s", ", ".join(p.name for p in ordered))
    return OrderingResult(ordered, cycles)


def reorder_packages(
    candidates: Sequence[PackageRecord], *, on_cycle: str = "warn"
) -> List[PackageRecord]:
    """Return only the ordered packages; see ``order_packages``."""
    return order_packages(candidates, on_cycle=on_cycle).ordered


__all__ = ["CYCLE_POLICIES", "OrderingResult", "order_packages", "reorder_packages"]
