from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from container_installer.core.packages import PackageRecord

_MISSING = object()


def package(
    name: str,
    factories: Any = _MISSING,
    *,
    deps: Iterable[str] = (),
    interop: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a lock-file style package mapping."""
    data: Dict[str, Any] = {"name": name, "require": {d: "*" for d in deps}}
    block = dict(interop or {})
    if factories is not _MISSING:
        block["container-factory"] = factories
    if interop is not None or factories is not _MISSING:
        data["extra"] = {"container-interop": block}
    return data


def record(name: str, *deps: str, factories: Any = _MISSING, root: bool = False) -> PackageRecord:
    extra: Dict[str, Any] = {}
    if factories is not _MISSING:
        extra = {"container-interop": {"container-factory": factories}}
    return PackageRecord(name=name, dependencies=frozenset(deps), extra=extra, is_root=root)


def names(records: Iterable[PackageRecord]) -> list[str]:
    return [r.name for r in records]
