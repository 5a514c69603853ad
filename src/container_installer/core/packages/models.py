from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

ROOT_PACKAGE_NAME = "root"
EXTRA_KEY = "container-interop"
FACTORY_KEY = "container-factory"


def _dependency_names(data: Mapping[str, Any]) -> FrozenSet[str]:
    names: set[str] = set()
    deps = data.get("dependencies")
    if isinstance(deps, Mapping):
        names.update(str(k) for k in deps)
    elif isinstance(deps, Iterable) and not isinstance(deps, (str, bytes)):
        names.update(str(d) for d in deps)
    # Lock-file style records list requirements as {package: constraint}.
    require = data.get("require")
    if isinstance(require, Mapping):
        names.update(str(k) for k in require)
    return frozenset(names)


@dataclass(frozen=True)
class PackageRecord:
    """One resolved package as supplied by the host build tool."""

    name: str
    dependencies: FrozenSet[str] = frozenset()
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)
    is_root: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, is_root: bool = False) -> "PackageRecord":
        root = bool(is_root or data.get("is-root") or data.get("is_root"))
        name = data.get("name") or ROOT_PACKAGE_NAME
        extra = data.get("extra")
        return cls(
            name=str(name),
            dependencies=_dependency_names(data),
            extra=dict(extra) if isinstance(extra, Mapping) else {},
            is_root=root,
        )

    @classmethod
    def coerce(cls, obj: Union["PackageRecord", Mapping[str, Any]]) -> "PackageRecord":
        if isinstance(obj, PackageRecord):
            return obj
        if isinstance(obj, Mapping):
            return cls.from_mapping(obj)
        raise TypeError(f"Expected PackageRecord or mapping, got {type(obj).__name__}")

    def as_root(self) -> "PackageRecord":
        if self.is_root:
            return self
        return PackageRecord(
            name=self.name or ROOT_PACKAGE_NAME,
            dependencies=self.dependencies,
            extra=self.extra,
            is_root=True,
        )

    @property
    def container_interop(self) -> Optional[Mapping[str, Any]]:
        """The ``extra.container-interop`` block, when it is a mapping."""
        block = self.extra.get(EXTRA_KEY)
        return block if isinstance(block, Mapping) else None

    @property
    def factory_declaration(self) -> Any:
        """Raw ``container-factory`` value, or None when not declared."""
        block = self.container_interop
        if block is None:
            return None
        return block.get(FACTORY_KEY)


__all__ = ["PackageRecord", "ROOT_PACKAGE_NAME", "EXTRA_KEY", "FACTORY_KEY"]
