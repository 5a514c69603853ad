from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

CORE_KEYS = ("name", "description", "factory", "enable")


class Expression(str):
    """Python source text that is written to the containers module verbatim."""

    def __repr__(self) -> str:
        return f"Expression({str.__repr__(self)})"


@dataclass
class FactoryEntry:
    """Canonical form of one container factory.

    ``enable`` stays ``None`` until the entry is merged: an explicit value
    from the package wins, otherwise the previous run's value is kept, and
    new entries default to ``True``.
    """

    name: str
    description: str
    factory: Expression
    enable: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def overlay(self, previous: Optional[Mapping[str, Any]]) -> "FactoryEntry":
        """Return this entry laid over ``previous`` (this entry wins on conflicts)."""
        base = dict(previous or {})
        extra = {k: v for k, v in base.items() if k not in CORE_KEYS}
        extra.update(self.extra)
        enable = self.enable
        if enable is None:
            enable = base.get("enable", True)
        return FactoryEntry(
            name=self.name,
            description=self.description,
            factory=self.factory,
            enable=enable,
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "factory": self.factory,
        }
        if self.enable is not None:
            data["enable"] = self.enable
        data.update(self.extra)
        return data


__all__ = ["CORE_KEYS", "Expression", "FactoryEntry"]
