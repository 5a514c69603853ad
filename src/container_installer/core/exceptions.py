from __future__ import annotations

from typing import Any, Dict, Mapping


class ContainerInstallerError(Exception):
    """Base exception for the container installer."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(ContainerInstallerError, ValueError):
    """Raised when the layered configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ContainerInstallerError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class MalformedFactoryDeclarationError(ContainerInstallerError, ValueError):
    """Raised when a package's ``container-factory`` metadata has an unsupported shape."""

    def __init__(self, package: str, value: Any, reason: str) -> None:
        message = f"Invalid container-factory declaration in package '{package}': {reason}"
        ContainerInstallerError.__init__(
            self,
            message,
            context={"package": package, "value": value, "stage": "collect"},
        )
        ValueError.__init__(self, message)
        self.package = package
        self.value = value
        self.reason = reason


class DependencyCycleError(ContainerInstallerError, ValueError):
    """Raised when candidate packages depend on each other in a cycle."""

    def __init__(self, packages: list[str]) -> None:
        message = "Cycle detected in package dependency graph: " + ", ".join(packages)
        ContainerInstallerError.__init__(
            self, message, context={"packages": list(packages), "stage": "order"}
        )
        ValueError.__init__(self, message)
        self.packages = list(packages)


class PersistenceReadError(ContainerInstallerError, ValueError):
    """Raised when an existing containers module cannot be parsed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ContainerInstallerError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class PersistenceWriteError(ContainerInstallerError, OSError):
    """Raised when the containers module cannot be written.

    The previous file, if any, is left untouched.
    """

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ContainerInstallerError.__init__(self, message, context=context)
        OSError.__init__(self, message)


__all__ = [
    "ContainerInstallerError",
    "ConfigError",
    "MalformedFactoryDeclarationError",
    "DependencyCycleError",
    "PersistenceReadError",
    "PersistenceWriteError",
]
