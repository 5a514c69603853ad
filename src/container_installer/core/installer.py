"""Entry point: regenerate the containers module from a resolved package set.

The host build tool calls this once per dependency resolution, after the
package set is final::

    installer = ContainerInstaller(repo_root)
    result = installer.install(lock["packages"], root, dev_packages=lock["packages-dev"])

Stages run strictly in order: collect, order, merge, persist.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from container_installer.core.config import InstallerConfig
from container_installer.core.factories import (
    DeclarationIssue,
    FactoryEntry,
    merge_factories,
    open_containers_file,
)
from container_installer.core.packages import collect_packages, order_packages
from container_installer.core.packages.collector import PackageLike
from container_installer.core.stdlib_logging import configure_stdlib_logging

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    path: Path
    entries: List[FactoryEntry] = field(default_factory=list)
    written: bool = False
    issues: List[DeclarationIssue] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def _report_issues(issues: List[DeclarationIssue]) -> None:
    if not issues:
        return
    lines = [f"  - {issue.package}: {issue.message} (value: {issue.value!r})" for issue in issues]
    logger.warning(
        "Ignored invalid container-factory declarations in %d package(s):\n%s",
        len(issues),
        "\n".join(lines),
    )


class ContainerInstaller:
    """Regenerates the containers module for one project."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[InstallerConfig] = None,
    ) -> None:
        self.config = config or InstallerConfig(repo_root)
        if self.config.log_file is not None:
            configure_stdlib_logging(log_path=self.config.log_file, level=self.config.log_level)

    def install(
        self,
        packages: Iterable[PackageLike],
        root_package: PackageLike,
        *,
        dev_packages: Iterable[PackageLike] = (),
    ) -> GenerationResult:
        """Collect, order and merge factories, then rewrite the containers module.

        Raises:
            DependencyCycleError: with ``ordering.onCycle: error`` and a cycle.
            PersistenceWriteError: when the module cannot be locked or written;
                the previous module is left untouched.
        """
        cfg = self.config
        logger.info("Compiling containers list")

        candidates = collect_packages(packages, root_package, dev_packages=dev_packages)
        ordering = order_packages(candidates, on_cycle=cfg.on_cycle)

        result = GenerationResult(path=cfg.output_path, cycles=ordering.cycles)
        try:
            with open_containers_file(
                cfg.output_path,
                variable=cfg.variable,
                timeout=cfg.lock_timeout,
                poll_interval=cfg.lock_poll_interval,
                fail_open=cfg.lock_fail_open,
            ) as store:
                merged = merge_factories(ordering.ordered, store.read(), variable=cfg.variable)
                result.entries = merged.entries
                result.issues = merged.issues
                if merged.rendered is None:
                    logger.info("No container factories declared; leaving %s untouched", cfg.output_path)
                else:
                    store.write(merged.rendered)
                    result.written = True
        finally:
            _report_issues(result.issues)
        return result


def generate_containers(
    packages: Iterable[PackageLike],
    root_package: PackageLike,
    *,
    dev_packages: Iterable[PackageLike] = (),
    repo_root: Optional[Path] = None,
    config: Optional[InstallerConfig] = None,
) -> GenerationResult:
    """Shorthand for ``ContainerInstaller(repo_root, config=config).install(...)``."""
    installer = ContainerInstaller(repo_root, config=config)
    return installer.install(packages, root_package, dev_packages=dev_packages)


__all__ = ["ContainerInstaller", "GenerationResult", "generate_containers"]
