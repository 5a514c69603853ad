"""Select the packages that take part in container discovery."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Union

from .models import ROOT_PACKAGE_NAME, PackageRecord

logger = logging.getLogger(__name__)

PackageLike = Union[PackageRecord, Mapping[str, Any]]


def collect_packages(
    packages: Iterable[PackageLike],
    root_package: PackageLike,
    *,
    dev_packages: Iterable[PackageLike] = (),
) -> List[PackageRecord]:
    """Return the candidate packages in the host's enumeration order.

    Non-root packages are kept only when their ``extra.container-interop``
    block is a mapping. The root package is always appended last, flagged as
    root, whether or not it declares anything. Development packages follow
    the production ones.
    """
    candidates: List[PackageRecord] = []
    for raw in [*packages, *dev_packages]:
        if isinstance(raw, Mapping) and not raw.get("name"):
            logger.warning("Package record without a name, using '%s'", ROOT_PACKAGE_NAME)
        record = PackageRecord.coerce(raw)
        if record.container_interop is None:
            continue
        candidates.append(record)

    if isinstance(root_package, Mapping):
        root = PackageRecord.from_mapping(root_package, is_root=True)
    else:
        root = PackageRecord.coerce(root_package).as_root()
    candidates.append(root)

    logger.debug(
        "Collected %d candidate package(s) including root '%s'", len(candidates), root.name
    )
    return candidates


__all__ = ["collect_packages", "PackageLike"]
