"""Package collection and dependency ordering."""
from __future__ import annotations

from .models import PackageRecord, ROOT_PACKAGE_NAME
from .collector import collect_packages
from .orderer import OrderingResult, order_packages, reorder_packages

__all__ = [
    "PackageRecord",
    "ROOT_PACKAGE_NAME",
    "collect_packages",
    "OrderingResult",
    "order_packages",
    "reorder_packages",
]
