"""
Lifecycle state resolution.

A supplier document is "migrated" once it carries lifecycle_state. For
legacy documents the lifecycle is derived from isActive and status. The
mapping never fails: any unrecognized or absent status becomes draft, and
that fallback is reported as LifecycleSource.UNRECOGNIZED_LEGACY_STATUS.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from supplier_gate.suppliers.types import LifecycleState

logger = logging.getLogger(__name__)

AUTHORITATIVE_FIELDS = ("compliance", "visibility", "blocks", "rate_limit")

LEGACY_STATUS_MAP: dict[str, LifecycleState] = {
    "active": LifecycleState.ACTIVE,
    "approved": LifecycleState.ACTIVE,
    "pending": LifecycleState.PENDING_REVIEW,
    "pending_review": LifecycleState.PENDING_REVIEW,
    "suspended": LifecycleState.SUSPENDED,
    "disabled": LifecycleState.DISABLED,
    "draft": LifecycleState.DRAFT,
}


class LifecycleSource(str, Enum):
    """How the lifecycle state of a supplier was obtained."""
    AUTHORITATIVE = "authoritative"
    PAUSED_BY_SUPPLIER_FLAG = "paused_by_supplier_flag"
    LEGACY_STATUS = "legacy_status"
    UNRECOGNIZED_LEGACY_STATUS = "unrecognized_legacy_status"


@dataclass(frozen=True)
class LifecycleResolution:
    state: Any
    source: LifecycleSource


def has_lifecycle_state(supplier: Mapping[str, Any]) -> bool:
    """A document is migrated when lifecycle_state is set to a non-empty value."""
    return bool(supplier.get("lifecycle_state"))


def has_authoritative_group(supplier: Mapping[str, Any], name: str) -> bool:
    """An authoritative group counts as present only when it is an object."""
    return isinstance(supplier.get(name), dict)


def missing_authoritative_groups(supplier: Mapping[str, Any]) -> list[str]:
    return [name for name in AUTHORITATIVE_FIELDS if not has_authoritative_group(supplier, name)]


def _legacy_status(supplier: Mapping[str, Any]) -> Optional[str]:
    status = supplier.get("status")
    if isinstance(status, str):
        return status.lower()
    return None


def resolve_lifecycle(supplier: Mapping[str, Any]) -> LifecycleResolution:
    """
    Resolve the lifecycle state of a supplier document.

    Order:
        1. Stored lifecycle_state, verbatim
        2. isActive == False -> paused_by_supplier (wins over status)
        3. Case-insensitive legacy status mapping
        4. draft for anything else, including an absent status
    """
    if has_lifecycle_state(supplier):
        return LifecycleResolution(supplier["lifecycle_state"], LifecycleSource.AUTHORITATIVE)

    if supplier.get("isActive") is False:
        return LifecycleResolution(
            LifecycleState.PAUSED_BY_SUPPLIER.value,
            LifecycleSource.PAUSED_BY_SUPPLIER_FLAG,
        )

    status = _legacy_status(supplier)
    mapped = LEGACY_STATUS_MAP.get(status) if status is not None else None
    if mapped is not None:
        return LifecycleResolution(mapped.value, LifecycleSource.LEGACY_STATUS)

    logger.debug(
        "unrecognized_legacy_status",
        extra={"legacy_status": supplier.get("status")},
    )
    return LifecycleResolution(
        LifecycleState.DRAFT.value,
        LifecycleSource.UNRECOGNIZED_LEGACY_STATUS,
    )


def migrate_lifecycle_state(supplier: Mapping[str, Any]) -> Any:
    """Canonical lifecycle value for a supplier, migrated or not."""
    return resolve_lifecycle(supplier).state
