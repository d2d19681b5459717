"""
Field resolution for supplier eligibility.

POLICY (fail closed):
- Authoritative group present: used verbatim
- lifecycle_state present but group missing: fixed restrictive default
  (HARD DENY). Legacy fields are NEVER consulted for migrated documents.
- lifecycle_state absent: group derived from legacy fields

Each group is resolved by resolve_fact_group(), a pure function, so the
policy can be exercised without any storage.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, TypeVar

from supplier_gate.suppliers.lifecycle import (
    LifecycleResolution,
    has_lifecycle_state,
    missing_authoritative_groups,
    resolve_lifecycle,
)
from supplier_gate.suppliers.types import (
    Blocks,
    Compliance,
    KycStatus,
    RateLimitState,
    Resolved,
    ResolutionSource,
    Visibility,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Restrictive defaults for migrated documents missing a group
HARD_DENY_COMPLIANCE = Compliance(payouts_ready=False, kyc_status=KycStatus.NOT_STARTED.value)
HARD_DENY_VISIBILITY = Visibility(is_listed=False)
HARD_DENY_BLOCKS = Blocks(bookings_globally=True, scheduled_blocks=())
HARD_DENY_RATE_LIMIT = RateLimitState(exceeded=True)

LEGACY_ACTIVE_STATUSES = ("active", "approved")


def resolve_fact_group(
    authoritative: Optional[Mapping[str, Any]],
    is_migrated: bool,
    hard_deny_default: T,
    parse: Callable[[Mapping[str, Any]], T],
    derive_legacy: Callable[[], T],
) -> Resolved[T]:
    """
    Resolve one fact group.

    Args:
        authoritative: The stored group, or None when absent
        is_migrated: Whether the document carries lifecycle_state
        hard_deny_default: Value used for migrated documents missing the group
        parse: Reads the stored group
        derive_legacy: Derives the group from legacy fields

    Returns:
        Resolved value tagged with its source
    """
    if authoritative is not None:
        return Resolved(parse(authoritative), ResolutionSource.AUTHORITATIVE)
    if is_migrated:
        return Resolved(hard_deny_default, ResolutionSource.HARD_DENY_DEFAULT)
    return Resolved(derive_legacy(), ResolutionSource.LEGACY_DERIVED)


def _group(supplier: Mapping[str, Any], name: str) -> Optional[Mapping[str, Any]]:
    value = supplier.get(name)
    return value if isinstance(value, dict) else None


def _parse_compliance(group: Mapping[str, Any]) -> Compliance:
    kyc_status = group.get("kyc_status")
    return Compliance(
        payouts_ready=bool(group.get("payouts_ready")),
        kyc_status=kyc_status if kyc_status else None,
    )


def _parse_visibility(group: Mapping[str, Any]) -> Visibility:
    return Visibility(is_listed=bool(group.get("is_listed")))


def _parse_blocks(group: Mapping[str, Any]) -> Blocks:
    scheduled = group.get("scheduled_blocks")
    if not isinstance(scheduled, list):
        scheduled = []
    return Blocks(
        bookings_globally=bool(group.get("bookings_globally")),
        scheduled_blocks=tuple(scheduled),
    )


def _parse_rate_limit(group: Mapping[str, Any]) -> RateLimitState:
    return RateLimitState(exceeded=bool(group.get("exceeded")))


def legacy_was_active(supplier: Mapping[str, Any]) -> bool:
    """Legacy compliance: status active/approved (exact match) and not paused."""
    return supplier.get("status") in LEGACY_ACTIVE_STATUSES and supplier.get("isActive") is not False


def resolve_compliance(supplier: Mapping[str, Any]) -> Resolved[Compliance]:
    def derive() -> Compliance:
        was_active = legacy_was_active(supplier)
        return Compliance(
            payouts_ready=was_active,
            kyc_status=KycStatus.VERIFIED.value if was_active else KycStatus.NOT_STARTED.value,
        )

    return resolve_fact_group(
        _group(supplier, "compliance"),
        has_lifecycle_state(supplier),
        HARD_DENY_COMPLIANCE,
        _parse_compliance,
        derive,
    )


def resolve_visibility(supplier: Mapping[str, Any]) -> Resolved[Visibility]:
    return resolve_fact_group(
        _group(supplier, "visibility"),
        has_lifecycle_state(supplier),
        HARD_DENY_VISIBILITY,
        _parse_visibility,
        lambda: Visibility(is_listed=supplier.get("availabilityEnabled") is not False),
    )


def resolve_blocks(supplier: Mapping[str, Any]) -> Resolved[Blocks]:
    return resolve_fact_group(
        _group(supplier, "blocks"),
        has_lifecycle_state(supplier),
        HARD_DENY_BLOCKS,
        _parse_blocks,
        lambda: Blocks(bookings_globally=supplier.get("acceptingBookings") is False),
    )


def resolve_rate_limit(supplier: Mapping[str, Any]) -> Resolved[RateLimitState]:
    # Legacy suppliers are never rate limited retroactively
    return resolve_fact_group(
        _group(supplier, "rate_limit"),
        has_lifecycle_state(supplier),
        HARD_DENY_RATE_LIMIT,
        _parse_rate_limit,
        lambda: RateLimitState(exceeded=False),
    )


@dataclass(frozen=True)
class ResolvedFacts:
    """All five fact groups of one supplier document."""
    lifecycle: LifecycleResolution
    compliance: Resolved[Compliance]
    visibility: Resolved[Visibility]
    blocks: Resolved[Blocks]
    rate_limit: Resolved[RateLimitState]
    used_migration: bool
    missing_fields: tuple[str, ...]

    @property
    def lifecycle_state(self) -> Any:
        return self.lifecycle.state


def resolve_supplier_facts(supplier_id: str, supplier: Mapping[str, Any]) -> ResolvedFacts:
    """
    Resolve every fact group of a supplier document.

    Logs using_migration_mapping for legacy documents and
    authoritative_fields_missing_hard_deny for migrated documents with
    missing groups. Logging has no effect on the result.
    """
    used_migration = not has_lifecycle_state(supplier)
    missing: list[str] = []

    if used_migration:
        logger.info(
            "using_migration_mapping",
            extra={
                "supplier_id": supplier_id,
                "legacy_status": supplier.get("status"),
                "legacy_is_active": supplier.get("isActive"),
            },
        )
    else:
        missing = missing_authoritative_groups(supplier)
        if missing:
            logger.warning(
                "authoritative_fields_missing_hard_deny",
                extra={
                    "supplier_id": supplier_id,
                    "lifecycle_state": supplier.get("lifecycle_state"),
                    "missing_fields": missing,
                    "policy": "lifecycle_state present requires all authoritative fields",
                },
            )

    return ResolvedFacts(
        lifecycle=resolve_lifecycle(supplier),
        compliance=resolve_compliance(supplier),
        visibility=resolve_visibility(supplier),
        blocks=resolve_blocks(supplier),
        rate_limit=resolve_rate_limit(supplier),
        used_migration=used_migration,
        missing_fields=tuple(missing),
    )
