"""
Failure attribution for eligibility verdicts.

Maps the debug snapshot of a verdict to stable, machine-readable
(check, reason code) pairs. Presentation only: nothing here changes a
verdict. Identity verification and account status failures have no code.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from supplier_gate.suppliers.lifecycle import has_lifecycle_state, missing_authoritative_groups
from supplier_gate.suppliers.types import DebugInfo, KycStatus, LifecycleState

UNKNOWN_CHECK = "unknown"
UNKNOWN_REASON_CODE = "UNKNOWN"


@dataclass(frozen=True)
class FailureDetails:
    failed_checks: list[str]
    reason_codes: list[str]


def _ordered_unique(values: list[str]) -> list[str]:
    # dict keeps insertion order
    return list(dict.fromkeys(values))


def build_failure_details(debug_info: Optional[DebugInfo]) -> FailureDetails:
    """
    Attribute a verdict to its failing checks.

    Args:
        debug_info: Snapshot from the verdict, None for a missing supplier

    Returns:
        FailureDetails with de-duplicated lists in table order
    """
    if debug_info is None:
        return FailureDetails([UNKNOWN_CHECK], [UNKNOWN_REASON_CODE])

    pairs: list[tuple[str, str]] = []
    if debug_info.lifecycle_state != LifecycleState.ACTIVE.value:
        pairs.append(("lifecycle_state_active", "LIFECYCLE_NOT_ACTIVE"))
    if not debug_info.compliance_payouts_ready:
        pairs.append(("compliance_payouts_ready", "PAYOUTS_NOT_READY"))
    if debug_info.compliance_kyc_status != KycStatus.VERIFIED.value:
        pairs.append(("compliance_kyc_verified", "KYC_NOT_VERIFIED"))
    if not debug_info.visibility_is_listed:
        pairs.append(("visibility_is_listed", "NOT_LISTED"))
    if debug_info.blocks_globally:
        pairs.append(("blocks_globally_off", "BOOKINGS_GLOBALLY_BLOCKED"))
    if debug_info.blocks_by_date:
        pairs.append(("date_available", "DATE_BLOCKED"))
    if debug_info.rate_limit_exceeded:
        pairs.append(("rate_limit_not_exceeded", "RATE_LIMIT_EXCEEDED"))

    return FailureDetails(
        failed_checks=_ordered_unique([check for check, _ in pairs]),
        reason_codes=_ordered_unique([code for _, code in pairs]),
    )


def missing_authoritative_fields(supplier: Mapping[str, Any]) -> list[str]:
    """Authoritative groups missing on a migrated document. Empty for legacy ones."""
    if not has_lifecycle_state(supplier):
        return []
    return missing_authoritative_groups(supplier)


def raw_field_presence(supplier: Mapping[str, Any]) -> dict[str, bool]:
    """Presence of each authoritative top-level field on the stored document."""
    return {
        "has_lifecycle_state": has_lifecycle_state(supplier),
        "has_compliance": isinstance(supplier.get("compliance"), dict),
        "has_visibility": isinstance(supplier.get("visibility"), dict),
        "has_blocks": isinstance(supplier.get("blocks"), dict),
        "has_rate_limit": isinstance(supplier.get("rate_limit"), dict),
    }
