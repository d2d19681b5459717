"""
Types shared by the eligibility gate.

Resolved fact groups are plain frozen dataclasses. Values read from migrated
supplier documents are taken verbatim, so lifecycle and KYC values are kept
as strings: an unexpected stored value must still flow through the gate and
fail the corresponding criterion.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class LifecycleState(str, Enum):
    """Coarse supplier account state. Only ACTIVE can accept bookings."""
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    ACTIVE = "active"
    PAUSED_BY_SUPPLIER = "paused_by_supplier"
    SUSPENDED = "suspended"
    DISABLED = "disabled"
    ARCHIVED = "archived"


class KycStatus(str, Enum):
    NOT_STARTED = "not_started"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class UiState(str, Enum):
    """Client-facing summary of an eligibility verdict."""
    BOOKABLE = "bookable"
    NOT_BOOKABLE = "not_bookable"
    DATE_UNAVAILABLE = "date_unavailable"


class ResolutionSource(str, Enum):
    """Where a resolved fact group came from."""
    AUTHORITATIVE = "authoritative"
    HARD_DENY_DEFAULT = "hard_deny_default"
    LEGACY_DERIVED = "legacy_derived"


@dataclass(frozen=True)
class Compliance:
    payouts_ready: bool
    kyc_status: Optional[str]


@dataclass(frozen=True)
class Visibility:
    is_listed: bool


@dataclass(frozen=True)
class Blocks:
    bookings_globally: bool
    scheduled_blocks: tuple[str, ...] = ()


@dataclass(frozen=True)
class RateLimitState:
    exceeded: bool


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A resolved fact group tagged with its source."""
    value: T
    source: ResolutionSource

    @property
    def is_hard_deny(self) -> bool:
        return self.source == ResolutionSource.HARD_DENY_DEFAULT


@dataclass(frozen=True)
class DebugInfo:
    """Snapshot of every resolved fact behind a verdict."""
    lifecycle_state: Any
    compliance_payouts_ready: bool
    compliance_kyc_status: Optional[Any]
    identity_verification_status: Optional[Any]
    account_status: Optional[Any]
    visibility_is_listed: bool
    blocks_globally: bool
    blocks_by_date: bool
    rate_limit_exceeded: bool
    used_migration: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "lifecycle_state": self.lifecycle_state,
            "compliance_payouts_ready": self.compliance_payouts_ready,
            "compliance_kyc_status": self.compliance_kyc_status,
            "identity_verification_status": self.identity_verification_status,
            "account_status": self.account_status,
            "visibility_is_listed": self.visibility_is_listed,
            "blocks_globally": self.blocks_globally,
            "blocks_by_date": self.blocks_by_date,
            "rate_limit_exceeded": self.rate_limit_exceeded,
            "used_migration": self.used_migration,
        }


@dataclass(frozen=True)
class EligibilityResult:
    """
    Verdict of the eligibility gate.

    Created fresh on every evaluation and never persisted. debug_info is
    None only when the supplier record does not exist.
    """
    eligible: bool
    reasons: list[str] = field(default_factory=list)
    ui_state: UiState = UiState.NOT_BOOKABLE
    debug_info: Optional[DebugInfo] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "eligible": self.eligible,
            "reasons": list(self.reasons),
            "uiState": self.ui_state.value,
        }
        if self.debug_info is not None:
            result["debugInfo"] = self.debug_info.to_dict()
        return result
