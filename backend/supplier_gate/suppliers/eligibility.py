"""
Canonical supplier booking eligibility gate.

SECURITY CRITICAL:
- Every booking creation and every admin diagnostic MUST go through
  EligibilityEngine.is_supplier_bookable(). No caller re-implements a check.
- Ineligibility is data (eligible=False plus reasons), never an exception.
- Storage failures propagate unchanged. They are never turned into a
  negative verdict.

Reason strings are user-facing (pt-AO / pt-BR) and order-stable.
"""

import logging
from typing import Any, Optional

from supplier_gate.platform.errors import PreconditionFailedError
from supplier_gate.storage.port import SupplierGateStore
from supplier_gate.suppliers.blocked_dates import DateBlockResolver, parse_event_date
from supplier_gate.suppliers.field_resolver import resolve_supplier_facts
from supplier_gate.suppliers.types import (
    DebugInfo,
    EligibilityResult,
    KycStatus,
    LifecycleState,
    UiState,
)

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "Fornecedor não encontrado"
REASON_PAYOUTS_NOT_READY = "Fornecedor não configurou recebimentos"
REASON_IDENTITY_PENDING = "Verificação de identidade pendente"
REASON_ACCOUNT_PENDING = "Aprovação de cadastro pendente"
REASON_NOT_LISTED = "Fornecedor não está listado"
REASON_GLOBALLY_BLOCKED = "Fornecedor pausou reservas temporariamente"
REASON_RATE_LIMITED = "Limite de reservas atingido"
REASON_DATE_UNAVAILABLE = "Esta data não está disponível"
REASON_UNKNOWN_LIFECYCLE = "Fornecedor não disponível para reservas"
DEFAULT_NOT_BOOKABLE_MESSAGE = "Este fornecedor não está disponível para reservas"

LIFECYCLE_REASONS: dict[str, str] = {
    LifecycleState.DRAFT.value: "Fornecedor ainda não completou o cadastro",
    LifecycleState.PENDING_REVIEW.value: "Fornecedor aguardando aprovação",
    LifecycleState.PAUSED_BY_SUPPLIER.value: "Fornecedor pausou as reservas",
    LifecycleState.SUSPENDED.value: "Fornecedor temporariamente suspenso",
    LifecycleState.DISABLED.value: "Fornecedor desativado",
    LifecycleState.ARCHIVED.value: "Fornecedor não está mais disponível",
}

ACCOUNT_STATUS_ACTIVE = "active"


def get_lifecycle_state_reason(lifecycle_state: Any) -> str:
    """User-facing reason for a non-active lifecycle state."""
    if isinstance(lifecycle_state, str):
        return LIFECYCLE_REASONS.get(lifecycle_state, REASON_UNKNOWN_LIFECYCLE)
    return REASON_UNKNOWN_LIFECYCLE


def _optional_text(value: Any) -> Optional[Any]:
    return value if value else None


class EligibilityEngine:
    """
    Evaluates whether a supplier may accept a booking on a date.

    Stateless apart from its store: every call re-reads and re-resolves,
    so repeated calls on unchanged data return identical results.

    Usage:
        engine = EligibilityEngine(SqlSupplierGateStore(session))
        result = engine.is_supplier_bookable("sup_123", "2025-06-15")
    """

    def __init__(self, store: SupplierGateStore, date_resolver: Optional[DateBlockResolver] = None):
        self.store = store
        self.date_resolver = date_resolver or DateBlockResolver(store)

    def is_supplier_bookable(self, supplier_id: str, event_date: str) -> EligibilityResult:
        """
        Run the eligibility gate.

        Args:
            supplier_id: Supplier document ID
            event_date: Requested booking date (YYYY-MM-DD)

        Returns:
            EligibilityResult. A missing supplier yields eligible=False with
            the not-found reason and no debug info.

        Raises:
            ValidationError: If event_date is malformed
        """
        parse_event_date(event_date)

        logger.info(
            "eligibility_check_started",
            extra={"supplier_id": supplier_id, "event_date": event_date},
        )

        supplier = self.store.get_supplier(supplier_id)
        if supplier is None:
            logger.warning("supplier_not_found", extra={"supplier_id": supplier_id})
            return EligibilityResult(
                eligible=False,
                reasons=[REASON_NOT_FOUND],
                ui_state=UiState.NOT_BOOKABLE,
            )

        facts = resolve_supplier_facts(supplier_id, supplier)
        compliance = facts.compliance.value
        visibility = facts.visibility.value
        blocks = facts.blocks.value
        rate_limit = facts.rate_limit.value

        date_blocked = self.date_resolver.is_date_blocked(supplier_id, event_date)

        reasons: list[str] = []

        if facts.lifecycle_state != LifecycleState.ACTIVE.value:
            reasons.append(get_lifecycle_state_reason(facts.lifecycle_state))

        if not compliance.payouts_ready:
            reasons.append(REASON_PAYOUTS_NOT_READY)

        kyc_verified = compliance.kyc_status == KycStatus.VERIFIED.value
        if not kyc_verified:
            reasons.append(REASON_IDENTITY_PENDING)

        # Reported only when KYC passed, so one pending identity is one reason
        identity_status = supplier.get("identityVerificationStatus")
        if identity_status and identity_status != KycStatus.VERIFIED.value and kyc_verified:
            reasons.append(REASON_IDENTITY_PENDING)

        account_status = supplier.get("accountStatus")
        if account_status and account_status != ACCOUNT_STATUS_ACTIVE:
            reasons.append(REASON_ACCOUNT_PENDING)

        if not visibility.is_listed:
            reasons.append(REASON_NOT_LISTED)

        if blocks.bookings_globally:
            reasons.append(REASON_GLOBALLY_BLOCKED)

        if rate_limit.exceeded:
            reasons.append(REASON_RATE_LIMITED)

        blocked_by_date = date_blocked or event_date in blocks.scheduled_blocks
        if blocked_by_date:
            reasons.append(REASON_DATE_UNAVAILABLE)

        eligible = not reasons
        if eligible:
            ui_state = UiState.BOOKABLE
        elif blocked_by_date:
            ui_state = UiState.DATE_UNAVAILABLE
        else:
            ui_state = UiState.NOT_BOOKABLE

        debug_info = DebugInfo(
            lifecycle_state=facts.lifecycle_state,
            compliance_payouts_ready=compliance.payouts_ready,
            compliance_kyc_status=compliance.kyc_status,
            identity_verification_status=_optional_text(identity_status),
            account_status=_optional_text(account_status),
            visibility_is_listed=visibility.is_listed,
            blocks_globally=blocks.bookings_globally,
            blocks_by_date=blocked_by_date,
            rate_limit_exceeded=rate_limit.exceeded,
            used_migration=facts.used_migration,
        )

        logger.info(
            "eligibility_check_completed",
            extra={
                "supplier_id": supplier_id,
                "event_date": event_date,
                "eligible": eligible,
                "ui_state": ui_state.value,
                "reason_count": len(reasons),
                **debug_info.to_dict(),
            },
        )

        return EligibilityResult(
            eligible=eligible,
            reasons=reasons,
            ui_state=ui_state,
            debug_info=debug_info,
        )


class SupplierNotBookableError(PreconditionFailedError):
    """Raised at booking creation when the gate denies the supplier."""

    def __init__(self, result: EligibilityResult):
        message = result.reasons[0] if result.reasons else DEFAULT_NOT_BOOKABLE_MESSAGE
        super().__init__(
            code="SUPPLIER_NOT_BOOKABLE",
            message=message,
            details={
                "uiState": result.ui_state.value,
                "reasons": list(result.reasons),
            },
        )
        self.result = result


def ensure_supplier_bookable(
    engine: EligibilityEngine,
    supplier_id: str,
    event_date: str,
) -> EligibilityResult:
    """
    Booking-creation guard.

    Returns the eligible result, or raises SupplierNotBookableError carrying
    the first reason as its message.
    """
    result = engine.is_supplier_bookable(supplier_id, event_date)
    if not result.eligible:
        logger.info(
            "booking_blocked_by_eligibility",
            extra={
                "supplier_id": supplier_id,
                "event_date": event_date,
                "ui_state": result.ui_state.value,
                "reasons": result.reasons,
            },
        )
        raise SupplierNotBookableError(result)
    return result
