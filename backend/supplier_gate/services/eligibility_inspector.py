"""
Read-only admin diagnostics for supplier eligibility.

The verdict ALWAYS comes from EligibilityEngine.is_supplier_bookable(), the
same call booking creation makes. This module only adds presentation:
failure attribution, raw field presence and the resolved lifecycle state.

STRICTLY READ-ONLY: nothing here writes to storage. Unlike the eligibility
operation, a missing supplier is a NotFoundError.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from supplier_gate.platform.audit import AuditAction, AuditEvent, emit_audit_event
from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import NotFoundError, ValidationError
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.storage.port import SupplierGateStore
from supplier_gate.suppliers.attribution import (
    build_failure_details,
    missing_authoritative_fields,
    raw_field_presence,
)
from supplier_gate.suppliers.blocked_dates import parse_event_date
from supplier_gate.suppliers.eligibility import EligibilityEngine
from supplier_gate.suppliers.lifecycle import has_lifecycle_state, migrate_lifecycle_state
from supplier_gate.utils.timestamps import utc_date_string, utc_now

logger = logging.getLogger(__name__)

INSPECT_ACTION = "inspect_supplier_eligibility"


@dataclass(frozen=True)
class InspectResult:
    eligible: bool
    lifecycle_state: Any
    failed_checks: list[str]
    reason_codes: list[str]
    raw_fields: dict[str, bool]
    used_legacy_fallback: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "eligible": self.eligible,
            "lifecycle_state": self.lifecycle_state,
            "failedChecks": list(self.failed_checks),
            "reasonCodes": list(self.reason_codes),
            "rawFields": dict(self.raw_fields),
            "usedLegacyFallback": self.used_legacy_fallback,
        }


class EligibilityInspector:
    """
    Admin-only eligibility inspection.

    Usage:
        inspector = EligibilityInspector(store, authorizer)
        result = inspector.inspect(auth, "sup_123", "2025-06-15")
    """

    def __init__(
        self,
        store: SupplierGateStore,
        authorizer: AdminAuthorizationService,
        engine: Optional[EligibilityEngine] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.authorizer = authorizer
        self.engine = engine or EligibilityEngine(store)
        self.clock = clock

    def inspect(
        self,
        auth: Optional[AuthContext],
        supplier_id: Any,
        event_date: Optional[str] = None,
    ) -> InspectResult:
        """
        Inspect why a supplier is or is not bookable on a date.

        Args:
            auth: Authenticated caller, None when unauthenticated
            supplier_id: Supplier document ID
            event_date: YYYY-MM-DD, defaults to today (UTC)

        Raises:
            AuthenticationError: No authenticated caller
            PermissionDeniedError: Caller is not an administrator
            ValidationError: Missing supplierId or malformed eventDate
            NotFoundError: Supplier does not exist
        """
        logger.info(
            "inspect_started",
            extra={
                "uid": auth.user_id if auth else None,
                "supplier_id": supplier_id,
                "event_date": event_date,
            },
        )

        self.authorizer.require_admin(auth, action=INSPECT_ACTION)

        if not supplier_id or not isinstance(supplier_id, str):
            raise ValidationError(
                "supplierId: Required string field",
                details={"field": "supplierId"},
            )

        event_date = event_date or utc_date_string(self.clock())
        parse_event_date(event_date)

        supplier = self.store.get_supplier(supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier", supplier_id)

        eligibility = self.engine.is_supplier_bookable(supplier_id, event_date)

        used_legacy_fallback = not has_lifecycle_state(supplier)
        failure = build_failure_details(eligibility.debug_info)

        if not eligibility.eligible:
            logger.warning(
                "eligibility_failed",
                extra={
                    "supplier_id": supplier_id,
                    "event_date": event_date,
                    "failed_checks": failure.failed_checks,
                    "reason_codes": failure.reason_codes,
                    "missing_authoritative_fields": missing_authoritative_fields(supplier),
                },
            )

        result = InspectResult(
            eligible=eligibility.eligible,
            lifecycle_state=migrate_lifecycle_state(supplier),
            failed_checks=failure.failed_checks,
            reason_codes=failure.reason_codes,
            raw_fields=raw_field_presence(supplier),
            used_legacy_fallback=used_legacy_fallback,
        )

        logger.info(
            "inspect_completed",
            extra={
                "supplier_id": supplier_id,
                "eligible": result.eligible,
                "failed_check_count": len(result.failed_checks),
                "used_legacy_fallback": used_legacy_fallback,
            },
        )
        emit_audit_event(AuditEvent(
            action=AuditAction.SUPPLIER_ELIGIBILITY_INSPECTED,
            user_id=auth.user_id,
            resource_type="supplier",
            resource_id=supplier_id,
            metadata={"event_date": event_date, "eligible": result.eligible},
        ))

        return result
