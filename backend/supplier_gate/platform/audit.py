"""
Audit logging for administrative operations.

SECURITY REQUIREMENTS:
- Every admin operation (inspection, metrics export) MUST emit an audit event
- Every admin denial MUST emit an audit event with the caller ID and action
- PII fields MUST be redacted before the event leaves the process

Audit events are emitted as structured log records on the "audit" logger.
They are never written to the database: this service does not mutate
storage under any circumstance.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, FrozenSet, Optional

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """
    Enumeration of all auditable actions.

    Add new actions here as admin operations are added.
    """
    ADMIN_ACCESS_DENIED = "admin.access_denied"

    SUPPLIER_ELIGIBILITY_INSPECTED = "supplier.eligibility_inspected"
    SUPPLIER_MIGRATION_METRICS_EXPORTED = "supplier.migration_metrics_exported"

    RATE_LIMIT_METRICS_EXPORTED = "rate_limit.metrics_exported"


class AuditOutcome(str, Enum):
    """Outcome of the audited action."""
    SUCCESS = "success"
    FAILURE = "failure"
    DENIED = "denied"


class PIIRedactor:
    """
    Redacts PII fields from audit metadata before emission.

    Redacted fields are replaced with "[REDACTED]" to maintain
    structure while removing sensitive data.
    """

    REDACTED_FIELDS: FrozenSet[str] = frozenset({
        # Authentication
        "email",
        "phone",
        "phone_number",
        "token",
        "id_token",
        "authorization",
        "password",
        "secret",
        # Personal identifiers (Angola / Brazil)
        "cpf",
        "nif",
        "bi_number",
        # Financial
        "card_number",
        "cvv",
        "iban",
        "pin",
    })

    REDACTION_MARKER = "[REDACTED]"

    @classmethod
    def redact(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Recursively redact PII from a dictionary.

        Args:
            data: Dictionary potentially containing PII

        Returns:
            New dictionary with PII fields redacted
        """
        if not isinstance(data, dict):
            return data
        return cls._redact_dict(data)

    @classmethod
    def _redact_dict(cls, d: dict[str, Any]) -> dict[str, Any]:
        result = {}
        for key, value in d.items():
            lower_key = key.lower()
            if lower_key in cls.REDACTED_FIELDS:
                result[key] = cls._redact_value(lower_key, value)
            elif isinstance(value, dict):
                result[key] = cls._redact_dict(value)
            elif isinstance(value, list):
                result[key] = cls._redact_list(value)
            else:
                result[key] = value
        return result

    @classmethod
    def _redact_value(cls, key: str, value: Any) -> str:
        """Redact a single value, with partial redaction for some fields."""
        if value is None:
            return cls.REDACTION_MARKER
        # Partial redaction for email (show domain)
        if key == "email" and isinstance(value, str) and "@" in value:
            return f"***@{value.split('@', 1)[1]}"
        # Partial redaction for phone (show last 4)
        if key in ("phone", "phone_number") and value:
            str_val = str(value)
            if len(str_val) >= 4:
                return f"***{str_val[-4:]}"
        return cls.REDACTION_MARKER

    @classmethod
    def _redact_list(cls, lst: list[Any]) -> list[Any]:
        result = []
        for item in lst:
            if isinstance(item, dict):
                result.append(cls._redact_dict(item))
            elif isinstance(item, list):
                result.append(cls._redact_list(item))
            else:
                result.append(item)
        return result


@dataclass
class AuditEvent:
    """
    Audit event data structure.

    PII in metadata is redacted when the event is emitted.
    """
    action: AuditAction
    user_id: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    outcome: AuditOutcome = AuditOutcome.SUCCESS
    error_code: Optional[str] = None

    def to_log_extra(self) -> dict[str, Any]:
        """Flatten the event into a logging ``extra`` payload."""
        return {
            "audit_action": self.action.value,
            "audit_outcome": self.outcome.value,
            "user_id": self.user_id,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "event_metadata": PIIRedactor.redact(self.metadata),
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "error_code": self.error_code,
        }


def emit_audit_event(event: AuditEvent) -> None:
    """
    Emit an audit event to the audit log stream.

    Denied and failed outcomes are logged at WARNING, successes at INFO.
    """
    level = logging.INFO if event.outcome == AuditOutcome.SUCCESS else logging.WARNING
    audit_logger.log(level, event.action.value, extra=event.to_log_extra())
