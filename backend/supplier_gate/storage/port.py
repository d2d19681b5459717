"""
Storage port for the eligibility gate.

Every component receives a SupplierGateStore explicitly. The port has no
write methods: nothing in this service mutates supplier, blocked-date,
rate limit or admin records.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Optional, Protocol


@dataclass(frozen=True)
class RateLimitActionRecord:
    """One subject's counter for one action, as read from storage."""
    subject_id: str
    action_key: str
    count: int
    last_request: datetime


class SupplierGateStore(Protocol):
    """Read-only access to the records the gate and its reports consume."""

    def get_supplier(self, supplier_id: str) -> Optional[dict[str, Any]]:
        """Return the raw supplier document, or None when absent."""
        ...

    def iter_suppliers(self, limit: Optional[int] = None) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (supplier_id, document) pairs ordered by ID."""
        ...

    def blocked_date_exists(self, supplier_id: str, collection: str, date_id: str) -> bool:
        """Whether a blocked-date document with this ID exists."""
        ...

    def blocked_date_in_range(
        self, supplier_id: str, collection: str, start: datetime, end: datetime
    ) -> bool:
        """Whether any blocked-date document has start <= date < end."""
        ...

    def list_rate_limit_subjects(self) -> list[str]:
        ...

    def list_rate_limit_actions(self, subject_id: str, since: datetime) -> list[RateLimitActionRecord]:
        """Action records for a subject with last_request >= since."""
        ...

    def admin_exists(self, uid: str) -> bool:
        ...

    def get_user(self, uid: str) -> Optional[dict[str, Any]]:
        ...
