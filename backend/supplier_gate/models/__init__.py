"""SQLAlchemy models for the records the eligibility gate reads."""

from supplier_gate.models.admin import Admin, User
from supplier_gate.models.blocked_date import (
    BLOCKED_DATES_COLLECTION,
    LEGACY_BLOCKED_DATES_COLLECTION,
    SupplierBlockedDate,
)
from supplier_gate.models.rate_limit_action import RateLimitAction
from supplier_gate.models.supplier import Supplier

__all__ = [
    "Admin",
    "User",
    "BLOCKED_DATES_COLLECTION",
    "LEGACY_BLOCKED_DATES_COLLECTION",
    "SupplierBlockedDate",
    "RateLimitAction",
    "Supplier",
]
