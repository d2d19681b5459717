"""Supplier booking eligibility: field resolution, date blocks and the gate."""

from supplier_gate.suppliers.eligibility import (
    EligibilityEngine,
    SupplierNotBookableError,
    ensure_supplier_bookable,
)
from supplier_gate.suppliers.lifecycle import migrate_lifecycle_state
from supplier_gate.suppliers.types import EligibilityResult, LifecycleState, UiState

__all__ = [
    "EligibilityEngine",
    "SupplierNotBookableError",
    "ensure_supplier_bookable",
    "migrate_lifecycle_state",
    "EligibilityResult",
    "LifecycleState",
    "UiState",
]
