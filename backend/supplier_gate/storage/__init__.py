"""Read-only storage access for the eligibility gate."""

from supplier_gate.storage.port import RateLimitActionRecord, SupplierGateStore
from supplier_gate.storage.sql_store import SqlSupplierGateStore, as_utc

__all__ = [
    "RateLimitActionRecord",
    "SupplierGateStore",
    "SqlSupplierGateStore",
    "as_utc",
]
