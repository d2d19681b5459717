"""Request-scoped dependencies."""

from supplier_gate.api.dependencies.gate import (
    get_admin_authorizer,
    get_eligibility_engine,
    get_identity_provider,
    get_inspector,
    get_migration_metrics_service,
    get_rate_limit_metrics_service,
    get_store,
)

__all__ = [
    "get_admin_authorizer",
    "get_eligibility_engine",
    "get_identity_provider",
    "get_inspector",
    "get_migration_metrics_service",
    "get_rate_limit_metrics_service",
    "get_store",
]
