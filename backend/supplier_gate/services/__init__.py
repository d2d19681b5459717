"""Admin-facing services built on the eligibility gate."""

from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.services.eligibility_inspector import EligibilityInspector, InspectResult
from supplier_gate.services.migration_metrics import MigrationMetricsService
from supplier_gate.services.rate_limit_metrics import RateLimitMetricsService

__all__ = [
    "AdminAuthorizationService",
    "EligibilityInspector",
    "InspectResult",
    "MigrationMetricsService",
    "RateLimitMetricsService",
]
