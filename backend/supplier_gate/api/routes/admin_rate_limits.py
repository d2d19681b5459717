"""
Admin API endpoint for rate limit metrics.

Endpoints:
- POST /api/admin/rate-limits/metrics - Active rate limits over a trailing window
"""

from fastapi import APIRouter, Depends

from supplier_gate.api.dependencies import get_rate_limit_metrics_service
from supplier_gate.api.schemas.metrics import RateLimitMetricsRequest, RateLimitMetricsResponse
from supplier_gate.platform.auth import AuthContext, require_auth
from supplier_gate.services.rate_limit_metrics import RateLimitMetricsService

router = APIRouter(prefix="/api/admin/rate-limits", tags=["admin"])


@router.post("/metrics", response_model=RateLimitMetricsResponse)
def export_rate_limit_metrics(
    body: RateLimitMetricsRequest,
    auth: AuthContext = Depends(require_auth),
    service: RateLimitMetricsService = Depends(get_rate_limit_metrics_service),
):
    """Summarize active rate limits. hoursBack is clamped to 168."""
    return service.export_metrics(auth, hours_back=body.hours_back)
