"""
Admin API endpoints for supplier diagnostics.

SECURITY CRITICAL:
- All endpoints require an authenticated administrator
- All endpoints are READ-ONLY; nothing is written to storage

Endpoints:
- POST /api/admin/suppliers/inspect-eligibility - Explain an eligibility verdict
- POST /api/admin/suppliers/migration-metrics   - Migration status report (json or csv)
"""

import logging

from fastapi import APIRouter, Depends

from supplier_gate.api.dependencies import get_inspector, get_migration_metrics_service
from supplier_gate.api.schemas.eligibility import InspectRequest, InspectResponse
from supplier_gate.api.schemas.metrics import MigrationMetricsRequest
from supplier_gate.platform.auth import AuthContext, require_auth
from supplier_gate.services.eligibility_inspector import EligibilityInspector
from supplier_gate.services.migration_metrics import MigrationMetricsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/suppliers", tags=["admin"])


@router.post("/inspect-eligibility", response_model=InspectResponse)
def inspect_eligibility(
    body: InspectRequest,
    auth: AuthContext = Depends(require_auth),
    inspector: EligibilityInspector = Depends(get_inspector),
):
    """
    Inspect why a supplier is or is not bookable.

    Raises:
        401: Not authenticated
        403: Not an administrator
        400: Missing supplierId or malformed eventDate
        404: Supplier not found
    """
    result = inspector.inspect(auth, body.supplier_id, body.event_date)
    return result.to_dict()


@router.post("/migration-metrics")
def export_migration_metrics(
    body: MigrationMetricsRequest,
    auth: AuthContext = Depends(require_auth),
    service: MigrationMetricsService = Depends(get_migration_metrics_service),
):
    """Classify suppliers by migration status. format=csv returns {"csv": ...}."""
    return service.export_metrics(auth, export_format=body.format, limit=body.limit)
