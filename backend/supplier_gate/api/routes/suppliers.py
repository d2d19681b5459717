"""
Supplier eligibility endpoint.

Endpoints:
- POST /api/suppliers/eligibility - Evaluate the canonical booking gate

A missing supplier is a normal negative verdict here, not a 404.
"""

import logging

from fastapi import APIRouter, Depends

from supplier_gate.api.dependencies import get_eligibility_engine
from supplier_gate.api.schemas.eligibility import EligibilityRequest, EligibilityResponse
from supplier_gate.platform.auth import AuthContext, require_auth
from supplier_gate.platform.errors import ValidationError
from supplier_gate.suppliers.eligibility import EligibilityEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.post(
    "/eligibility",
    response_model=EligibilityResponse,
    response_model_exclude_unset=True,
)
def evaluate_eligibility(
    body: EligibilityRequest,
    auth: AuthContext = Depends(require_auth),
    engine: EligibilityEngine = Depends(get_eligibility_engine),
):
    """Return whether a supplier may accept a booking on eventDate."""
    if not body.supplier_id:
        raise ValidationError("supplierId: Required string field", details={"field": "supplierId"})
    if not body.event_date:
        raise ValidationError("eventDate: Required string field", details={"field": "eventDate"})

    result = engine.is_supplier_bookable(body.supplier_id, body.event_date)
    return result.to_dict()
