"""
Pydantic schemas for supplier eligibility endpoints.

Request fields are optional at the schema level: presence and format are
validated by the services so that every input error has the same 400 shape.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EligibilityRequest(BaseModel):
    """Request body for POST /api/suppliers/eligibility."""
    model_config = ConfigDict(populate_by_name=True)

    supplier_id: Optional[str] = Field(
        None,
        alias="supplierId",
        description="Supplier document ID",
        examples=["sup_abc123"],
    )
    event_date: Optional[str] = Field(
        None,
        alias="eventDate",
        description="Requested booking date (YYYY-MM-DD)",
        examples=["2025-06-15"],
    )


class DebugInfoResponse(BaseModel):
    """Every resolved fact behind a verdict."""
    lifecycle_state: Any = None
    compliance_payouts_ready: bool
    compliance_kyc_status: Optional[Any] = None
    identity_verification_status: Optional[Any] = None
    account_status: Optional[Any] = None
    visibility_is_listed: bool
    blocks_globally: bool
    blocks_by_date: bool
    rate_limit_exceeded: bool
    used_migration: bool


class EligibilityResponse(BaseModel):
    """Eligibility verdict. debugInfo is omitted when the supplier does not exist."""
    model_config = ConfigDict(populate_by_name=True)

    eligible: bool
    reasons: list[str]
    ui_state: str = Field(..., alias="uiState")
    debug_info: Optional[DebugInfoResponse] = Field(None, alias="debugInfo")


class InspectRequest(BaseModel):
    """Request body for POST /api/admin/suppliers/inspect-eligibility."""
    model_config = ConfigDict(populate_by_name=True)

    supplier_id: Optional[str] = Field(
        None,
        alias="supplierId",
        description="Supplier document ID",
        examples=["sup_abc123"],
    )
    event_date: Optional[str] = Field(
        None,
        alias="eventDate",
        description="Date to inspect (YYYY-MM-DD). Defaults to today (UTC)",
        examples=["2025-06-15"],
    )


class RawFieldsResponse(BaseModel):
    has_lifecycle_state: bool
    has_compliance: bool
    has_visibility: bool
    has_blocks: bool
    has_rate_limit: bool


class InspectResponse(BaseModel):
    """Read-only diagnostic view of an eligibility verdict."""
    model_config = ConfigDict(populate_by_name=True)

    eligible: bool
    lifecycle_state: Any = None
    failed_checks: list[str] = Field(..., alias="failedChecks")
    reason_codes: list[str] = Field(..., alias="reasonCodes")
    raw_fields: RawFieldsResponse = Field(..., alias="rawFields")
    used_legacy_fallback: bool = Field(..., alias="usedLegacyFallback")
