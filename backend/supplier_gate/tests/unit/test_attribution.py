"""Unit tests for failure attribution and raw field presence."""

from supplier_gate.suppliers.attribution import (
    build_failure_details,
    missing_authoritative_fields,
    raw_field_presence,
)
from supplier_gate.suppliers.types import DebugInfo


def _debug(**overrides) -> DebugInfo:
    values = dict(
        lifecycle_state="active",
        compliance_payouts_ready=True,
        compliance_kyc_status="verified",
        identity_verification_status=None,
        account_status=None,
        visibility_is_listed=True,
        blocks_globally=False,
        blocks_by_date=False,
        rate_limit_exceeded=False,
        used_migration=False,
    )
    values.update(overrides)
    return DebugInfo(**values)


class TestBuildFailureDetails:

    def test_no_debug_info_is_unknown(self):
        details = build_failure_details(None)

        assert details.failed_checks == ["unknown"]
        assert details.reason_codes == ["UNKNOWN"]

    def test_passing_snapshot_has_no_failures(self):
        details = build_failure_details(_debug())

        assert details.failed_checks == []
        assert details.reason_codes == []

    def test_every_failure_in_table_order(self):
        details = build_failure_details(_debug(
            lifecycle_state="draft",
            compliance_payouts_ready=False,
            compliance_kyc_status="pending",
            visibility_is_listed=False,
            blocks_globally=True,
            blocks_by_date=True,
            rate_limit_exceeded=True,
        ))

        assert details.failed_checks == [
            "lifecycle_state_active",
            "compliance_payouts_ready",
            "compliance_kyc_verified",
            "visibility_is_listed",
            "blocks_globally_off",
            "date_available",
            "rate_limit_not_exceeded",
        ]
        assert details.reason_codes == [
            "LIFECYCLE_NOT_ACTIVE",
            "PAYOUTS_NOT_READY",
            "KYC_NOT_VERIFIED",
            "NOT_LISTED",
            "BOOKINGS_GLOBALLY_BLOCKED",
            "DATE_BLOCKED",
            "RATE_LIMIT_EXCEEDED",
        ]

    def test_identity_and_account_failures_have_no_code(self):
        details = build_failure_details(_debug(
            identity_verification_status="pending",
            account_status="pending",
        ))

        assert details.reason_codes == []

    def test_missing_kyc_status_counts_as_unverified(self):
        details = build_failure_details(_debug(compliance_kyc_status=None))

        assert details.reason_codes == ["KYC_NOT_VERIFIED"]


class TestRawFields:

    def test_presence_reflects_stored_document(self):
        supplier = {"lifecycle_state": "active", "compliance": {}, "blocks": None}

        assert raw_field_presence(supplier) == {
            "has_lifecycle_state": True,
            "has_compliance": True,
            "has_visibility": False,
            "has_blocks": False,
            "has_rate_limit": False,
        }

    def test_missing_fields_empty_for_legacy(self):
        assert missing_authoritative_fields({"status": "active"}) == []

    def test_missing_fields_for_migrated(self):
        supplier = {"lifecycle_state": "active", "visibility": {"is_listed": True}}

        assert missing_authoritative_fields(supplier) == ["compliance", "blocks", "rate_limit"]
