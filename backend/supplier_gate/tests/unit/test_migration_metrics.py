"""
Unit tests for the supplier migration metrics export.

Tests cover:
- Status classification (legacy, partial, compliant, blocked)
- Totals, breakdowns, reason counts and samples
- Notes
- CSV rendering
- Limit, format validation, deadline
- Read-only guarantee
"""

import copy
from datetime import datetime, timezone
from itertools import count

import pytest

from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import (
    PermissionDeniedError,
    ServiceUnavailableError,
    ValidationError,
)
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.services.migration_metrics import (
    METRICS_VERSION,
    MigrationMetricsService,
    MigrationStatus,
)
from supplier_gate.tests.factories import (
    ACTIVE_SUPPLIER,
    add_admin,
    add_blocked_date,
    add_supplier,
    snapshot_tables,
)

ADMIN = AuthContext(user_id="admin_1")
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)

LEGACY_ACTIVE = {"status": "active", "isActive": True}
PARTIAL = {
    "lifecycle_state": "active",
    "compliance": {"payouts_ready": True, "kyc_status": "verified"},
}


def _active(**overrides):
    supplier = copy.deepcopy(ACTIVE_SUPPLIER)
    supplier.update(overrides)
    return supplier


@pytest.fixture
def service(db_session, store):
    add_admin(db_session, ADMIN.user_id)
    return MigrationMetricsService(
        store,
        AdminAuthorizationService(store),
        clock=lambda: NOW,
        timeout_seconds=540,
    )


@pytest.fixture
def mixed_suppliers(db_session):
    add_supplier(db_session, "blk_1", _active(lifecycle_state="suspended"))
    add_supplier(db_session, "comp_1", _active())
    add_supplier(db_session, "leg_1", copy.deepcopy(LEGACY_ACTIVE))
    add_supplier(db_session, "part_1", copy.deepcopy(PARTIAL))


class TestClassification:

    @pytest.mark.parametrize("document,status,eligible", [
        (LEGACY_ACTIVE, MigrationStatus.LEGACY, True),
        ({"status": "suspended"}, MigrationStatus.LEGACY, False),
        (PARTIAL, MigrationStatus.PARTIAL, False),
        (ACTIVE_SUPPLIER, MigrationStatus.COMPLIANT, True),
        ({**ACTIVE_SUPPLIER, "visibility": {"is_listed": False}}, MigrationStatus.BLOCKED, False),
        ({**ACTIVE_SUPPLIER, "blocks": None}, MigrationStatus.PARTIAL, False),
    ])
    def test_status(self, db_session, service, document, status, eligible):
        add_supplier(db_session, "sup_1", copy.deepcopy(document))

        result = service.classify_supplier("sup_1", copy.deepcopy(document), "2025-06-15")

        assert result.status == status
        assert result.eligible is eligible

    def test_blocked_carries_reasons_and_codes(self, db_session, service):
        document = _active(lifecycle_state="archived")
        add_supplier(db_session, "sup_1", document)

        result = service.classify_supplier("sup_1", document, "2025-06-15")

        assert result.lifecycle_state == "archived"
        assert result.blocking_reasons == ["Fornecedor não está mais disponível"]
        assert result.reason_codes == ["LIFECYCLE_NOT_ACTIVE"]

    def test_supplier_removed_before_gate_is_unknown(self, service):
        result = service.classify_supplier("ghost", _active(), "2025-06-15")

        assert result.status == MigrationStatus.BLOCKED
        assert result.reason_codes == ["UNKNOWN"]


class TestJsonReport:

    def test_totals_and_breakdowns(self, service, mixed_suppliers):
        report = service.export_metrics(ADMIN)

        assert report["version"] == METRICS_VERSION
        assert report["totals"] == {
            "total_suppliers": 4,
            "legacy_only": 1,
            "partially_migrated": 1,
            "fully_migrated": 2,
            "eligible": 2,
            "blocked": 2,
        }
        assert report["missingFieldsBreakdown"] == {
            "missing_compliance": 1,
            "missing_visibility": 2,
            "missing_blocks": 2,
            "missing_rate_limit": 2,
        }
        assert report["blockingBreakdown"] == {
            "blocked_by_lifecycle": 1,
            "blocked_by_compliance": 0,
            "blocked_by_visibility": 1,
            "blocked_by_blocks": 1,
            "blocked_by_rate_limit": 1,
        }
        assert report["blockedReasonCounts"] == {
            "lifecycle_not_active": 1,
            "not_listed": 1,
            "globally_blocked": 1,
            "rate_limited": 1,
        }
        assert report["sampleSuppliers"] == {
            "legacy": ["leg_1"],
            "partial": ["part_1"],
            "blocked": ["blk_1"],
            "eligible": ["comp_1"],
        }
        assert report["generatedAt"] == "2025-06-15T12:00:00.000Z"
        assert isinstance(report["executionTimeMs"], int)

    def test_notes_for_incomplete_migration(self, service, mixed_suppliers):
        notes = service.export_metrics(ADMIN)["notes"]

        assert notes == [
            "LEGACY_FALLBACK_ACTIVE: 1 suppliers still using legacy eligibility mapping",
            "PARTIAL_MIGRATION: 1 suppliers have lifecycle_state but missing authoritative fields",
        ]

    def test_migration_complete_note(self, db_session, service):
        add_supplier(db_session, "sup_1", _active())

        assert service.export_metrics(ADMIN)["notes"] == [
            "MIGRATION_COMPLETE: All suppliers fully migrated to authoritative model"
        ]

    def test_date_block_for_today_counts_as_blocked(self, db_session, service):
        add_supplier(db_session, "sup_1", _active())
        add_blocked_date(db_session, "sup_1", "blockedDates", "2025-06-15")

        report = service.export_metrics(ADMIN)

        assert report["totals"]["blocked"] == 1
        assert report["blockedReasonCounts"] == {"date_blocked": 1}
        assert report["blockingBreakdown"]["blocked_by_blocks"] == 1
        assert report["sampleSuppliers"]["blocked"] == ["sup_1"]

    def test_samples_capped_at_five_with_eligible_overflow(self, db_session, service):
        for i in range(7):
            add_supplier(db_session, f"leg_{i}", copy.deepcopy(LEGACY_ACTIVE))

        report = service.export_metrics(ADMIN)

        assert report["sampleSuppliers"]["legacy"] == [f"leg_{i}" for i in range(5)]
        # eligible legacy overflow lands in the eligible bucket
        assert report["sampleSuppliers"]["eligible"] == ["leg_5", "leg_6"]

    def test_limit_caps_scan(self, service, mixed_suppliers):
        report = service.export_metrics(ADMIN, limit=2)

        assert report["totals"]["total_suppliers"] == 2
        assert report["sampleSuppliers"]["blocked"] == ["blk_1"]
        assert report["sampleSuppliers"]["eligible"] == ["comp_1"]

    def test_empty_store(self, service):
        report = service.export_metrics(ADMIN)

        assert report["totals"]["total_suppliers"] == 0
        assert report["blockedReasonCounts"] == {}


class TestCsvExport:

    def test_csv_rows(self, service, mixed_suppliers):
        result = service.export_metrics(ADMIN, export_format="csv")

        lines = result["csv"].split("\n")
        assert lines[0] == '"supplierId","status","lifecycle_state","eligible","missingFields","blockingReasons"'
        assert lines[2] == '"comp_1","compliant","active","true","none","none"'
        assert lines[3] == '"leg_1","legacy","null","true","compliance;visibility;blocks;rate_limit","none"'
        assert lines[1] == '"blk_1","blocked","suspended","false","none","Fornecedor temporariamente suspenso"'
        assert len(lines) == 5

    def test_csv_empty_store_has_header_only(self, service):
        result = service.export_metrics(ADMIN, export_format="csv")

        assert result == {
            "csv": '"supplierId","status","lifecycle_state","eligible","missingFields","blockingReasons"'
        }


class TestExportGuards:

    def test_non_admin_denied(self, service):
        with pytest.raises(PermissionDeniedError):
            service.export_metrics(AuthContext(user_id="nobody"))

    def test_unknown_format_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.export_metrics(ADMIN, export_format="xml")

        assert exc_info.value.details == {"field": "format"}

    @pytest.mark.parametrize("limit", ["10", 2.5, True])
    def test_non_integer_limit_rejected(self, service, limit):
        with pytest.raises(ValidationError):
            service.export_metrics(ADMIN, limit=limit)

    def test_deadline_exceeded(self, db_session, store):
        add_admin(db_session, ADMIN.user_id)
        add_supplier(db_session, "sup_1", _active())
        ticks = count(start=0, step=100)
        service = MigrationMetricsService(
            store,
            AdminAuthorizationService(store),
            clock=lambda: NOW,
            timeout_seconds=50,
            monotonic=lambda: next(ticks),
        )

        with pytest.raises(ServiceUnavailableError):
            service.export_metrics(ADMIN)

    def test_export_never_writes(self, db_session, service, mixed_suppliers):
        before = snapshot_tables(db_session)

        service.export_metrics(ADMIN)
        service.export_metrics(ADMIN, export_format="csv", limit=1)

        assert snapshot_tables(db_session) == before
