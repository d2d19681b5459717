"""
Unit tests for the rate limit metrics export.

Tests cover:
- Two limited subjects in the default window
- Active threshold per configured limit and default fallback
- Window clamp and default
- Groupings, sort orders and truncation
- Window descriptions
- Deadline and read-only guarantee
"""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from supplier_gate.config.rate_limits import RATE_LIMITS
from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import (
    PermissionDeniedError,
    ServiceUnavailableError,
    ValidationError,
)
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.services.rate_limit_metrics import (
    RateLimitMetricsService,
    format_window_description,
    resolve_hours_back,
)
from supplier_gate.tests.factories import add_admin, add_rate_limit_action, snapshot_tables

ADMIN = AuthContext(user_id="admin_1")
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db_session, store):
    add_admin(db_session, ADMIN.user_id)
    return RateLimitMetricsService(
        store,
        AdminAuthorizationService(store),
        clock=lambda: NOW,
        timeout_seconds=120,
    )


class TestWindowDescription:

    @pytest.mark.parametrize("seconds,expected", [
        (30, "30 segundos"),
        (60, "1 minutos"),
        (150, "2 minutos"),
        (3600, "1 hora(s)"),
        (7200, "2 hora(s)"),
        (86400, "1 dia(s)"),
        (172800, "2 dia(s)"),
    ])
    def test_format(self, seconds, expected):
        assert format_window_description(seconds) == expected


class TestHoursBack:

    @pytest.mark.parametrize("requested,expected", [
        (None, 24),
        (0, 24),
        (48, 48),
        (168, 168),
        (500, 168),
        (1.5, 1.5),
    ])
    def test_default_and_clamp(self, requested, expected):
        assert resolve_hours_back(requested) == expected

    @pytest.mark.parametrize("requested", ["24", True, [1], float("nan"), float("inf")])
    def test_non_numeric_rejected(self, requested):
        with pytest.raises(ValidationError):
            resolve_hours_back(requested)

    def test_max_hours_from_environment(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_METRICS_MAX_HOURS", "72")

        assert resolve_hours_back(100) == 72


class TestExportMetrics:

    def test_two_limited_subjects(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "createBooking", 12, NOW - timedelta(hours=1))
        add_rate_limit_action(db_session, "user_b", "createBooking", 10, NOW - timedelta(hours=3))

        report = service.export_metrics(ADMIN)

        assert report["hoursBack"] == 24
        assert report["totals"] == {
            "uniqueUsersLimited": 2,
            "totalHits": 22,
            "activeRateLimits": 2,
        }
        assert report["actionBreakdown"] == [{
            "action": "createBooking",
            "hitCount": 22,
            "uniqueUsers": 2,
            "configuredLimit": 10,
            "windowSeconds": 3600,
        }]
        assert [o["userId"] for o in report["topOffenders"]] == ["user_a", "user_b"]
        assert report["topOffenders"][0]["lastHit"] == "2025-06-15T11:00:00.000Z"
        assert report["generatedAt"] == "2025-06-15T12:00:00.000Z"

    def test_below_limit_and_outside_window_ignored(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "createBooking", 9, NOW - timedelta(hours=1))
        add_rate_limit_action(db_session, "user_b", "createBooking", 50, NOW - timedelta(hours=25))

        report = service.export_metrics(ADMIN)

        assert report["totals"] == {"uniqueUsersLimited": 0, "totalHits": 0, "activeRateLimits": 0}
        assert report["actionBreakdown"] == []
        assert report["topOffenders"] == []
        assert report["hourlyTrend"] == []

    def test_unknown_action_uses_default_limit(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "exportData", 59, NOW - timedelta(minutes=5))
        add_rate_limit_action(db_session, "user_b", "exportData", 60, NOW - timedelta(minutes=5))

        report = service.export_metrics(ADMIN)

        assert report["totals"]["activeRateLimits"] == 1
        assert report["actionBreakdown"][0]["configuredLimit"] == 60

    def test_window_boundary_is_inclusive(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "createSupportTicket", 5, NOW - timedelta(hours=24))

        assert service.export_metrics(ADMIN)["totals"]["activeRateLimits"] == 1

    def test_groupings_and_sorting(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "createSupportTicket", 5, NOW - timedelta(minutes=10))
        add_rate_limit_action(db_session, "user_a", "sendMessage", 100, NOW - timedelta(hours=2, minutes=15))
        add_rate_limit_action(db_session, "user_b", "sendMessage", 150, NOW - timedelta(hours=2, minutes=45))
        add_rate_limit_action(db_session, "user_c", "createSupportTicket", 7, NOW - timedelta(minutes=20))

        report = service.export_metrics(ADMIN)

        assert [(a["action"], a["hitCount"], a["uniqueUsers"]) for a in report["actionBreakdown"]] == [
            ("sendMessage", 250, 2),
            ("createSupportTicket", 12, 2),
        ]
        offenders = {o["userId"]: o for o in report["topOffenders"]}
        assert [o["userId"] for o in report["topOffenders"]] == ["user_b", "user_a", "user_c"]
        assert offenders["user_a"]["totalHits"] == 105
        assert offenders["user_a"]["actions"] == ["sendMessage", "createSupportTicket"]
        assert offenders["user_a"]["lastHit"] == "2025-06-15T11:50:00.000Z"
        assert report["hourlyTrend"] == [
            {"hour": "2025-06-15T09:00:00.000Z", "hitCount": 2},
            {"hour": "2025-06-15T11:00:00.000Z", "hitCount": 2},
        ]

    def test_top_offenders_truncated_to_ten(self, db_session, service):
        for i in range(12):
            add_rate_limit_action(db_session, f"user_{i:02d}", "createBooking", 10 + i, NOW - timedelta(minutes=i))

        report = service.export_metrics(ADMIN)

        assert report["totals"]["uniqueUsersLimited"] == 12
        assert len(report["topOffenders"]) == 10
        assert report["topOffenders"][0]["userId"] == "user_11"
        assert report["topOffenders"][-1]["userId"] == "user_02"

    def test_configured_limits_listed(self, service):
        report = service.export_metrics(ADMIN)

        assert [c["action"] for c in report["configuredLimits"]] == list(RATE_LIMITS)
        review = next(c for c in report["configuredLimits"] if c["action"] == "createReview")
        assert review == {
            "action": "createReview",
            "limit": 10,
            "windowSeconds": 86400,
            "windowDescription": "1 dia(s)",
        }

    def test_hours_back_clamped_in_report(self, service):
        assert service.export_metrics(ADMIN, hours_back=1000)["hoursBack"] == 168

    def test_non_admin_denied(self, service):
        with pytest.raises(PermissionDeniedError):
            service.export_metrics(AuthContext(user_id="nobody"))

    def test_deadline_exceeded(self, db_session, store):
        add_admin(db_session, ADMIN.user_id)
        add_rate_limit_action(db_session, "user_a", "createBooking", 10, NOW)
        ticks = count(start=0, step=100)
        service = RateLimitMetricsService(
            store,
            AdminAuthorizationService(store),
            clock=lambda: NOW,
            timeout_seconds=50,
            monotonic=lambda: next(ticks),
        )

        with pytest.raises(ServiceUnavailableError):
            service.export_metrics(ADMIN)

    def test_export_never_writes(self, db_session, service):
        add_rate_limit_action(db_session, "user_a", "createBooking", 12, NOW - timedelta(hours=1))
        before = snapshot_tables(db_session)

        service.export_metrics(ADMIN)
        service.export_metrics(ADMIN, hours_back=168)

        assert snapshot_tables(db_session) == before
