"""
Rate limit metrics export.

Read-only operator report over the rate limit counters written by the
booking rate limiter. A counter is an "active rate limit" when its count has
reached the configured limit of its action.

One pass over the window accumulates three groupings: by action, by
subject and by hour of last request.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

from supplier_gate.config.rate_limits import RATE_LIMITS, get_rate_limit_config
from supplier_gate.config.settings import (
    TOP_OFFENDERS_LIMIT,
    get_metrics_default_hours,
    get_metrics_max_hours,
    get_metrics_timeout_seconds,
)
from supplier_gate.platform.audit import AuditAction, AuditEvent, emit_audit_event
from supplier_gate.platform.auth import AuthContext
from supplier_gate.platform.errors import ServiceUnavailableError, ValidationError
from supplier_gate.services.admin_authorization import AdminAuthorizationService
from supplier_gate.storage.port import SupplierGateStore
from supplier_gate.utils.timestamps import hour_bucket, isoformat_millis, utc_now

logger = logging.getLogger(__name__)

EXPORT_ACTION = "export_rate_limit_metrics"

Number = Union[int, float]


def format_window_description(seconds: int) -> str:
    """Render a rate limit window in Portuguese, e.g. "1 hora(s)"."""
    if seconds < 60:
        return f"{seconds} segundos"
    if seconds < 3600:
        return f"{seconds // 60} minutos"
    if seconds < 86400:
        return f"{seconds // 3600} hora(s)"
    return f"{seconds // 86400} dia(s)"


def resolve_hours_back(hours_back: Any) -> Number:
    """
    Apply the default and the upper clamp to a requested window.

    Zero or absent selects the default window.

    Raises:
        ValidationError: If hours_back is not a number
    """
    if hours_back is None:
        hours_back = 0
    if isinstance(hours_back, bool) or not isinstance(hours_back, (int, float)):
        raise ValidationError("hoursBack must be a number", details={"field": "hoursBack"})
    if not math.isfinite(hours_back):
        raise ValidationError("hoursBack must be a finite number", details={"field": "hoursBack"})
    return min(hours_back or get_metrics_default_hours(), get_metrics_max_hours())


@dataclass
class _ActionStats:
    hits: int = 0
    users: set = field(default_factory=set)


@dataclass
class _SubjectStats:
    total: int
    last_hit: datetime
    # dict as an ordered set of action keys
    actions: dict = field(default_factory=dict)


class RateLimitMetricsService:
    """
    Aggregates active rate limits within a trailing window.

    Usage:
        service = RateLimitMetricsService(store, authorizer)
        report = service.export_metrics(auth, hours_back=48)
    """

    def __init__(
        self,
        store: SupplierGateStore,
        authorizer: AdminAuthorizationService,
        clock: Callable[[], datetime] = utc_now,
        timeout_seconds: Optional[float] = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.authorizer = authorizer
        self.clock = clock
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else get_metrics_timeout_seconds()
        self.monotonic = monotonic

    def export_metrics(self, auth: Optional[AuthContext], hours_back: Any = None) -> dict[str, Any]:
        """
        Build the rate limit metrics report.

        Raises:
            AuthenticationError: No authenticated caller
            PermissionDeniedError: Caller is not an administrator
            ValidationError: hoursBack is not a number
            ServiceUnavailableError: Aggregation exceeded its deadline
        """
        self.authorizer.require_admin(auth, action=EXPORT_ACTION)

        hours_back = resolve_hours_back(hours_back)
        now = self.clock()
        cutoff = now - timedelta(hours=hours_back)

        logger.info(
            "metrics_export_started",
            extra={"uid": auth.user_id, "hours_back": hours_back, "cutoff": cutoff.isoformat()},
        )

        started = self.monotonic()
        by_action: dict[str, _ActionStats] = {}
        by_subject: dict[str, _SubjectStats] = {}
        by_hour: dict[str, int] = {}
        active_rate_limits = 0

        for subject_id in self.store.list_rate_limit_subjects():
            if self.monotonic() - started > self.timeout_seconds:
                logger.error(
                    "metrics_export_timeout",
                    extra={"timeout_seconds": self.timeout_seconds, "subjects_scanned": len(by_subject)},
                )
                raise ServiceUnavailableError("Rate limit metrics export timed out")

            for record in self.store.list_rate_limit_actions(subject_id, cutoff):
                config = get_rate_limit_config(record.action_key)
                if record.count < config.limit:
                    continue

                active_rate_limits += 1

                action_stats = by_action.setdefault(record.action_key, _ActionStats())
                action_stats.hits += record.count
                action_stats.users.add(subject_id)

                subject_stats = by_subject.get(subject_id)
                if subject_stats is None:
                    subject_stats = _SubjectStats(total=0, last_hit=record.last_request)
                    by_subject[subject_id] = subject_stats
                subject_stats.total += record.count
                subject_stats.actions[record.action_key] = None
                if record.last_request > subject_stats.last_hit:
                    subject_stats.last_hit = record.last_request

                bucket = hour_bucket(record.last_request)
                by_hour[bucket] = by_hour.get(bucket, 0) + 1

        action_breakdown = sorted(
            (
                {
                    "action": action,
                    "hitCount": stats.hits,
                    "uniqueUsers": len(stats.users),
                    "configuredLimit": get_rate_limit_config(action).limit,
                    "windowSeconds": get_rate_limit_config(action).window_seconds,
                }
                for action, stats in by_action.items()
            ),
            key=lambda item: item["hitCount"],
            reverse=True,
        )

        top_offenders = sorted(
            (
                {
                    "userId": subject_id,
                    "totalHits": stats.total,
                    "actions": list(stats.actions),
                    "lastHit": isoformat_millis(stats.last_hit),
                }
                for subject_id, stats in by_subject.items()
            ),
            key=lambda item: item["totalHits"],
            reverse=True,
        )[:TOP_OFFENDERS_LIMIT]

        hourly_trend = [
            {"hour": hour, "hitCount": count}
            for hour, count in sorted(by_hour.items())
        ]

        configured_limits = [
            {
                "action": action,
                "limit": config.limit,
                "windowSeconds": config.window_seconds,
                "windowDescription": format_window_description(config.window_seconds),
            }
            for action, config in RATE_LIMITS.items()
        ]

        report = {
            "generatedAt": isoformat_millis(self.clock()),
            "hoursBack": hours_back,
            "totals": {
                "uniqueUsersLimited": len(by_subject),
                "totalHits": sum(stats.total for stats in by_subject.values()),
                "activeRateLimits": active_rate_limits,
            },
            "actionBreakdown": action_breakdown,
            "topOffenders": top_offenders,
            "hourlyTrend": hourly_trend,
            "configuredLimits": configured_limits,
        }

        logger.info(
            "metrics_export_completed",
            extra={
                "unique_users_limited": report["totals"]["uniqueUsersLimited"],
                "total_hits": report["totals"]["totalHits"],
                "active_rate_limits": active_rate_limits,
                "action_count": len(action_breakdown),
            },
        )
        emit_audit_event(AuditEvent(
            action=AuditAction.RATE_LIMIT_METRICS_EXPORTED,
            user_id=auth.user_id,
            resource_type="rate_limits",
            metadata={"hours_back": hours_back, "active_rate_limits": active_rate_limits},
        ))

        return report
