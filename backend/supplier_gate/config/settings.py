"""
Runtime settings for the eligibility gate service.

All values come from environment variables with safe defaults. Accessors
are functions so tests can patch the environment per test.
"""

import os
from typing import Optional

DEFAULT_DATABASE_URL = "sqlite:///./supplier_gate.db"

# Rate limit metrics window (hours)
DEFAULT_METRICS_HOURS_BACK = 24
MAXIMUM_METRICS_HOURS_BACK = 168  # 7 days

# Top offenders returned by the rate limit metrics report
TOP_OFFENDERS_LIMIT = 10


def get_database_url() -> str:
    """Database URL for the SQLAlchemy engine."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_jwt_secret() -> Optional[str]:
    """Shared secret used to verify HS256 bearer tokens."""
    return os.getenv("JWT_SECRET")


def get_jwt_audience() -> Optional[str]:
    """Expected token audience. Audience is not checked when unset."""
    return os.getenv("JWT_AUDIENCE") or None


def get_metrics_default_hours() -> int:
    return int(os.getenv("RATE_LIMIT_METRICS_DEFAULT_HOURS", str(DEFAULT_METRICS_HOURS_BACK)))


def get_metrics_max_hours() -> int:
    return int(os.getenv("RATE_LIMIT_METRICS_MAX_HOURS", str(MAXIMUM_METRICS_HOURS_BACK)))


def get_metrics_timeout_seconds() -> float:
    """Deadline for one rate limit metrics aggregation."""
    return float(os.getenv("RATE_LIMIT_METRICS_TIMEOUT_SECONDS", "120"))


def get_migration_metrics_timeout_seconds() -> float:
    """Deadline for one migration metrics scan."""
    return float(os.getenv("MIGRATION_METRICS_TIMEOUT_SECONDS", "540"))
