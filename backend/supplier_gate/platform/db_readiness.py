"""Database schema readiness checks for the tables this service reads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Tables required by the eligibility gate, admin authorization and reports.
REQUIRED_GATE_TABLES = (
    "suppliers",
    "supplier_blocked_dates",
    "rate_limit_actions",
    "admins",
    "users",
)


@dataclass(frozen=True)
class DBReadinessResult:
    """Result payload for DB schema readiness checks."""

    ready: bool
    missing_tables: list[str]
    checked_tables: list[str]


def check_required_tables(session: Session, required_tables: Iterable[str]) -> DBReadinessResult:
    """Check whether required tables exist in the current database schema."""
    checked = list(required_tables)

    try:
        existing = set(inspect(session.get_bind()).get_table_names())
    except SQLAlchemyError:
        logger.exception("Failed listing database tables")
        raise

    missing = [table_name for table_name in checked if table_name not in existing]
    if missing:
        logger.warning("Required tables missing", extra={"missing_tables": missing})

    return DBReadinessResult(
        ready=len(missing) == 0,
        missing_tables=missing,
        checked_tables=checked,
    )
