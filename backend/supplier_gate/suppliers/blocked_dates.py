"""
Date block resolution.

A date is blocked for a supplier when any of these checks hits, evaluated
in order with early return:

1. blockedDates document whose ID is the date string
2. blocked_dates document whose ID is the date string
3. blockedDates document whose "date" falls in [day 00:00, next day 00:00) UTC
4. Same range check against blocked_dates

The interval is half-open: a document stamped exactly at next-day midnight
belongs to the next day.
"""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone

from supplier_gate.models.blocked_date import (
    BLOCKED_DATES_COLLECTION,
    LEGACY_BLOCKED_DATES_COLLECTION,
)
from supplier_gate.platform.errors import ValidationError
from supplier_gate.storage.port import SupplierGateStore

logger = logging.getLogger(__name__)

EVENT_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

BLOCKED_DATE_COLLECTIONS = (BLOCKED_DATES_COLLECTION, LEGACY_BLOCKED_DATES_COLLECTION)


def parse_event_date(event_date: str) -> date:
    """
    Parse a YYYY-MM-DD event date.

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if not isinstance(event_date, str) or not EVENT_DATE_PATTERN.match(event_date):
        raise ValidationError(
            "eventDate must be a date in YYYY-MM-DD format",
            details={"field": "eventDate"},
        )
    try:
        return date.fromisoformat(event_date)
    except ValueError:
        raise ValidationError(
            "eventDate is not a valid calendar date",
            details={"field": "eventDate"},
        )


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC bounds [start, end) of a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class DateBlockResolver:
    """Checks the blocked-date collections of a supplier. Read-only."""

    def __init__(self, store: SupplierGateStore):
        self.store = store

    def is_date_blocked(self, supplier_id: str, event_date: str) -> bool:
        day = parse_event_date(event_date)

        for collection in BLOCKED_DATE_COLLECTIONS:
            if self.store.blocked_date_exists(supplier_id, collection, event_date):
                logger.debug(
                    "date_blocked_by_document",
                    extra={"supplier_id": supplier_id, "event_date": event_date, "collection": collection},
                )
                return True

        start, end = day_bounds(day)
        for collection in BLOCKED_DATE_COLLECTIONS:
            if self.store.blocked_date_in_range(supplier_id, collection, start, end):
                logger.debug(
                    "date_blocked_by_range",
                    extra={"supplier_id": supplier_id, "event_date": event_date, "collection": collection},
                )
                return True

        return False
