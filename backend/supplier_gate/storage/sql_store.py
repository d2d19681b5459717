"""
SQLAlchemy implementation of the storage port.

Timestamps are compared and returned in UTC. Backends that drop timezone
information (SQLite) hand back naive values, which are stored as UTC.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from sqlalchemy.orm import Session

from supplier_gate.models import (
    Admin,
    RateLimitAction,
    Supplier,
    SupplierBlockedDate,
    User,
)
from supplier_gate.storage.port import RateLimitActionRecord

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlSupplierGateStore:
    """
    Read-only store over a SQLAlchemy session.

    Usage:
        store = SqlSupplierGateStore(session)
        supplier = store.get_supplier("sup_123")
    """

    def __init__(self, session: Session):
        self.session = session

    def get_supplier(self, supplier_id: str) -> Optional[dict[str, Any]]:
        row = self.session.get(Supplier, supplier_id)
        if row is None:
            return None
        # Callers receive a copy so the mapped row is never touched.
        return copy.deepcopy(row.document or {})

    def iter_suppliers(self, limit: Optional[int] = None) -> Iterator[tuple[str, dict[str, Any]]]:
        query = self.session.query(Supplier).order_by(Supplier.id)
        if limit is not None and limit > 0:
            query = query.limit(limit)
        for row in query.all():
            yield row.id, copy.deepcopy(row.document or {})

    def blocked_date_exists(self, supplier_id: str, collection: str, date_id: str) -> bool:
        row = self.session.query(SupplierBlockedDate.id).filter(
            SupplierBlockedDate.supplier_id == supplier_id,
            SupplierBlockedDate.collection == collection,
            SupplierBlockedDate.document_id == date_id,
        ).first()
        return row is not None

    def blocked_date_in_range(
        self, supplier_id: str, collection: str, start: datetime, end: datetime
    ) -> bool:
        row = self.session.query(SupplierBlockedDate.id).filter(
            SupplierBlockedDate.supplier_id == supplier_id,
            SupplierBlockedDate.collection == collection,
            SupplierBlockedDate.date >= as_utc(start),
            SupplierBlockedDate.date < as_utc(end),
        ).limit(1).first()
        return row is not None

    def list_rate_limit_subjects(self) -> list[str]:
        rows = self.session.query(RateLimitAction.subject_id).distinct().order_by(
            RateLimitAction.subject_id
        ).all()
        return [row.subject_id for row in rows]

    def list_rate_limit_actions(self, subject_id: str, since: datetime) -> list[RateLimitActionRecord]:
        rows = self.session.query(RateLimitAction).filter(
            RateLimitAction.subject_id == subject_id,
            RateLimitAction.last_request >= as_utc(since),
        ).order_by(RateLimitAction.last_request, RateLimitAction.action_key).all()
        return [
            RateLimitActionRecord(
                subject_id=row.subject_id,
                action_key=row.action_key,
                count=row.count or 0,
                last_request=as_utc(row.last_request),
            )
            for row in rows
        ]

    def admin_exists(self, uid: str) -> bool:
        return self.session.get(Admin, uid) is not None

    def get_user(self, uid: str) -> Optional[dict[str, Any]]:
        row = self.session.get(User, uid)
        if row is None:
            return None
        return {"id": row.id, "isAdmin": row.is_admin}
