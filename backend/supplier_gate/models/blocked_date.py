"""
Blocked date model.

Blocked dates live in two historical collections, "blockedDates" and
"blocked_dates". Canonical documents use the date string (YYYY-MM-DD) as
their ID. Older documents carry an auto-generated ID and a "date" timestamp.
"""

from sqlalchemy import Column, String, DateTime, Integer, Index, UniqueConstraint

from supplier_gate.db_base import Base

BLOCKED_DATES_COLLECTION = "blockedDates"
LEGACY_BLOCKED_DATES_COLLECTION = "blocked_dates"


class SupplierBlockedDate(Base):
    """
    One blocked-date document in a supplier-scoped collection.

    Attributes:
        supplier_id: Owning supplier
        collection: Collection name ("blockedDates" or "blocked_dates")
        document_id: Date string for canonical documents, any ID otherwise
        date: Blocked instant for legacy documents (UTC)
    """
    __tablename__ = "supplier_blocked_dates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id = Column(String(255), nullable=False, index=True)
    collection = Column(String(32), nullable=False)
    document_id = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "supplier_id", "collection", "document_id",
            name="uq_blocked_date_document",
        ),
        Index("ix_blocked_date_range", "supplier_id", "collection", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<SupplierBlockedDate(supplier_id={self.supplier_id}, "
            f"collection={self.collection}, document_id={self.document_id})>"
        )
