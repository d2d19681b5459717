"""
Supplier record model.

The supplier document is owned by the marketplace's profile and onboarding
flows. It is stored as a JSON document so that both migrated fields
(lifecycle_state, compliance, visibility, blocks, rate_limit) and legacy
fields (status, isActive, acceptingBookings, availabilityEnabled) are
read exactly as written, including absent and null values.
"""

from sqlalchemy import Column, String, JSON

from supplier_gate.db_base import Base


class Supplier(Base):
    """
    A supplier document keyed by supplier ID.

    Attributes:
        id: Supplier document ID
        document: Raw supplier fields, never rewritten by this service
    """
    __tablename__ = "suppliers"

    id = Column(String(255), primary_key=True)
    document = Column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Supplier(id={self.id})>"
