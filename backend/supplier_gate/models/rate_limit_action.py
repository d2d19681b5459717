"""
Rate limit action counters.

Written by the booking rate limiter (outside this service). Each row is one
subject's counter for one action key within the current window.
"""

from sqlalchemy import Column, String, Integer, DateTime, Index

from supplier_gate.db_base import Base


class RateLimitAction(Base):
    """
    Attributes:
        subject_id: User or supplier being limited
        action_key: Action name, e.g. "createBooking"
        count: Requests counted in the current window
        window_start: Start of the current window
        last_request: Time of the most recent counted request
    """
    __tablename__ = "rate_limit_actions"

    subject_id = Column(String(255), primary_key=True)
    action_key = Column(String(128), primary_key=True)
    count = Column(Integer, nullable=False, default=0)
    window_start = Column(DateTime(timezone=True), nullable=True)
    last_request = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_rate_limit_actions_last_request", "last_request"),
    )

    def __repr__(self) -> str:
        return f"<RateLimitAction(subject_id={self.subject_id}, action_key={self.action_key}, count={self.count})>"
