"""
Configured rate limits per action.

This table is shared by the booking rate limiter (external) and the rate
limit metrics report. Unknown action keys fall back to the "default" entry.
"""

from dataclasses import dataclass
from typing import Dict

DEFAULT_ACTION = "default"


@dataclass(frozen=True)
class RateLimitConfig:
    """Request cap for one action within a rolling window."""
    limit: int
    window_seconds: int


RATE_LIMITS: Dict[str, RateLimitConfig] = {
    # Booking operations
    "createBooking": RateLimitConfig(limit=10, window_seconds=3600),
    # Payment operations
    "createPaymentIntent": RateLimitConfig(limit=20, window_seconds=3600),
    "confirmPayment": RateLimitConfig(limit=30, window_seconds=3600),
    # Review operations
    "createReview": RateLimitConfig(limit=10, window_seconds=86400),
    # Message operations
    "sendMessage": RateLimitConfig(limit=100, window_seconds=3600),
    # Support operations
    "createSupportTicket": RateLimitConfig(limit=5, window_seconds=3600),
    # Admin operations (stricter)
    "adminBroadcast": RateLimitConfig(limit=10, window_seconds=86400),
    # General fallback
    DEFAULT_ACTION: RateLimitConfig(limit=60, window_seconds=3600),
}


def get_rate_limit_config(action_key: str) -> RateLimitConfig:
    """
    Get the configured limit for an action.

    Args:
        action_key: Action key as stored on the rate limit record

    Returns:
        RateLimitConfig for the action, or the default entry when unknown
    """
    return RATE_LIMITS.get(action_key, RATE_LIMITS[DEFAULT_ACTION])
