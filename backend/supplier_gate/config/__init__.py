"""Configuration module for the eligibility gate service."""

from supplier_gate.config.rate_limits import (
    DEFAULT_ACTION,
    RATE_LIMITS,
    RateLimitConfig,
    get_rate_limit_config,
)

__all__ = [
    "DEFAULT_ACTION",
    "RATE_LIMITS",
    "RateLimitConfig",
    "get_rate_limit_config",
]
