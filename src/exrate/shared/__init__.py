"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and input parsing
- Rate limiting
- Logging configuration
"""

from exrate.shared.validators import (
    parse_amount,
    parse_currency_list,
    sanitize_for_log,
    validate_bot_token,
    validate_username,
)
from exrate.shared.rate_limiter import RateLimitConfig, RateLimiter, rate_limiter, RATE_LIMITS

__all__ = [
    "validate_bot_token",
    "validate_username",
    "parse_currency_list",
    "parse_amount",
    "sanitize_for_log",
    "RateLimitConfig",
    "RateLimiter",
    "rate_limiter",
    "RATE_LIMITS",
]
