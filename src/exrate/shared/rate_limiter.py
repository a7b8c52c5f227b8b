# src/exrate/shared/rate_limiter.py
"""
Rate Limiter - Abuse Prevention and Upstream Protection

Per-user sliding-window limiter for bot commands. Every lookup command can
end in an upstream provider call, so users who flood the bot are blocked
for a while instead of draining the provider quota.

Files that USE this module:
- exrate.adapters.telegram.handlers (checks RATE_LIMITS before every command)

Files that this module USES:
- None (pure utility implementation)
"""
import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional


@dataclass(frozen=True)
class RateLimitConfig:
    """Configuration for rate limiting."""
    max_requests: int
    time_window: int  # in seconds
    block_duration: int = 300  # 5 minutes default


class RateLimiter:
    """In-memory sliding-window rate limiter keyed by an identifier string."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._blocked_until: Dict[str, float] = {}

    def _prune(self, identifier: str, now: float, config: RateLimitConfig) -> Deque[float]:
        window = self._requests[identifier]
        cutoff = now - config.time_window
        while window and window[0] < cutoff:
            window.popleft()
        return window

    def is_allowed(self, identifier: str, config: RateLimitConfig) -> bool:
        """
        Record a request and tell whether it may proceed.

        Exceeding `max_requests` within `time_window` blocks the identifier
        for `block_duration` seconds.
        """
        with self._lock:
            now = self._clock()
            blocked_until = self._blocked_until.get(identifier)
            if blocked_until is not None:
                if now < blocked_until:
                    return False
                del self._blocked_until[identifier]

            window = self._prune(identifier, now, config)
            if len(window) >= config.max_requests:
                self._blocked_until[identifier] = now + config.block_duration
                return False

            window.append(now)
            return True

    def get_retry_after(self, identifier: str) -> Optional[float]:
        """Seconds until a blocked identifier may retry, or None if not blocked."""
        with self._lock:
            blocked_until = self._blocked_until.get(identifier)
            if blocked_until is None:
                return None
            return max(0.0, blocked_until - self._clock())


# Global rate limiter instance
rate_limiter = RateLimiter()

# Predefined rate limit configurations
RATE_LIMITS = {
    "lookup_command": RateLimitConfig(max_requests=20, time_window=60),  # rate/convert lookups
    "admin_command": RateLimitConfig(max_requests=30, time_window=60),  # cache management
}
