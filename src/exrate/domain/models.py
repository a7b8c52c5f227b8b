# src/exrate/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains the value types of the rate resolution pipeline:
- Supported currencies
- Cache keys for (base, quote) pairs
- Cache statistics snapshots
- Upstream failure classification

Files that USE this module:
- exrate.application.* (catalog, cache and resolver use these types)
- exrate.adapters.* (providers classify failures, formatter renders models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import asdict, dataclass  # Decorator for creating data classes
from enum import Enum  # Tagged failure variants
from typing import Dict  # Type hints for mappings

KEY_SEPARATOR = "_"


def normalize_code(code: str) -> str:
    """Normalize a user-supplied currency code (strip whitespace, uppercase)."""
    return (code or "").strip().upper()


@dataclass(frozen=True)
class Currency:
    """
    A currency supported by the upstream provider.

    Attributes:
        code: Three-letter ISO-4217-like code (e.g. "EUR")
        description: Human readable name (e.g. "Euro")
    """
    code: str
    description: str


@dataclass(frozen=True, order=True)
class RateKey:
    """Ordered (base, quote) pair used as the rate cache key."""
    base: str
    quote: str

    def __str__(self) -> str:
        return f"{self.base}{KEY_SEPARATOR}{self.quote}"

    @classmethod
    def of(cls, base: str, quote: str) -> RateKey:
        return cls(normalize_code(base), normalize_code(quote))

    @classmethod
    def parse(cls, raw: str) -> RateKey:
        """
        Parse a rendered key such as "EUR_USD" (case-insensitive).

        Raises:
            ValueError: If the key is not two non-empty codes joined by "_"
        """
        parts = (raw or "").strip().split(KEY_SEPARATOR)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"Malformed cache key {raw!r}, expected BASE_QUOTE")
        return cls.of(parts[0], parts[1])


@dataclass(frozen=True)
class CacheStatistics:
    """
    Read-only snapshot of the rate cache counters.

    Attributes:
        hits: Lookups answered from the cache
        misses: Lookups that found no entry
        evictions: Entries dropped to respect the capacity bound
        size: Number of entries at snapshot time
        max_entries: Capacity bound (0 means unbounded)
    """
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
    max_entries: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class UpstreamFailure(str, Enum):
    """Classification of a failed upstream call."""
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    MALFORMED = "malformed"
