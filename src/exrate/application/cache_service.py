# src/exrate/application/cache_service.py
"""
Cache Service - Management and Inspection of the Rate Cache

Operator-facing operations on the shared rate cache: list entries and keys,
read or delete one entry, clear everything, read statistics. When the cache
is disabled by configuration there is no cache instance, and every
operation raises CacheUnavailableError (which is not the same as a miss).

Files that USE this module:
- exrate.adapters.telegram.handlers (admin cache commands)
- exrate.app (composition root)

Files that this module USES:
- exrate.application.rate_cache (RateCache)
- exrate.domain.models (RateKey, CacheStatistics)
- exrate.domain.errors (CacheUnavailableError)
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from exrate.application.rate_cache import RateCache
from exrate.domain.errors import CacheUnavailableError
from exrate.domain.models import CacheStatistics, RateKey

logger = logging.getLogger(__name__)


class CacheService:
    def __init__(self, cache: Optional[RateCache]):
        self._cache = cache

    def _require_cache(self) -> RateCache:
        if self._cache is None:
            logger.info("Cache operation requested while the rate cache is disabled")
            raise CacheUnavailableError("No rate cache is configured")
        return self._cache

    def get_all_entries(self) -> Dict[str, float]:
        """Every cached rate keyed by its rendered BASE_QUOTE key, sorted by key."""
        entries = self._require_cache().entries()
        return {str(key): rate for key, rate in sorted(entries.items())}

    def get_all_keys(self) -> List[str]:
        return [str(key) for key in sorted(self._require_cache().keys())]

    def get_value(self, key: str) -> Optional[float]:
        """
        Read one cached rate.

        Raises:
            ValueError: If `key` is not of the form BASE_QUOTE
            CacheUnavailableError: If the cache is disabled
        """
        cache = self._require_cache()
        return cache.peek(RateKey.parse(key))

    def delete_value(self, key: str) -> bool:
        cache = self._require_cache()
        removed = cache.delete(RateKey.parse(key))
        if removed:
            logger.info("Removed %s from rate cache", RateKey.parse(key))
        return removed

    def clear(self) -> None:
        self._require_cache().clear()

    def get_statistics(self) -> CacheStatistics:
        return self._require_cache().statistics()
