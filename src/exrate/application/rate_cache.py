# src/exrate/application/rate_cache.py
"""
Rate Cache - Shared In-Memory Store of Resolved Exchange Rates

This module holds the one mutable structure shared by every request: a map
from (base, quote) to the last rate fetched from the provider. Entries never
expire on their own; they are overwritten by fresh upstream resolutions,
evicted least-recently-used when a capacity bound is configured, or dropped
by an explicit clear.

Counters (hits, misses, evictions) are lifetime statistics of the cache
instance and survive clear().

Files that USE this module:
- exrate.application.rate_resolver (cache-aside probes and writes)
- exrate.application.cache_service (inspection and management)
- exrate.app (creates the shared instance)

Files that this module USES:
- exrate.domain.models (RateKey, CacheStatistics)
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional, Set

from exrate.domain.models import CacheStatistics, RateKey

logger = logging.getLogger(__name__)


class RateCache:
    """Thread-safe rate cache with optional LRU capacity bound."""

    def __init__(self, max_entries: int = 0):
        """
        Args:
            max_entries: Capacity bound; 0 or less means unbounded (never evicts)
        """
        self.max_entries = max(0, int(max_entries))
        self._data: "OrderedDict[RateKey, float]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def bounded(self) -> bool:
        return self.max_entries > 0

    def get(self, key: RateKey) -> Optional[float]:
        """Look up a rate, counting the hit or miss."""
        with self._lock:
            rate = self._data.get(key)
            if rate is None:
                self._misses += 1
                return None
            self._hits += 1
            self._data.move_to_end(key)
            return rate

    def peek(self, key: RateKey) -> Optional[float]:
        """Look up a rate for inspection; counters and recency are untouched."""
        with self._lock:
            return self._data.get(key)

    def put(self, key: RateKey, rate: float) -> None:
        """Store a rate, overwriting any previous value for the key."""
        with self._lock:
            self._data[key] = float(rate)
            self._data.move_to_end(key)
            while self.bounded and len(self._data) > self.max_entries:
                evicted, _ = self._data.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted %s from rate cache", evicted)

    def delete(self, key: RateKey) -> bool:
        """Remove one entry. Returns True if it was present."""
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry; statistics are kept."""
        with self._lock:
            count = len(self._data)
            self._data.clear()
        logger.info("Rate cache cleared (%d entries removed)", count)

    def keys(self) -> Set[RateKey]:
        with self._lock:
            return set(self._data)

    def entries(self) -> Dict[RateKey, float]:
        with self._lock:
            return dict(self._data)

    def statistics(self) -> CacheStatistics:
        with self._lock:
            return CacheStatistics(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._data),
                max_entries=self.max_entries,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
