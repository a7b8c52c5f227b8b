# src/exrate/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic.
No direct I/O of its own - the provider and the snapshot store are injected.
"""

from exrate.application.rate_cache import RateCache
from exrate.application.cache_service import CacheService
from exrate.application.conversion import convert, scale_rates
from exrate.application.currency_catalog import CurrencyCatalog, InMemoryCurrencyCatalog
from exrate.application.rate_resolver import RateResolver

__all__ = [
    "RateCache",
    "CacheService",
    "convert",
    "scale_rates",
    "CurrencyCatalog",
    "InMemoryCurrencyCatalog",
    "RateResolver",
]
