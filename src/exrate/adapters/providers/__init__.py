"""
Provider Adapters - External API Clients

This package contains the upstream rate provider client and the
classification of its failures. Providers implement RateProvider.
"""

from exrate.adapters.providers.base import RateProvider
from exrate.adapters.providers.exchangerate_host import ExchangeRateHostProvider

__all__ = [
    "RateProvider",
    "ExchangeRateHostProvider",
]
