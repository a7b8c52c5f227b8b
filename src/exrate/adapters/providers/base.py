# src/exrate/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for upstream rate providers.
It establishes the contract the resolver and the currency catalog rely on.

Files that USE this module:
- exrate.adapters.providers.exchangerate_host (ExchangeRateHostProvider implements RateProvider)
- exrate.application.rate_resolver (fetch_rates for cache misses)
- exrate.application.currency_catalog (fetch_supported_currencies for refreshes)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional


class RateProvider(ABC):
    @abstractmethod
    def fetch_rates(self, base: str, quotes: Optional[Iterable[str]] = None) -> Dict[str, float]:
        """
        Return quote units per 1 `base` unit for each requested quote.

        `quotes=None` asks for every rate the provider knows for `base`.

        Raises:
            ProviderUnavailableError: If the provider could not answer
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_supported_currencies(self) -> Dict[str, str]:
        """
        Return code -> description for every currency the provider supports.

        Raises:
            ProviderUnavailableError: If the provider could not answer
        """
        raise NotImplementedError
