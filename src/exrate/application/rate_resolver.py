# src/exrate/application/rate_resolver.py
"""
Rate Resolver - Cache-Aside Orchestration of Exchange Rate Lookups

This module contains the core business logic of the service. For a single
pair or a batch of quote currencies it:
1. validates every code against the currency catalog (before any I/O),
2. probes the rate cache for each (base, quote) pair,
3. sends every miss to the provider in ONE upstream call,
4. stores fresh rates in the cache and merges them with the hits,
5. scales the result by the requested amount.

A batch whose miss-set is empty never reaches the provider, and a zero
amount never reads the cache or the provider. Upstream failures propagate
unchanged and fail the whole call: cached hits are not returned on their own.

Files that USE this module:
- exrate.adapters.telegram.handlers (/rate, /rates, /convert)
- exrate.app (composition root)
- tests.test_rate_resolver (unit tests)

Files that this module USES:
- exrate.application.rate_cache (RateCache)
- exrate.application.currency_catalog (CurrencyCatalog protocol)
- exrate.application.conversion (convert, scale_rates)
- exrate.adapters.providers.base (RateProvider)
- exrate.domain.errors (InvalidCurrencyError, InvalidAmountError, UpstreamUnreachableError)
"""
from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional

from exrate.adapters.providers.base import RateProvider
from exrate.application.conversion import convert, scale_rates
from exrate.application.currency_catalog import CurrencyCatalog
from exrate.application.rate_cache import RateCache
from exrate.domain.errors import InvalidAmountError, InvalidCurrencyError, UpstreamUnreachableError
from exrate.domain.models import RateKey, UpstreamFailure, normalize_code
from exrate.shared.validators import sanitize_for_log

logger = logging.getLogger(__name__)

SELF_RATE = 1.0


class RateResolver:
    """
    Cache-aside resolver. Collaborators are injected once and never swapped.

    `cache=None` runs the pipeline without a cache: every probe is a miss
    and nothing is stored.
    """

    def __init__(self, cache: Optional[RateCache], provider: RateProvider, catalog: CurrencyCatalog):
        self._cache = cache
        self._provider = provider
        self._catalog = catalog

    # --- Validation ---

    @staticmethod
    def _validate_amount(amount) -> Optional[float]:
        if amount is None:
            return None
        try:
            value = float(amount)
        except (TypeError, ValueError):
            raise InvalidAmountError(amount) from None
        if math.isnan(value) or math.isinf(value) or value < 0:
            raise InvalidAmountError(amount)
        return value

    def _validate_code(self, code: str) -> str:
        canonical = self._catalog.resolve(code)
        if canonical is None:
            logger.info("Currency %s is not supported by the service", sanitize_for_log(code))
            raise InvalidCurrencyError(normalize_code(code) or str(code))
        return canonical

    # --- Cache access ---

    def _probe(self, key: RateKey) -> Optional[float]:
        if self._cache is None:
            return None
        rate = self._cache.get(key)
        if rate is None:
            logger.debug("Exchange rate %s is not in the cache", key)
        else:
            logger.debug("Exchange rate %s fetched from the cache", key)
        return rate

    def _store(self, key: RateKey, rate: float) -> None:
        if self._cache is not None:
            self._cache.put(key, rate)

    # --- Public API ---

    def resolve_one(self, base: str, quote: str, amount: Optional[float] = None) -> float:
        """
        Resolve the rate from `base` to `quote`, optionally scaled by `amount`.

        Returns:
            Rate, or rate * amount when an amount is given

        Raises:
            InvalidAmountError: If amount is negative or not a number
            InvalidCurrencyError: If either code is not supported
            ProviderUnavailableError: If the provider had to be asked and failed
        """
        amount = self._validate_amount(amount)
        base = self._validate_code(base)
        quote = self._validate_code(quote)

        if amount == 0:
            return 0.0
        if base == quote:
            return SELF_RATE if amount is None else convert(SELF_RATE, amount)

        key = RateKey(base, quote)
        rate = self._probe(key)
        if rate is None:
            logger.info("Fetching exchange rate %s from the provider", key)
            fetched = self._provider.fetch_rates(base, {quote})
            rate = fetched.get(quote)
            if rate is None:
                logger.error("Provider response for %s has no rate for %s", base, quote)
                raise UpstreamUnreachableError(
                    f"Exchange rate API returned no rate for {quote}", UpstreamFailure.MALFORMED
                )
            self._store(key, rate)

        return rate if amount is None else convert(rate, amount)

    def resolve_many(
        self, base: str, quotes: Iterable[str], amount: Optional[float] = None
    ) -> Dict[str, float]:
        """
        Resolve rates from `base` to every code in `quotes` with at most one upstream call.

        Returns:
            Mapping of requested quote code to rate (or rate * amount). Codes the
            provider did not return are absent.

        Raises:
            InvalidAmountError: If amount is negative or not a number
            InvalidCurrencyError: For the first unsupported code (nothing else is done)
            ProviderUnavailableError: If the upstream call failed (no partial result)
        """
        amount = self._validate_amount(amount)
        base = self._validate_code(base)
        requested: List[str] = []
        for code in quotes:
            canonical = self._validate_code(code)
            if canonical not in requested:
                requested.append(canonical)

        if amount == 0:
            return {quote: 0.0 for quote in requested}

        hits: Dict[str, float] = {}
        misses: List[str] = []
        for quote in requested:
            if quote == base:
                hits[quote] = SELF_RATE
                continue
            rate = self._probe(RateKey(base, quote))
            if rate is None:
                misses.append(quote)
            else:
                hits[quote] = rate

        if not misses:
            logger.info("All %d rates for %s answered from the cache", len(hits), base)
            return scale_rates(hits, amount)

        logger.info("Fetching %d exchange rates for %s from the provider (%d cache hits)",
                    len(misses), base, len(hits))
        fetched = self._provider.fetch_rates(base, misses)

        resolved: Dict[str, float] = {}
        unknown: List[str] = []
        for code, rate in fetched.items():
            canonical = self._catalog.resolve(code)
            if canonical is None:
                unknown.append(code)
                continue
            self._store(RateKey(base, canonical), rate)
            if canonical in misses:
                resolved[canonical] = rate

        if unknown:
            # The provider knows currencies the catalog does not yet list
            logger.info("Provider returned unsupported currencies %s; requesting catalog refresh",
                        ", ".join(sorted(sanitize_for_log(c) for c in unknown)))
            self._catalog.request_refresh()

        missing = [quote for quote in misses if quote not in resolved]
        if missing:
            logger.warning("Provider returned no rate for %s (base %s)", ", ".join(missing), base)

        merged = {quote: hits[quote] if quote in hits else resolved[quote]
                  for quote in requested if quote in hits or quote in resolved}
        return scale_rates(merged, amount)

    def resolve_all(self, base: str, amount: Optional[float] = None) -> Dict[str, float]:
        """Resolve rates from `base` to every currency in the catalog."""
        return self.resolve_many(base, sorted(self._catalog.codes()), amount)
