# src/exrate/adapters/providers/exchangerate_host.py
"""
exchangerate.host API Provider for Latest Rates and Supported Symbols

This module implements the upstream client of the rate resolution pipeline.
It talks to an exchangerate.host compatible API:
- GET /latest?base=EUR&symbols=USD,GBP  -> {"base": "EUR", "rates": {"USD": 1.09, ...}}
- GET /symbols                          -> {"symbols": {"EUR": {"description": "Euro", "code": "EUR"}, ...}}

Every call goes through one resilience wrapper: a bounded number of attempts
with a fixed delay, retried only when the attempt timed out. Any other
failure is classified and raised on the first attempt.

Files that USE this module:
- exrate.app (composition root builds the provider)
- tests.test_providers (unit tests)

Files that this module USES:
- exrate.adapters.providers.base (RateProvider interface)
- exrate.adapters.providers.error_classifier (failure classification)
- exrate.config (settings for API configuration)
"""
import logging
import math
import time
from typing import Any, Dict, Iterable, Optional

import requests

from exrate.adapters.providers.base import RateProvider
from exrate.adapters.providers.error_classifier import (
    classify_exception,
    classify_status,
    is_retryable,
    to_provider_error,
)
from exrate.config import settings
from exrate.domain.models import UpstreamFailure, normalize_code

log = logging.getLogger(__name__)


class ExchangeRateHostProvider(RateProvider):
    """Stateless client; safe to share between concurrent requests."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
        access_key: Optional[str] = None,
    ):
        """
        Initialize the provider.

        Args:
            base_url: API root (defaults to settings.exchange_api_url)
            timeout: Per-attempt HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            max_attempts: Total attempts for timed-out calls (defaults to settings.http_max_attempts)
            retry_delay: Fixed delay between attempts in seconds (defaults to settings.http_retry_delay_seconds)
            access_key: Optional API key sent as the access_key query parameter

        Raises:
            ValueError: If max_attempts is lower than 1
        """
        self.base_url = (base_url or settings.exchange_api_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_attempts = max_attempts if max_attempts is not None else settings.http_max_attempts
        self.retry_delay = retry_delay if retry_delay is not None else settings.http_retry_delay_seconds
        self.access_key = access_key if access_key is not None else settings.exchange_api_key
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def _params(self, **params: str) -> Dict[str, str]:
        if self.access_key:
            params["access_key"] = self.access_key
        return params

    def _get_json(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        """
        GET `path` and decode the JSON object body.

        Returns:
            Decoded JSON object

        Raises:
            UpstreamUnreachableError: Timeouts on every attempt, connection failure, bad JSON
            UpstreamServerError: Provider answered 5xx
            UpstreamClientError: Provider answered 4xx
        """
        url = f"{self.base_url}{path}"
        for attempt in range(1, self.max_attempts + 1):
            try:
                log.info("Calling exchange rate API %s (attempt %d/%d)", path, attempt, self.max_attempts)
                resp = requests.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                failure = classify_exception(e)
                if is_retryable(failure) and attempt < self.max_attempts:
                    log.warning(
                        "Exchange rate API %s timed out after %ss, retrying in %ss",
                        path, self.timeout, self.retry_delay,
                    )
                    time.sleep(self.retry_delay)
                    continue
                if failure is UpstreamFailure.TIMEOUT:
                    log.error("Exchange rate API %s timed out on all %d attempts", path, self.max_attempts)
                    raise to_provider_error(
                        failure, f"Exchange rate API timed out after {self.max_attempts} attempts"
                    ) from e
                log.error("Exchange rate API request failed: %s", e)
                raise to_provider_error(failure, "Exchange rate API request failed") from e

            failure = classify_status(resp.status_code)
            if failure is not None:
                log.error("Exchange rate API %s returned HTTP %d", path, resp.status_code)
                kind = "server" if failure is UpstreamFailure.SERVER_ERROR else "client"
                raise to_provider_error(
                    failure, f"Exchange rate API {kind} error (HTTP {resp.status_code})", resp.status_code
                )

            try:
                data = resp.json()
            except ValueError as e:
                log.error("Exchange rate API returned invalid JSON: %s", e)
                raise to_provider_error(UpstreamFailure.MALFORMED, "Exchange rate API returned invalid JSON") from e

            if not isinstance(data, dict):
                log.error("Exchange rate API unexpected response type: %r", type(data))
                raise to_provider_error(UpstreamFailure.MALFORMED, "Exchange rate API returned non-object JSON")
            if data.get("success") is False:
                log.error("Exchange rate API reported failure: %s", data.get("error"))
                raise to_provider_error(UpstreamFailure.MALFORMED, "Exchange rate API reported an unsuccessful response")
            return data

        # range() above always returns or raises
        raise AssertionError("unreachable")

    def fetch_rates(self, base: str, quotes: Optional[Iterable[str]] = None) -> Dict[str, float]:
        """
        Get the latest rates for `base`.

        Args:
            base: Base currency code
            quotes: Quote codes to restrict the answer to; None for every known rate

        Returns:
            Mapping of quote code to quote units per 1 base unit

        Raises:
            ProviderUnavailableError: If the call failed or the payload is malformed
        """
        base = normalize_code(base)
        if quotes is None:
            params = self._params(base=base)
        else:
            # Sorted so the same miss-set always produces the same query string
            symbols = ",".join(sorted({normalize_code(q) for q in quotes}))
            params = self._params(base=base, symbols=symbols)

        data = self._get_json("/latest", params)
        raw_rates = data.get("rates")
        if not isinstance(raw_rates, dict):
            log.error("Exchange rate API response missing 'rates' for base %s", base)
            raise to_provider_error(UpstreamFailure.MALFORMED, "Exchange rate API response missing 'rates' field")

        rates: Dict[str, float] = {}
        for code, value in raw_rates.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                log.error("Exchange rate API returned invalid rate for %s: %r", code, value)
                raise to_provider_error(UpstreamFailure.MALFORMED, f"Exchange rate API returned invalid rate for {code}")
            rates[normalize_code(code)] = float(value)

        log.info("Fetched %d rates for base %s", len(rates), base)
        return rates

    def fetch_supported_currencies(self) -> Dict[str, str]:
        """
        Get every currency the provider supports.

        Returns:
            Mapping of code to human readable description

        Raises:
            ProviderUnavailableError: If the call failed or the payload is malformed
        """
        data = self._get_json("/symbols", self._params())
        raw_symbols = data.get("symbols")
        if not isinstance(raw_symbols, dict):
            log.error("Exchange rate API response missing 'symbols'")
            raise to_provider_error(UpstreamFailure.MALFORMED, "Exchange rate API response missing 'symbols' field")

        symbols: Dict[str, str] = {}
        for key, node in raw_symbols.items():
            if isinstance(node, dict):
                code = normalize_code(node.get("code") or key)
                description = str(node.get("description") or code)
            else:
                code = normalize_code(key)
                description = str(node)
            symbols[code] = description

        log.info("Fetched %d supported currencies", len(symbols))
        return symbols
