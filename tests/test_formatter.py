# tests/test_formatter.py
"""
Formatter Tests - Unit Tests for Message Formatting Functions

This module contains unit tests for all message formatting functions:
rates, conversions, currency lists, cache inspection output, and the
user-facing text for domain errors.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- exrate.adapters.formatting.formatter (all formatter functions for testing)
- exrate.domain.models (Currency, CacheStatistics for test data)
- pytest (testing framework)
"""
import pytest

from exrate.adapters.formatting.formatter import (
    GENERIC_ERROR,
    _fmt_number,
    format_cache_entries,
    format_cache_keys,
    format_cache_stats,
    format_cache_value,
    format_conversion,
    format_currencies,
    format_error,
    format_rate,
    format_rates,
)
from exrate.domain.errors import (
    CacheUnavailableError,
    InvalidAmountError,
    InvalidCurrencyError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamUnreachableError,
)
from exrate.domain.models import CacheStatistics, Currency, UpstreamFailure


class TestFmtNumber:
    @pytest.mark.parametrize("value, expected", [
        (0, "0"),
        (1.0845, "1.0845"),
        (1234.5, "1,234.5000"),
        (0.000123456789, "0.000123457"),
        (0.86, "0.86"),
    ])
    def test_fmt_number(self, value, expected):
        assert _fmt_number(value) == expected


class TestRates:
    def test_format_rate(self):
        assert format_rate("EUR", "USD", 1.0845) == "💱 1 EUR = 1.0845 USD"

    def test_format_rates(self):
        result = format_rates("EUR", {"USD": 1.0845, "GBP": 0.86})
        lines = result.split("\n")
        assert lines[0] == "💱 Exchange rates for 1 EUR:"
        assert lines[1] == "— USD: 1.0845"
        assert lines[2] == "— GBP: 0.86"

    def test_format_rates_empty(self):
        assert "No exchange rates available for EUR" in format_rates("EUR", {})


class TestConversion:
    def test_single_target(self):
        assert format_conversion(100, "EUR", {"USD": 108.45}) == "💰 100.0000 EUR = 108.4500 USD"

    def test_multiple_targets(self):
        result = format_conversion(10, "EUR", {"USD": 10.845, "GBP": 8.6})
        assert result.split("\n") == [
            "💰 10.0000 EUR is worth:",
            "— 10.8450 USD",
            "— 8.6000 GBP",
        ]

    def test_zero_amount(self):
        assert format_conversion(0, "EUR", {"USD": 0.0}) == "💰 0 EUR = 0 USD"

    def test_nothing_converted(self):
        assert "Could not convert" in format_conversion(5, "EUR", {})


class TestCurrencies:
    def test_list(self):
        result = format_currencies([Currency("EUR", "Euro"), Currency("USD", "")])
        assert result.split("\n") == ["🌍 Supported currencies (2):", "EUR - Euro", "USD"]

    def test_empty(self):
        assert "not available yet" in format_currencies([])


class TestCacheOutput:
    def test_entries(self):
        result = format_cache_entries({"EUR_GBP": 0.86, "EUR_USD": 1.0845})
        assert result.split("\n") == ["🗄 Cached rates (2):", "EUR_GBP = 0.86", "EUR_USD = 1.0845"]

    def test_entries_empty(self):
        assert format_cache_entries({}) == "🗄 The rate cache is empty."

    def test_single_value(self):
        assert format_cache_value("EUR_USD", 1.0845) == "🗄 EUR_USD = 1.0845"
        assert format_cache_value("EUR_JPY", None) == "🗄 EUR_JPY is not in the cache."

    def test_keys(self):
        assert format_cache_keys(["EUR_GBP", "EUR_USD"]) == "🗄 Cached keys (2):\nEUR_GBP\nEUR_USD"
        assert format_cache_keys([]) == "🗄 The rate cache is empty."

    def test_stats(self):
        stats = CacheStatistics(hits=3, misses=1, evictions=2, size=10, max_entries=0)
        result = format_cache_stats(stats)
        assert "Entries: 10 (capacity: unbounded)" in result
        assert "Hit ratio: 75.0%" in result
        assert "Evictions: 2" in result

    def test_stats_before_any_lookup(self):
        result = format_cache_stats(CacheStatistics(max_entries=500))
        assert "Hit ratio: —" in result
        assert "capacity: 500" in result


class TestFormatError:
    def test_invalid_currency_names_code(self):
        assert "ZZZ" in format_error(InvalidCurrencyError("ZZZ"))

    def test_invalid_amount(self):
        assert "non-negative" in format_error(InvalidAmountError(-5))

    def test_cache_disabled(self):
        assert "disabled" in format_error(CacheUnavailableError())

    def test_timeout(self):
        msg = format_error(UpstreamUnreachableError("timed out", UpstreamFailure.TIMEOUT))
        assert "did not answer in time" in msg

    def test_server_error_hides_status(self):
        msg = format_error(UpstreamServerError("HTTP 503", UpstreamFailure.SERVER_ERROR, 503))
        assert "503" not in msg
        assert "having problems" in msg

    def test_client_error(self):
        msg = format_error(UpstreamClientError("HTTP 401", UpstreamFailure.CLIENT_ERROR, 401))
        assert "rejected" in msg

    def test_unreachable(self):
        msg = format_error(UpstreamUnreachableError("refused", UpstreamFailure.CONNECTION))
        assert "unavailable" in msg

    def test_unexpected_exception(self):
        assert format_error(KeyError("boom")) == GENERIC_ERROR
