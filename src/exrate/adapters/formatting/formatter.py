# src/exrate/adapters/formatting/formatter.py
"""
Message Formatter - Text Formatting and Presentation

This module handles all text formatting for Telegram messages: single rates,
rate tables, conversions, the supported currency list, cache inspection
output, and the user-facing text for every domain error.

Files that USE this module:
- exrate.adapters.telegram.handlers (uses all formatter functions for message display)
- tests.test_formatter (unit tests)

Files that this module USES:
- exrate.domain.models (Currency, CacheStatistics)
- exrate.domain.errors (error families mapped to user messages)
"""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from exrate.domain.errors import (
    CacheUnavailableError,
    DomainError,
    InvalidAmountError,
    InvalidCurrencyError,
    ProviderUnavailableError,
    UpstreamClientError,
    UpstreamServerError,
)
from exrate.domain.models import CacheStatistics, Currency, UpstreamFailure

GENERIC_ERROR = "❌ Something went wrong while processing your request. Please try again later."


def _fmt_number(value: float) -> str:
    """
    Format a rate or amount for display.

    Values of 1 or more get thousands separators and 4 decimals; smaller
    values keep 6 significant digits so tiny rates stay readable.

    Returns:
        String like '1,234.5000', '0.000123' or '0'
    """
    if value == 0:
        return "0"
    if abs(value) >= 1:
        return f"{value:,.4f}"
    return f"{value:.6g}"


def format_rate(base: str, quote: str, rate: float) -> str:
    return f"💱 1 {base} = {_fmt_number(rate)} {quote}"


def format_rates(base: str, rates: Mapping[str, float]) -> str:
    """
    Format a batch of rates from one base currency, one line per quote.

    Args:
        base: Base currency code
        rates: Quote code -> rate, in display order

    Returns:
        Multi-line message, or a notice if no rate could be resolved
    """
    if not rates:
        return f"⚠️ No exchange rates available for {base}."
    lines = [f"💱 Exchange rates for 1 {base}:"]
    for quote, rate in rates.items():
        lines.append(f"— {quote}: {_fmt_number(rate)}")
    return "\n".join(lines)


def format_conversion(amount: float, base: str, converted: Mapping[str, float]) -> str:
    """Format the result of converting `amount` of `base` into one or more currencies."""
    if not converted:
        return f"⚠️ Could not convert {_fmt_number(amount)} {base}."
    if len(converted) == 1:
        quote, value = next(iter(converted.items()))
        return f"💰 {_fmt_number(amount)} {base} = {_fmt_number(value)} {quote}"
    lines = [f"💰 {_fmt_number(amount)} {base} is worth:"]
    for quote, value in converted.items():
        lines.append(f"— {_fmt_number(value)} {quote}")
    return "\n".join(lines)


def format_currencies(currencies: Iterable[Currency]) -> str:
    currencies = list(currencies)
    if not currencies:
        return "⚠️ The list of supported currencies is not available yet."
    lines = [f"🌍 Supported currencies ({len(currencies)}):"]
    for currency in currencies:
        if currency.description:
            lines.append(f"{currency.code} - {currency.description}")
        else:
            lines.append(currency.code)
    return "\n".join(lines)


# -------- cache inspection (admin) --------

def format_cache_entries(entries: Mapping[str, float]) -> str:
    if not entries:
        return "🗄 The rate cache is empty."
    lines = [f"🗄 Cached rates ({len(entries)}):"]
    for key, rate in entries.items():
        lines.append(f"{key} = {_fmt_number(rate)}")
    return "\n".join(lines)


def format_cache_value(key: str, rate: Optional[float]) -> str:
    if rate is None:
        return f"🗄 {key} is not in the cache."
    return f"🗄 {key} = {_fmt_number(rate)}"


def format_cache_keys(keys: List[str]) -> str:
    if not keys:
        return "🗄 The rate cache is empty."
    return f"🗄 Cached keys ({len(keys)}):\n" + "\n".join(keys)


def format_cache_stats(stats: CacheStatistics) -> str:
    """
    Format cache statistics as plain text.

    Hit ratio is shown as a percentage of all lookups, or '—' before the
    first lookup.
    """
    lookups = stats.hits + stats.misses
    ratio = f"{stats.hits / lookups * 100:.1f}%" if lookups else "—"
    capacity = str(stats.max_entries) if stats.max_entries else "unbounded"
    return (
        "📊 Rate cache statistics\n"
        f"— Entries: {stats.size} (capacity: {capacity})\n"
        f"— Hits: {stats.hits}\n"
        f"— Misses: {stats.misses}\n"
        f"— Hit ratio: {ratio}\n"
        f"— Evictions: {stats.evictions}"
    )


# -------- errors --------

def format_error(exc: Exception) -> str:
    """
    Map an exception to the message shown to the user.

    Client input errors name the offending value; upstream failures never
    show status codes or payloads; anything that is not a DomainError gets
    the generic message.
    """
    if isinstance(exc, InvalidCurrencyError):
        return f"⚠️ Unsupported currency code: {exc.code}. Send /currencies to see the supported list."
    if isinstance(exc, InvalidAmountError):
        return "⚠️ The amount must be a non-negative number."
    if isinstance(exc, CacheUnavailableError):
        return "ℹ️ The rate cache is disabled on this bot."
    if isinstance(exc, UpstreamClientError):
        return "❌ The exchange rate provider rejected the request. Please contact the bot admin."
    if isinstance(exc, UpstreamServerError):
        return "❌ The exchange rate provider is having problems. Please try again later."
    if isinstance(exc, ProviderUnavailableError):
        if exc.reason == UpstreamFailure.TIMEOUT:
            return "⏱️ The exchange rate provider did not answer in time. Please try again later."
        return "❌ The exchange rate provider is unavailable right now. Please try again later."
    if isinstance(exc, DomainError):
        return f"⚠️ {exc}"
    return GENERIC_ERROR
