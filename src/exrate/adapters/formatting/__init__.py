# src/exrate/adapters/formatting/__init__.py
"""
Formatting Adapters - Message Formatting

This package contains message formatting adapters for Telegram output.
"""

from exrate.adapters.formatting.formatter import (
    GENERIC_ERROR,
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

__all__ = [
    "GENERIC_ERROR",
    "format_rate",
    "format_rates",
    "format_conversion",
    "format_currencies",
    "format_cache_entries",
    "format_cache_value",
    "format_cache_keys",
    "format_cache_stats",
    "format_error",
]
