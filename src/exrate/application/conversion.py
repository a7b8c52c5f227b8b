# src/exrate/application/conversion.py
"""Conversion calculator: scale resolved rates by a requested amount."""
from __future__ import annotations

from typing import Dict, Mapping, Optional


def convert(rate: float, amount: float) -> float:
    """Plain floating-point product; a zero amount is always 0.0."""
    if amount == 0:
        return 0.0
    return rate * amount


def scale_rates(rates: Mapping[str, float], amount: Optional[float]) -> Dict[str, float]:
    """Apply `convert` to every rate; `amount=None` returns the rates unchanged."""
    if amount is None:
        return dict(rates)
    return {code: convert(rate, amount) for code, rate in rates.items()}
