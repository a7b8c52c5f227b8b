"""
exrate - Cached Currency Exchange Rate Service

Resolves exchange rates and conversions against an upstream rate provider,
answering from an in-memory rate cache where possible and validating codes
against a locally maintained catalog of supported currencies.
"""

__version__ = "1.0.0"
