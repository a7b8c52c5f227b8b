# src/exrate/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines the error taxonomy surfaced to callers of the rate
resolution pipeline. The caller-facing layer maps each family to its own
user-visible message (client input error, gateway error, cache disabled).

Files that USE this module:
- exrate.adapters.providers.* (raise ProviderUnavailableError subclasses)
- exrate.application.* (raise InvalidCurrencyError, CacheUnavailableError)
- exrate.adapters.formatting.formatter (renders errors for users)
"""
from __future__ import annotations

from typing import Optional

from exrate.domain.models import UpstreamFailure


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidCurrencyError(DomainError):
    """Raised when a requested currency code is not in the supported catalog."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invalid currency code {code!r} provided")


class InvalidAmountError(DomainError):
    """Raised when a conversion amount is negative or not a number."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Amount must be non-negative, got {amount!r}")


class CacheUnavailableError(DomainError):
    """Raised when a cache operation is invoked while the rate cache is disabled."""

    def __init__(self, message: str = "Rate cache is not available"):
        super().__init__(message)


class ProviderUnavailableError(DomainError):
    """
    Raised when the upstream rate provider could not answer.

    All upstream failures share this kind; `reason` carries the sub-reason
    and `status_code` the HTTP status when one was received.
    """

    def __init__(
        self,
        message: str,
        reason: UpstreamFailure,
        status_code: Optional[int] = None,
    ):
        self.reason = reason
        self.status_code = status_code
        super().__init__(message)


class UpstreamUnreachableError(ProviderUnavailableError):
    """Connection failure, malformed payload, or timeouts on every attempt."""
    pass


class UpstreamServerError(ProviderUnavailableError):
    """Provider answered with a 5xx status."""
    pass


class UpstreamClientError(ProviderUnavailableError):
    """Provider answered with a 4xx status."""
    pass
