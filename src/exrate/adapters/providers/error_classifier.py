# src/exrate/adapters/providers/error_classifier.py
"""
Error Classifier - Map Transport Outcomes to the Upstream Failure Taxonomy

Pure functions, no state and no I/O. The provider client asks this module
two questions about every failed attempt: what kind of failure it was, and
whether that kind is worth another attempt. Only timeouts are retried.

Files that USE this module:
- exrate.adapters.providers.exchangerate_host (classifies every failed attempt)
- tests.test_error_classifier (unit tests)

Files that this module USES:
- exrate.domain.models (UpstreamFailure)
- exrate.domain.errors (ProviderUnavailableError subclasses)
"""
from typing import Optional

import requests

from exrate.domain.errors import (
    ProviderUnavailableError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamUnreachableError,
)
from exrate.domain.models import UpstreamFailure


def classify_status(status_code: Optional[int]) -> Optional[UpstreamFailure]:
    """
    Classify an HTTP status code.

    Returns:
        SERVER_ERROR for 5xx, CLIENT_ERROR for 4xx, None for anything else
    """
    if status_code is None:
        return None
    if 500 <= status_code <= 599:
        return UpstreamFailure.SERVER_ERROR
    if 400 <= status_code <= 499:
        return UpstreamFailure.CLIENT_ERROR
    return None


def classify_exception(exc: BaseException) -> UpstreamFailure:
    """
    Classify an exception raised while calling the provider.

    Order matters: requests.Timeout subclasses RequestException, and
    requests' JSON decode error subclasses both RequestException and
    ValueError.
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return UpstreamFailure.TIMEOUT
    if isinstance(exc, requests.exceptions.HTTPError):
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
        return classify_status(status) or UpstreamFailure.CONNECTION
    if isinstance(exc, ValueError):
        return UpstreamFailure.MALFORMED
    if isinstance(exc, requests.exceptions.RequestException):
        return UpstreamFailure.CONNECTION
    return UpstreamFailure.CONNECTION


def is_retryable(failure: UpstreamFailure) -> bool:
    """Only transport timeouts are retried; everything else fails fast."""
    return failure is UpstreamFailure.TIMEOUT


def to_provider_error(
    failure: UpstreamFailure, message: str, status_code: Optional[int] = None
) -> ProviderUnavailableError:
    """Build the caller-facing exception for a classified failure."""
    if failure is UpstreamFailure.SERVER_ERROR:
        return UpstreamServerError(message, failure, status_code)
    if failure is UpstreamFailure.CLIENT_ERROR:
        return UpstreamClientError(message, failure, status_code)
    return UpstreamUnreachableError(message, failure, status_code)
