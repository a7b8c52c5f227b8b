"""
Domain Layer - Pure Business Objects

This package contains domain models and the error taxonomy.
No dependencies on infrastructure or external systems.
"""

from exrate.domain.models import (
    CacheStatistics,
    Currency,
    RateKey,
    UpstreamFailure,
    normalize_code,
)
from exrate.domain.errors import (
    CacheUnavailableError,
    DomainError,
    InvalidAmountError,
    InvalidCurrencyError,
    ProviderUnavailableError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamUnreachableError,
)

__all__ = [
    "Currency",
    "RateKey",
    "CacheStatistics",
    "UpstreamFailure",
    "normalize_code",
    "DomainError",
    "InvalidCurrencyError",
    "InvalidAmountError",
    "CacheUnavailableError",
    "ProviderUnavailableError",
    "UpstreamUnreachableError",
    "UpstreamServerError",
    "UpstreamClientError",
]
