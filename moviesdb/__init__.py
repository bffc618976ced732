"""moviesdb: resilient async client for the MoviesDatabase REST API."""

from moviesdb.core.api_client import MoviesApiClient
from moviesdb.domain.models.errors import (
    ErrorKind,
    InvalidParameterError,
    MalformedResponseError,
    MoviesApiError,
    NetworkError,
    ProviderApiError,
    RateLimitedError,
    RequestTimeoutError,
    RetryBudgetExhaustedError,
    ServerError,
)

__version__ = "0.1.0"

__all__ = [
    "MoviesApiClient",
    "ErrorKind",
    "MoviesApiError",
    "InvalidParameterError",
    "RequestTimeoutError",
    "NetworkError",
    "RateLimitedError",
    "ServerError",
    "ProviderApiError",
    "MalformedResponseError",
    "RetryBudgetExhaustedError",
]
