"""Builds client collaborators from configuration."""

import logging
from typing import Any, Dict, Optional

from moviesdb.domain.interfaces.credentials import CredentialProvider
from moviesdb.infrastructure.config import settings
from moviesdb.infrastructure.config.credentials import EnvCredentialProvider
from moviesdb.infrastructure.http.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, HttpxTransport
from moviesdb.infrastructure.resilience.backoff import (
    DEFAULT_BASE_DELAY_SECONDS, DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_DELAY_SECONDS, BackoffPolicy,
)
from moviesdb.infrastructure.resilience.rate_limiter import DEFAULT_TIME_WINDOW_SECONDS, RateLimiter

logger = logging.getLogger(__name__)


def build_backoff_policy() -> BackoffPolicy:
    return BackoffPolicy(
        base_delay=settings.get_float(settings.BACKOFF_BASE_SECONDS, DEFAULT_BASE_DELAY_SECONDS),
        max_attempts=settings.get_int(settings.MAX_ATTEMPTS, DEFAULT_MAX_ATTEMPTS),
        max_delay=settings.get_float(settings.BACKOFF_MAX_DELAY_SECONDS, DEFAULT_MAX_DELAY_SECONDS),
    )


def build_rate_limiter() -> Optional[RateLimiter]:
    """Returns a budget only when MOVIESDB_RATE_LIMIT_REQUESTS is configured."""
    max_requests = settings.get_int(settings.RATE_LIMIT_REQUESTS, None)
    if not max_requests:
        return None
    return RateLimiter(
        max_requests=max_requests,
        time_window=settings.get_float(settings.RATE_LIMIT_WINDOW_SECONDS, DEFAULT_TIME_WINDOW_SECONDS),
    )


def build_client_kwargs(credentials: Optional[CredentialProvider] = None) -> Dict[str, Any]:
    """Loads configuration and returns constructor arguments for MoviesApiClient.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    settings.load_configuration()
    credentials = credentials or EnvCredentialProvider()
    timeout = settings.get_float(settings.TIMEOUT_SECONDS, DEFAULT_TIMEOUT_SECONDS)
    transport = HttpxTransport(
        credentials=credentials,
        base_url=str(settings.get_config(settings.BASE_URL, DEFAULT_BASE_URL)),
        timeout=timeout,
    )
    kwargs: Dict[str, Any] = {
        "transport": transport,
        "backoff": build_backoff_policy(),
        "rate_limiter": build_rate_limiter(),
        "timeout": timeout,
    }
    logger.debug(
        f"Client configuration: base_url={transport.base_url}, timeout={timeout}s, "
        f"max_attempts={kwargs['backoff'].max_attempts}, rate_limiter={'on' if kwargs['rate_limiter'] else 'off'}"
    )
    return kwargs
