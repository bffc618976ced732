"""Credential provider reading the RapidAPI key and host from configuration."""

import logging
from typing import Optional

from moviesdb.domain.interfaces.credentials import CredentialProvider
from moviesdb.domain.models.errors import ConfigurationError
from moviesdb.infrastructure.config import settings

logger = logging.getLogger(__name__)


class StaticCredentialProvider(CredentialProvider):
    """Holds explicitly supplied header values."""

    def __init__(self, api_key: str, api_host: str = "moviesdatabase.p.rapidapi.com"):
        if not api_key:
            raise ConfigurationError("An API key is required.")
        self._api_key = api_key
        self._api_host = api_host

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def api_host(self) -> str:
        return self._api_host

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_key='***', api_host={self._api_host!r})"


class EnvCredentialProvider(StaticCredentialProvider):
    """Reads MOVIESDB_API_KEY / MOVIESDB_API_HOST through the configuration layer."""

    def __init__(self, api_key: Optional[str] = None, api_host: Optional[str] = None):
        settings.load_configuration()
        effective_key = api_key or settings.get_api_key()
        if not effective_key:
            raise ConfigurationError(
                f"API key not provided and {settings.API_KEY} is not set (environment, .env or config file)."
            )
        super().__init__(effective_key, api_host or settings.get_api_host())
        logger.debug(f"Credentials loaded for host {self.api_host}")
