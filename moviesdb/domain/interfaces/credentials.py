"""Interface for credential providers.

Supplies the two RapidAPI header values. Implementations must never log or
persist the key.
"""

import abc


class CredentialProvider(abc.ABC):
    """Abstract Base Class returning the authentication header values."""

    @property
    @abc.abstractmethod
    def api_key(self) -> str:
        """Value for the X-RapidAPI-Key header."""
        pass

    @property
    @abc.abstractmethod
    def api_host(self) -> str:
        """Value for the X-RapidAPI-Host header."""
        pass
