"""Interface for the HTTP transport.

A transport performs exactly one request per call and never retries.
"""

import abc
from typing import Mapping, Optional

from ..models.endpoints import EndpointDescriptor
from ..models.envelope import RawResponse


class Transport(abc.ABC):
    """Abstract Base Class for issuing a single HTTP request."""

    @abc.abstractmethod
    async def send(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Mapping[str, str],
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """Sends one request and returns what came back, whatever the status.

        Args:
            descriptor: Endpoint being called (method, identity).
            path: Path already filled from the descriptor's template.
            params: Query string values.
            timeout: Per-attempt timeout in seconds (transport default if None).

        Returns:
            The raw status code, body and headers.

        Raises:
            RequestTimeoutError: If the attempt exceeded its timeout.
            NetworkError: If no HTTP response was received.
        """
        pass

    async def aclose(self) -> None:
        """Releases underlying connections."""
        return None
