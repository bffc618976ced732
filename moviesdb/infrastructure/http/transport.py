"""Concrete implementation of the Transport interface using httpx.

Hides httpx behind the domain contract: one request per call, the RapidAPI
authentication headers always attached, per-attempt timeouts, and httpx
exceptions translated into the client's error taxonomy.
"""

import logging
from typing import Mapping, Optional

import httpx

from moviesdb.domain.interfaces.credentials import CredentialProvider
from moviesdb.domain.interfaces.transport import Transport
from moviesdb.domain.models.endpoints import EndpointDescriptor
from moviesdb.domain.models.envelope import RawResponse
from moviesdb.domain.models.errors import NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://moviesdatabase.p.rapidapi.com"
DEFAULT_TIMEOUT_SECONDS = 10.0
API_KEY_HEADER = "X-RapidAPI-Key"
API_HOST_HEADER = "X-RapidAPI-Host"


class HttpxTransport(Transport):
    """Issues single GET requests against the movies API with httpx."""

    def __init__(
        self,
        credentials: CredentialProvider,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: Optional[str] = None,
    ):
        """Initializes the transport.

        Args:
            credentials: Source of the two RapidAPI header values.
            base_url: Scheme and host of the API.
            timeout: Default per-attempt timeout in seconds.
            client: Pre-built httpx client (tests inject one with a MockTransport).
            user_agent: Optional User-Agent header value.
        """
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=True,
        )
        logger.debug(f"HttpxTransport ready for {self.base_url} (timeout={timeout}s)")

    def _auth_headers(self) -> dict:
        return {
            API_KEY_HEADER: self.credentials.api_key,
            API_HOST_HEADER: self.credentials.api_host,
        }

    async def send(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Mapping[str, str],
        timeout: Optional[float] = None,
    ) -> RawResponse:
        effective_timeout = self.timeout if timeout is None else timeout
        url = f"{self.base_url}{path}"
        logger.debug(f"{descriptor.method} {path} params={dict(params)}")
        try:
            response = await self._client.request(
                descriptor.method,
                url,
                params=dict(params),
                headers=self._auth_headers(),
                timeout=httpx.Timeout(effective_timeout),
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"{descriptor.name}: no response within {effective_timeout}s ({type(e).__name__})"
            ) from e
        except httpx.TransportError as e:
            raise NetworkError(f"{descriptor.name}: transport failure ({type(e).__name__}: {e})") from e
        except httpx.RequestError as e:
            # TooManyRedirects, DecodingError
            raise NetworkError(f"{descriptor.name}: request failed ({type(e).__name__}: {e})") from e

        return RawResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
