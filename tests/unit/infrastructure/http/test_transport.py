import httpx
import pytest

from moviesdb.domain.models.endpoints import Endpoint, get_descriptor
from moviesdb.domain.models.errors import NetworkError, RequestTimeoutError
from moviesdb.infrastructure.config.credentials import StaticCredentialProvider
from moviesdb.infrastructure.http.transport import API_HOST_HEADER, API_KEY_HEADER, HttpxTransport

BASE_URL = "https://movies.example.test"


def make_transport(handler, **kwargs):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler), follow_redirects=True)
    credentials = StaticCredentialProvider("secret-key", "movies.example.test")
    return HttpxTransport(credentials=credentials, base_url=BASE_URL, client=client, **kwargs), client


@pytest.mark.asyncio
async def test_send_attaches_auth_headers_and_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(200, text='{"results": []}', headers={"Retry-After": "3"})

    transport, client = make_transport(handler)
    descriptor = get_descriptor(Endpoint.TITLES)
    raw = await transport.send(descriptor, "/titles", {"genre": "Drama", "page": "2"})

    assert raw.status_code == 200
    assert raw.body == '{"results": []}'
    assert raw.retry_after == 3.0
    assert seen["url"] == f"{BASE_URL}/titles?genre=Drama&page=2"
    assert seen["headers"][API_KEY_HEADER] == "secret-key"
    assert seen["headers"][API_HOST_HEADER] == "movies.example.test"


@pytest.mark.asyncio
async def test_non_success_status_is_returned_not_raised():
    transport, _ = make_transport(lambda request: httpx.Response(503, text="unavailable"))
    raw = await transport.send(get_descriptor(Endpoint.UTILS_GENRES), "/titles/utils/genres", {})
    assert raw.status_code == 503
    assert raw.body == "unavailable"


@pytest.mark.asyncio
async def test_timeout_maps_to_request_timeout_error():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    transport, _ = make_transport(handler)
    with pytest.raises(RequestTimeoutError):
        await transport.send(get_descriptor(Endpoint.TITLES), "/titles", {}, timeout=0.5)


@pytest.mark.asyncio
async def test_connection_failure_maps_to_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport, _ = make_transport(handler)
    with pytest.raises(NetworkError):
        await transport.send(get_descriptor(Endpoint.TITLES), "/titles", {})


@pytest.mark.asyncio
async def test_redirect_loop_maps_to_network_error():
    def handler(request):
        return httpx.Response(302, headers={"Location": str(request.url)})

    transport, _ = make_transport(handler)
    with pytest.raises(NetworkError) as excinfo:
        await transport.send(get_descriptor(Endpoint.TITLE), "/titles/tt0111161", {})
    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)


@pytest.mark.asyncio
async def test_injected_client_is_not_closed():
    transport, client = make_transport(lambda request: httpx.Response(200, text="{}"))
    await transport.aclose()
    assert not client.is_closed
