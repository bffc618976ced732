import pytest

from moviesdb.domain.models.endpoints import (
    ENDPOINTS, GENRES, Endpoint, ResultShape, get_descriptor,
)
from moviesdb.domain.models.errors import (
    ErrorKind, InvalidParameterError, MalformedResponseError, ProviderApiError,
    RateLimitedError, RetryBudgetExhaustedError, ServerError,
)


def test_every_endpoint_is_described_once():
    assert set(ENDPOINTS) == set(Endpoint)
    paths = [descriptor.path_template for descriptor in ENDPOINTS.values()]
    assert len(paths) == len(set(paths))


@pytest.mark.parametrize("endpoint", [
    Endpoint.TITLES, Endpoint.UPCOMING, Endpoint.SEARCH_KEYWORD,
    Endpoint.SEARCH_TITLE, Endpoint.SEARCH_AKAS, Endpoint.ACTORS,
])
def test_paginated_endpoints_accept_page_and_limit(endpoint):
    descriptor = get_descriptor(endpoint)
    assert descriptor.paginated
    assert {"page", "limit"} <= descriptor.allowed_params
    assert descriptor.result_shape is ResultShape.LIST


def test_single_object_endpoints_are_not_paginated():
    for endpoint in (Endpoint.TITLE, Endpoint.TITLE_RATINGS, Endpoint.ACTOR, Endpoint.EPISODE):
        descriptor = get_descriptor(endpoint)
        assert not descriptor.paginated
        assert "page" not in descriptor.allowed_params


def test_build_path_quotes_text_segments():
    descriptor = get_descriptor(Endpoint.SEARCH_TITLE)
    assert descriptor.build_path(title="Star Wars/IV") == "/titles/search/title/Star%20Wars%2FIV"


def test_build_path_season_episodes():
    descriptor = get_descriptor(Endpoint.SEASON_EPISODES)
    assert descriptor.build_path(title_id="tt0944947", season=2) == "/titles/series/tt0944947/2"


def test_genres_are_capitalized():
    assert "Action" in GENRES
    assert "action" not in GENRES


def test_error_kinds_and_categories():
    assert InvalidParameterError("genre", "action", "bad").is_caller_error()
    assert isinstance(InvalidParameterError("genre", "action", "bad"), ValueError)
    assert RateLimitedError("slow down").retryable
    assert ServerError("boom", status_code=503).is_service_unavailable()
    provider = ProviderApiError(code="NOT_FOUND", message="no such title", status_code=200)
    assert provider.is_business_error()
    assert not provider.retryable
    assert str(provider) == "NOT_FOUND: no such title"
    assert MalformedResponseError("bad body").kind is ErrorKind.MALFORMED_RESPONSE


def test_retry_budget_exhausted_keeps_last_error():
    last = ServerError("boom", status_code=502, body="oops")
    error = RetryBudgetExhaustedError(last, attempts=3)
    assert error.last_error is last
    assert error.status_code == 502
    assert error.attempts == 3
    assert error.is_service_unavailable()
    assert not error.retryable
