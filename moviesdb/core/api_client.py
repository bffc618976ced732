"""Public facade of the movies API client.

One method per documented endpoint. Single-object endpoints are coroutines
returning the envelope's `results`; list endpoints come as `iter_*` methods
returning lazy async iterators over items, and `list_*` coroutines returning
a single Page. Parameters are validated before anything is sent.

Example:
    async with MoviesApiClient.from_config() as client:
        title = await client.get_title("tt0111161")
        async for item in client.iter_titles(genre="Drama", year=1994, limit=50):
            ...
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from urllib.parse import urlencode

from moviesdb.core.services.paginator import Paginator
from moviesdb.core.services.param_validator import build_path, serialize_query_params
from moviesdb.domain.events.api_events import ApiCallCompleted, EventObserver
from moviesdb.domain.interfaces.cache import CacheService
from moviesdb.domain.interfaces.clock import Clock
from moviesdb.domain.interfaces.rate_limit import RateLimitBudget
from moviesdb.domain.interfaces.transport import Transport
from moviesdb.domain.models.common import CacheKey, Item, QueryParams, WireParams
from moviesdb.domain.models.endpoints import Endpoint, EndpointDescriptor, get_descriptor
from moviesdb.domain.models.envelope import Page
from moviesdb.domain.models.errors import InvalidParameterError
from moviesdb.infrastructure.config.factory import build_client_kwargs
from moviesdb.infrastructure.http.response_validator import ResponseValidator
from moviesdb.infrastructure.resilience.api_retry import ApiRetryService
from moviesdb.infrastructure.resilience.backoff import BackoffPolicy
from moviesdb.infrastructure.resilience.clock import SystemClock

logger = logging.getLogger(__name__)


class MoviesApiClient:
    """Typed, resilient client for the MoviesDatabase API."""

    def __init__(
        self,
        transport: Transport,
        backoff: Optional[BackoffPolicy] = None,
        clock: Optional[Clock] = None,
        rate_limiter: Optional[RateLimitBudget] = None,
        cache: Optional[CacheService] = None,
        cache_ttl: Optional[int] = None,
        observer: Optional[EventObserver] = None,
        timeout: Optional[float] = None,
        validator: Optional[ResponseValidator] = None,
    ):
        """Initializes the client.

        Args:
            transport: Issues single HTTP requests.
            backoff: Retry schedule (3 attempts, 1s base by default).
            clock: Time source for delays; inject a fake one in tests.
            rate_limiter: Optional budget, possibly shared with other clients.
            cache: Optional cache for single-object lookups.
            cache_ttl: TTL handed to the cache on store.
            observer: Optional callable receiving ApiCallCompleted and other events.
            timeout: Per-attempt timeout in seconds (transport default if None).
            validator: Envelope parser.
        """
        self.transport = transport
        self.clock = clock or SystemClock()
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.observer = observer
        self.retry_service = ApiRetryService(
            transport=transport,
            validator=validator,
            backoff=backoff,
            clock=self.clock,
            rate_limiter=rate_limiter,
            observer=observer,
            timeout=timeout,
        )
        self.paginator = Paginator(self.retry_service)

    @classmethod
    def from_config(cls, **overrides: Any) -> "MoviesApiClient":
        """Builds a client from the loaded configuration (env, .env, YAML).

        Keyword overrides are passed to the constructor unchanged.
        """
        kwargs = build_client_kwargs()
        kwargs.update(overrides)
        return cls(**kwargs)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "MoviesApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- Plumbing ---

    def _emit_rejected(self, descriptor: EndpointDescriptor, error: InvalidParameterError) -> None:
        logger.info(f"Rejected call to {descriptor.name}: {error}")
        if self.observer is not None:
            self.observer(ApiCallCompleted(
                endpoint=descriptor.name,
                attempt_count=0,
                final_status=None,
                elapsed=0.0,
                error_kind=error.kind,
            ))

    def _prepare(
        self,
        endpoint: Endpoint,
        path_values: Dict[str, Any],
        params: QueryParams,
    ) -> tuple:
        """Validates everything for one call; returns (descriptor, path, wire params)."""
        descriptor = get_descriptor(endpoint)
        try:
            path = build_path(descriptor, **path_values)
            wire = serialize_query_params(descriptor, params)
        except InvalidParameterError as e:
            self._emit_rejected(descriptor, e)
            raise
        return descriptor, path, wire

    @staticmethod
    def _cache_key(descriptor: EndpointDescriptor, path: str, wire: WireParams) -> CacheKey:
        return CacheKey(f"{descriptor.name}:{path}?{urlencode(sorted(wire.items()))}")

    async def _single(
        self,
        endpoint: Endpoint,
        path_values: Optional[Dict[str, Any]] = None,
        params: Optional[QueryParams] = None,
    ) -> Any:
        descriptor, path, wire = self._prepare(endpoint, path_values or {}, params or {})

        cache_key = None
        if self.cache is not None:
            cache_key = self._cache_key(descriptor, path, wire)
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {cache_key}")
                if self.observer is not None:
                    self.observer(ApiCallCompleted(
                        endpoint=descriptor.name, attempt_count=0, final_status=None,
                        elapsed=0.0, from_cache=True,
                    ))
                return cached

        result = await self.retry_service.execute(descriptor, path, wire)
        results = result.envelope.results
        if cache_key is not None and results is not None:
            await self.cache.set(cache_key, results, ttl=self.cache_ttl)
        return results

    async def _page(
        self,
        endpoint: Endpoint,
        path_values: Optional[Dict[str, Any]] = None,
        params: Optional[QueryParams] = None,
    ) -> Page:
        params = dict(params or {})
        page = params.pop("page", None)
        if page is None:
            page = 1
        descriptor, path, _ = self._prepare(endpoint, path_values or {}, {**params, "page": page})
        return await self.paginator.fetch_page(descriptor, path, params, page)

    def _iterate(
        self,
        endpoint: Endpoint,
        path_values: Optional[Dict[str, Any]] = None,
        params: Optional[QueryParams] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[Item]:
        # Validation happens here, eagerly, so bad input fails before iteration starts.
        params = dict(params or {})
        start_page = params.pop("page", None)
        if start_page is None:
            start_page = 1
        descriptor, path, _ = self._prepare(endpoint, path_values or {}, {**params, "page": start_page})
        if max_pages is not None and (isinstance(max_pages, bool) or not isinstance(max_pages, int) or max_pages < 1):
            error = InvalidParameterError("max_pages", max_pages, "expected an integer >= 1")
            self._emit_rejected(descriptor, error)
            raise error
        return self.paginator.iterate(descriptor, path, params, start_page=start_page, max_pages=max_pages)

    # --- Titles ---

    def iter_titles(self, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        """Iterates /titles (filters: genre, year, startYear, endYear, titleType, list, sort, limit, info)."""
        return self._iterate(Endpoint.TITLES, params=params, max_pages=max_pages)

    async def list_titles(self, **params: Any) -> Page:
        """Fetches one page of /titles (`page` defaults to 1)."""
        return await self._page(Endpoint.TITLES, params=params)

    async def get_titles_by_ids(self, ids: Sequence[str], **params: Any) -> List[Item]:
        """Fetches several titles at once (`list`, `info` accepted)."""
        results = await self._single(Endpoint.TITLES_BY_IDS, params={**params, "idsList": ids})
        return list(results or [])

    async def get_title(self, title_id: str, info: Optional[str] = None) -> Optional[Item]:
        """Fetches one title; None when the provider has no such title."""
        return await self._single(Endpoint.TITLE, {"title_id": title_id}, {"info": info})

    async def get_title_ratings(self, title_id: str) -> Optional[Item]:
        """Fetches averageRating/numVotes for a title; None when unrated."""
        return await self._single(Endpoint.TITLE_RATINGS, {"title_id": title_id})

    def iter_upcoming(self, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        return self._iterate(Endpoint.UPCOMING, params=params, max_pages=max_pages)

    async def list_upcoming(self, **params: Any) -> Page:
        return await self._page(Endpoint.UPCOMING, params=params)

    # --- Series ---

    async def get_series_episodes(self, series_id: str) -> List[Item]:
        """Lists every episode id (tconst, seasonNumber, episodeNumber) of a series."""
        results = await self._single(Endpoint.SERIES_EPISODES, {"title_id": series_id})
        return list(results or [])

    async def get_seasons(self, series_id: str) -> Any:
        """Returns the provider's season summary for a series, unchanged."""
        return await self._single(Endpoint.SERIES_SEASONS, {"title_id": series_id})

    async def get_season_episodes(self, series_id: str, season: int) -> List[Item]:
        results = await self._single(Endpoint.SEASON_EPISODES, {"title_id": series_id, "season": season})
        return list(results or [])

    async def get_episode(self, episode_id: str, info: Optional[str] = None) -> Optional[Item]:
        return await self._single(Endpoint.EPISODE, {"title_id": episode_id}, {"info": info})

    # --- Search ---

    def iter_search_keyword(self, keyword: str, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        return self._iterate(Endpoint.SEARCH_KEYWORD, {"keyword": keyword}, params, max_pages)

    async def list_search_keyword(self, keyword: str, **params: Any) -> Page:
        return await self._page(Endpoint.SEARCH_KEYWORD, {"keyword": keyword}, params)

    def iter_search_title(self, title: str, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        """Searches by (partial) title; pass exact=True for exact matches."""
        return self._iterate(Endpoint.SEARCH_TITLE, {"title": title}, params, max_pages)

    async def list_search_title(self, title: str, **params: Any) -> Page:
        return await self._page(Endpoint.SEARCH_TITLE, {"title": title}, params)

    def iter_search_akas(self, aka: str, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        """Searches by alternative ("also known as") title; case-sensitive on the provider side."""
        return self._iterate(Endpoint.SEARCH_AKAS, {"aka": aka}, params, max_pages)

    async def list_search_akas(self, aka: str, **params: Any) -> Page:
        return await self._page(Endpoint.SEARCH_AKAS, {"aka": aka}, params)

    # --- Actors ---

    def iter_actors(self, max_pages: Optional[int] = None, **params: Any) -> AsyncIterator[Item]:
        return self._iterate(Endpoint.ACTORS, params=params, max_pages=max_pages)

    async def list_actors(self, **params: Any) -> Page:
        return await self._page(Endpoint.ACTORS, params=params)

    async def get_actor(self, actor_id: str) -> Optional[Item]:
        return await self._single(Endpoint.ACTOR, {"actor_id": actor_id})

    # --- Utils ---

    async def get_title_types(self) -> List[Any]:
        return list(await self._single(Endpoint.UTILS_TITLE_TYPES) or [])

    async def get_genres(self) -> List[Any]:
        return list(await self._single(Endpoint.UTILS_GENRES) or [])

    async def get_lists(self) -> List[Any]:
        return list(await self._single(Endpoint.UTILS_LISTS) or [])
