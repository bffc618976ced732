"""Lazy traversal of paginated endpoints.

A session requests page N, hands out its items, and only requests page N+1
when the consumer asks for more and the previous envelope carried `next`.
At most one page is in flight; nothing is fetched ahead. The `next` value is
kept as an opaque cursor: it signals continuation, while the following request
simply asks for the next page number.
"""

import logging
from typing import AsyncIterator, Optional

from moviesdb.domain.models.common import Item, QueryParams
from moviesdb.domain.models.endpoints import EndpointDescriptor
from moviesdb.domain.models.envelope import Page
from moviesdb.domain.models.errors import InvalidParameterError
from moviesdb.core.services.param_validator import serialize_query_params
from moviesdb.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


class Paginator:
    """Drives repeated requests following page/next/entries semantics."""

    def __init__(self, retry_service: ApiRetryService):
        self.retry_service = retry_service

    async def fetch_page(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: QueryParams,
        page: int = 1,
    ) -> Page:
        """Fetches and validates a single page."""
        wire = serialize_query_params(descriptor, {**params, "page": page})
        result = await self.retry_service.execute(descriptor, path, wire)
        envelope = result.envelope
        items = list(envelope.results or [])
        number = envelope.page if envelope.page is not None else page
        logger.debug(
            f"{descriptor.name}: page {number} with {len(items)} item(s), "
            f"entries={envelope.entries}, next={'yes' if envelope.has_next else 'no'}"
        )
        return Page(items=items, number=number, next=envelope.next, entries=envelope.entries)

    async def iterate_pages(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Optional[QueryParams] = None,
        start_page: int = 1,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[Page]:
        """Yields pages in increasing order until `next` disappears.

        Args:
            descriptor: A paginated endpoint.
            path: Filled path for the endpoint.
            params: Query parameters (without `page`; use start_page).
            start_page: First page to request.
            max_pages: Optional cap on the number of pages requested.
        """
        params = dict(params or {})
        if "page" in params:
            start_page = params.pop("page")
        if not descriptor.paginated:
            raise InvalidParameterError("endpoint", descriptor.name, "endpoint is not paginated")
        if isinstance(start_page, bool) or not isinstance(start_page, int) or start_page < 1:
            raise InvalidParameterError("page", start_page, "expected an integer >= 1")
        if max_pages is not None and max_pages < 1:
            raise InvalidParameterError("max_pages", max_pages, "expected an integer >= 1")

        cursor = start_page
        fetched = 0
        while True:
            page = await self.fetch_page(descriptor, path, params, cursor)
            fetched += 1
            yield page
            if not page.has_next:
                logger.debug(f"{descriptor.name}: no next page after page {page.number}")
                return
            if max_pages is not None and fetched >= max_pages:
                logger.debug(f"{descriptor.name}: stopping after {fetched} page(s) (max_pages)")
                return
            cursor = max(cursor, page.number) + 1

    async def iterate(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Optional[QueryParams] = None,
        start_page: int = 1,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[Item]:
        """Yields every item of every page, in order, as one continuous sequence."""
        async for page in self.iterate_pages(descriptor, path, params, start_page, max_pages):
            for item in page.items:
                yield item
