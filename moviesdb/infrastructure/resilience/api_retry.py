"""Service for executing API calls with automatic retries.

Implements the per-request retry state machine:

    ATTEMPT -> SUCCESS
    ATTEMPT -> RETRYABLE_FAILURE -> WAIT -> ATTEMPT
    ATTEMPT -> TERMINAL_FAILURE

Timeouts, network failures, 429 and 5xx responses are retried under the
BackoffPolicy; everything else fails immediately. Each attempt first reserves
a slot from the optional shared rate-limit budget.
"""

import enum
import json
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from moviesdb.domain.events.api_events import (
    ApiCallCompleted, ApiCallDeferred, DomainEvent, EventObserver, RetryScheduled,
)
from moviesdb.domain.interfaces.clock import Clock
from moviesdb.domain.interfaces.rate_limit import RateLimitBudget
from moviesdb.domain.interfaces.transport import Transport
from moviesdb.domain.models.endpoints import EndpointDescriptor
from moviesdb.domain.models.envelope import Envelope, RawResponse
from moviesdb.domain.models.errors import (
    MalformedResponseError, MoviesApiError, ProviderApiError, RateLimitedError,
    RetryBudgetExhaustedError, ServerError,
)
from moviesdb.infrastructure.http.response_validator import ResponseValidator
from moviesdb.infrastructure.resilience.backoff import TOO_MANY_REQUESTS, BackoffPolicy
from moviesdb.infrastructure.resilience.clock import SystemClock

logger = logging.getLogger(__name__)


class RetryPhase(enum.Enum):
    ATTEMPT = "attempt"
    WAIT = "wait"
    SUCCESS = "success"
    TERMINAL_FAILURE = "terminal_failure"


@dataclass
class RetryState:
    """Mutable state of one logical request; never shared between requests."""
    attempt: int = 0
    last_status: Optional[int] = None
    next_delay: Optional[float] = None
    phase: RetryPhase = RetryPhase.ATTEMPT


@dataclass(frozen=True)
class CallResult:
    """A validated envelope plus how it was obtained."""
    envelope: Envelope
    attempts: int
    status_code: int


class ApiRetryService:
    """Handles request execution with rate limiting, retries and outcome events."""

    def __init__(
        self,
        transport: Transport,
        validator: Optional[ResponseValidator] = None,
        backoff: Optional[BackoffPolicy] = None,
        clock: Optional[Clock] = None,
        rate_limiter: Optional[RateLimitBudget] = None,
        observer: Optional[EventObserver] = None,
        timeout: Optional[float] = None,
    ):
        """Initializes the ApiRetryService.

        Args:
            transport: Issues the individual attempts.
            validator: Parses bodies into envelopes.
            backoff: Decides retry delays.
            clock: Time source for delays and elapsed time.
            rate_limiter: Optional shared budget consulted before every attempt.
            observer: Optional callable receiving domain events.
            timeout: Per-attempt timeout passed to the transport (its default if None).
        """
        self.transport = transport
        self.validator = validator or ResponseValidator()
        self.backoff = backoff or BackoffPolicy()
        self.clock = clock or SystemClock()
        self.rate_limiter = rate_limiter
        self.observer = observer
        self.timeout = timeout
        logger.debug(
            f"ApiRetryService initialized: max_attempts={self.backoff.max_attempts}, "
            f"base_delay={self.backoff.base_delay}s, max_delay={self.backoff.max_delay}s, "
            f"rate_limiter={'yes' if rate_limiter else 'no'}"
        )

    def dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self.observer is not None:
            self.observer(event)

    async def execute(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Mapping[str, str],
    ) -> CallResult:
        """Runs one logical request to completion.

        Args:
            descriptor: Endpoint being called.
            path: Filled path for the request.
            params: Serialized query parameters.

        Returns:
            The validated envelope with attempt bookkeeping.

        Raises:
            RetryBudgetExhaustedError: Retryable failures persisted until the policy stopped.
            MoviesApiError: Any non-retryable failure, unchanged.
        """
        state = RetryState()
        started = self.clock.monotonic()
        last_error: Optional[MoviesApiError] = None
        result: Optional[CallResult] = None

        while state.phase not in (RetryPhase.SUCCESS, RetryPhase.TERMINAL_FAILURE):
            if state.phase is RetryPhase.WAIT:
                await self.clock.sleep(state.next_delay or 0.0)
                state.attempt += 1
                state.phase = RetryPhase.ATTEMPT
                continue

            try:
                result = await self._attempt(descriptor, path, params, state)
                state.phase = RetryPhase.SUCCESS
            except MoviesApiError as e:
                last_error = e
                if not e.retryable:
                    logger.error(f"Non-retryable error calling {descriptor.name} on attempt {state.attempt + 1}: {e}")
                    state.phase = RetryPhase.TERMINAL_FAILURE
                    continue
                state.next_delay = self.backoff.next_delay(
                    state.attempt, state.last_status, getattr(e, "retry_after", None)
                )
                if state.next_delay is None:
                    logger.error(
                        f"Retries exhausted for {descriptor.name} after {state.attempt + 1} attempt(s). Last error: {e}"
                    )
                    last_error = RetryBudgetExhaustedError(e, attempts=state.attempt + 1)
                    state.phase = RetryPhase.TERMINAL_FAILURE
                    continue
                logger.warning(
                    f"Retryable error calling {descriptor.name} on attempt "
                    f"{state.attempt + 1}/{self.backoff.max_attempts}: {type(e).__name__}. "
                    f"Waiting {state.next_delay:.2f}s..."
                )
                self.dispatch_event(RetryScheduled(
                    endpoint=descriptor.name,
                    attempt_number=state.attempt + 1,
                    delay_seconds=state.next_delay,
                    error_kind=e.kind,
                    last_status=state.last_status,
                ))
                state.phase = RetryPhase.WAIT

        attempts = state.attempt + 1
        self.dispatch_event(ApiCallCompleted(
            endpoint=descriptor.name,
            attempt_count=attempts,
            final_status=state.last_status,
            elapsed=self.clock.monotonic() - started,
            error_kind=None if state.phase is RetryPhase.SUCCESS else last_error.kind,
        ))
        if state.phase is RetryPhase.SUCCESS:
            return result
        last_error.attempts = attempts
        raise last_error

    async def _attempt(
        self,
        descriptor: EndpointDescriptor,
        path: str,
        params: Mapping[str, str],
        state: RetryState,
    ) -> CallResult:
        """One pass through the ATTEMPT state."""
        state.last_status = None
        await self._reserve_budget(descriptor)
        response = await self.transport.send(descriptor, path, params, timeout=self.timeout)
        state.last_status = response.status_code
        envelope = self._classify(descriptor, response)
        return CallResult(envelope=envelope, attempts=state.attempt + 1, status_code=response.status_code)

    async def _reserve_budget(self, descriptor: EndpointDescriptor) -> None:
        if self.rate_limiter is None:
            return
        while True:
            wait_time = await self.rate_limiter.reserve(1)
            if wait_time <= 0:
                return
            self.dispatch_event(ApiCallDeferred(endpoint=descriptor.name, wait_time_seconds=wait_time))
            logger.debug(f"Rate limit budget exhausted for {descriptor.name}; waiting {wait_time:.2f}s")
            await self.clock.sleep(wait_time)

    def _classify(self, descriptor: EndpointDescriptor, response: RawResponse) -> Envelope:
        """Turns a raw response into an envelope or the matching error."""
        status = response.status_code
        if status == TOO_MANY_REQUESTS:
            raise RateLimitedError(
                f"{descriptor.name}: rate limited (429)",
                status_code=status,
                body=response.body,
                retry_after=response.retry_after,
            )
        if 500 <= status <= 599:
            raise ServerError(f"{descriptor.name}: server error ({status})", status_code=status, body=response.body)
        if 200 <= status <= 299:
            return self.validator.parse(response.body, descriptor, status_code=status)

        # Other statuses are never retried; surface the provider envelope when there is one.
        try:
            self.validator.parse(response.body, None, status_code=status)
        except ProviderApiError:
            raise
        except MalformedResponseError:
            pass
        raise ProviderApiError(
            code=f"HTTP_{status}",
            message=_extract_message(response.body) or f"Unexpected HTTP status {status}",
            status_code=status,
            body=response.body,
        )


def _extract_message(body: str) -> Optional[str]:
    """Pulls a top-level `message` out of non-envelope error bodies (gateway errors)."""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return body.strip()[:200] or None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return None
