import pytest

from moviesdb.domain.events.api_events import ApiCallCompleted, ApiCallDeferred, RetryScheduled
from moviesdb.domain.models.endpoints import Endpoint, get_descriptor
from moviesdb.domain.models.errors import (
    ErrorKind, MalformedResponseError, ProviderApiError, RequestTimeoutError, RetryBudgetExhaustedError,
)
from moviesdb.infrastructure.resilience.api_retry import ApiRetryService
from moviesdb.infrastructure.resilience.backoff import BackoffPolicy
from moviesdb.infrastructure.resilience.rate_limiter import RateLimiter
from tests.fakes import (
    FakeClock, ScriptedTransport, error_response, json_response, results_response,
)

GENRES = get_descriptor(Endpoint.UTILS_GENRES)


def make_service(transport, clock=None, events=None, **kwargs):
    return ApiRetryService(
        transport=transport,
        backoff=kwargs.pop("backoff", BackoffPolicy()),
        clock=clock or FakeClock(),
        observer=events.append if events is not None else None,
        **kwargs,
    )


async def run(service, descriptor=GENRES, path="/titles/utils/genres", params=None):
    return await service.execute(descriptor, path, params or {})


@pytest.mark.asyncio
async def test_success_on_first_attempt():
    transport = ScriptedTransport(results_response(["Action"]))
    events = []
    result = await run(make_service(transport, events=events))

    assert result.envelope.results == ["Action"]
    assert result.attempts == 1
    assert result.status_code == 200
    completed = [e for e in events if isinstance(e, ApiCallCompleted)]
    assert len(completed) == 1
    assert completed[0].succeeded
    assert completed[0].attempt_count == 1


@pytest.mark.asyncio
async def test_rate_limited_twice_then_success_waits_one_then_two_seconds():
    transport = ScriptedTransport(
        json_response({"message": "Too many requests"}, status_code=429),
        json_response({"message": "Too many requests"}, status_code=429),
        results_response(["Drama"]),
    )
    clock = FakeClock()
    events = []
    result = await run(make_service(transport, clock=clock, events=events))

    assert result.envelope.results == ["Drama"]
    assert result.attempts == 3
    assert len(transport.calls) == 3
    assert clock.sleeps == [1.0, 2.0]
    retries = [e for e in events if isinstance(e, RetryScheduled)]
    assert [r.attempt_number for r in retries] == [1, 2]
    assert all(r.error_kind is ErrorKind.RATE_LIMITED for r in retries)
    assert events[-1].attempt_count == 3
    assert events[-1].elapsed == pytest.approx(3.0)


@pytest.mark.asyncio
async def test_persistent_server_errors_exhaust_the_budget():
    transport = ScriptedTransport(*[json_response({}, status_code=503) for _ in range(3)])
    clock = FakeClock()
    events = []
    with pytest.raises(RetryBudgetExhaustedError) as excinfo:
        await run(make_service(transport, clock=clock, events=events))

    assert excinfo.value.attempts == 3
    assert excinfo.value.status_code == 503
    assert excinfo.value.last_error.kind is ErrorKind.SERVER_ERROR
    assert len(transport.calls) == 3
    assert clock.sleeps == [1.0, 2.0]
    assert events[-1].error_kind is ErrorKind.RETRY_BUDGET_EXHAUSTED


@pytest.mark.asyncio
async def test_timeouts_are_retried():
    transport = ScriptedTransport(RequestTimeoutError("slow"), results_response(["Action"]))
    clock = FakeClock()
    result = await run(make_service(transport, clock=clock))
    assert result.attempts == 2
    assert clock.sleeps == [1.0]


@pytest.mark.asyncio
async def test_retry_after_header_is_honoured():
    transport = ScriptedTransport(
        json_response({}, status_code=429, headers={"retry-after": "5"}),
        results_response([]),
    )
    clock = FakeClock()
    await run(make_service(transport, clock=clock))
    assert clock.sleeps == [5.0]


@pytest.mark.asyncio
async def test_error_envelope_with_200_is_not_retried():
    transport = ScriptedTransport(error_response("NOT_FOUND", "Nothing here"))
    clock = FakeClock()
    with pytest.raises(ProviderApiError) as excinfo:
        await run(make_service(transport, clock=clock))
    assert excinfo.value.code == "NOT_FOUND"
    assert excinfo.value.attempts == 1
    assert clock.sleeps == []
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_malformed_body_is_not_retried():
    transport = ScriptedTransport(json_response({"unexpected": True}))
    events = []
    with pytest.raises(MalformedResponseError):
        await run(make_service(transport, events=events))
    assert len(transport.calls) == 1
    assert events[-1].error_kind is ErrorKind.MALFORMED_RESPONSE
    assert events[-1].final_status == 200


@pytest.mark.parametrize("status", [400, 401, 404])
@pytest.mark.asyncio
async def test_client_error_statuses_are_terminal(status):
    transport = ScriptedTransport(json_response({"message": "You are not subscribed"}, status_code=status))
    with pytest.raises(ProviderApiError) as excinfo:
        await run(make_service(transport))
    assert excinfo.value.code == f"HTTP_{status}"
    assert excinfo.value.message == "You are not subscribed"
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_client_error_status_with_error_envelope_keeps_provider_code():
    transport = ScriptedTransport(error_response("BAD_PARAM", "limit too large", status_code=400))
    with pytest.raises(ProviderApiError) as excinfo:
        await run(make_service(transport))
    assert excinfo.value.code == "BAD_PARAM"
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_rate_limit_budget_defers_attempts():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, time_window=1.0, clock=clock)
    transport = ScriptedTransport(results_response([]), results_response([]))
    events = []
    service = make_service(transport, clock=clock, events=events, rate_limiter=limiter)

    await service.execute(GENRES, "/titles/utils/genres", {})
    await service.execute(GENRES, "/titles/utils/genres", {})

    deferred = [e for e in events if isinstance(e, ApiCallDeferred)]
    assert len(deferred) == 1
    assert deferred[0].wait_time_seconds == pytest.approx(1.0)
    assert clock.sleeps == [pytest.approx(1.0)]


@pytest.mark.asyncio
async def test_timeout_is_passed_to_transport():
    transport = ScriptedTransport(results_response([]))
    await run(make_service(transport, timeout=2.5))
    assert transport.calls[0]["timeout"] == 2.5
