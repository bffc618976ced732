import pytest

from moviesdb.infrastructure.resilience.backoff import BackoffPolicy, is_retryable_status


@pytest.mark.parametrize("status", [None, 429, 500, 502, 503, 599])
def test_retryable_statuses(status):
    assert is_retryable_status(status)


@pytest.mark.parametrize("status", [200, 400, 401, 403, 404, 422])
def test_non_retryable_statuses(status):
    assert not is_retryable_status(status)


def test_default_schedule_doubles_and_stops_after_three_attempts():
    policy = BackoffPolicy()
    assert policy.next_delay(0, 503) == 1.0
    assert policy.next_delay(1, 503) == 2.0
    assert policy.next_delay(2, 503) is None


def test_delays_are_monotonic_and_capped():
    policy = BackoffPolicy(base_delay=1.0, max_attempts=10, max_delay=5.0)
    delays = [policy.next_delay(attempt, None) for attempt in range(9)]
    assert delays == sorted(delays)
    assert max(delays) == 5.0


@pytest.mark.parametrize("status", [400, 401, 404])
def test_client_errors_stop_immediately(status):
    assert BackoffPolicy().next_delay(0, status) is None


def test_retry_after_hint_extends_delay_up_to_cap():
    policy = BackoffPolicy(base_delay=1.0, max_attempts=3, max_delay=10.0)
    assert policy.next_delay(0, 429, retry_after=4.0) == 4.0
    assert policy.next_delay(0, 429, retry_after=0.5) == 1.0
    assert policy.next_delay(0, 429, retry_after=60.0) == 10.0


def test_single_attempt_policy_never_retries():
    assert BackoffPolicy(max_attempts=1).next_delay(0, 503) is None


@pytest.mark.parametrize("kwargs", [
    {"base_delay": -1.0},
    {"max_attempts": 0},
    {"base_delay": 5.0, "max_delay": 1.0},
])
def test_invalid_policy_rejected(kwargs):
    with pytest.raises(ValueError):
        BackoffPolicy(**kwargs)
