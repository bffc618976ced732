"""Exponential backoff policy.

Decides how long to wait before retrying a failed attempt. The policy is a
pure function of its inputs so delay schedules can be asserted directly.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0
DEFAULT_MAX_DELAY_SECONDS = 30.0
TOO_MANY_REQUESTS = 429


def is_retryable_status(status_code: Optional[int]) -> bool:
    """429 and 5xx are retryable; None stands for "no response" (timeout, network)."""
    if status_code is None:
        return True
    return status_code == TOO_MANY_REQUESTS or 500 <= status_code <= 599


@dataclass(frozen=True)
class BackoffPolicy:
    """Deterministic exponential schedule: delay = base * 2 ** attempt.

    Attributes:
        base_delay: Delay before the first retry, in seconds.
        max_attempts: Total number of attempts allowed (first try included).
        max_delay: Ceiling applied to every delay, in seconds.
    """
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_delay: float = DEFAULT_MAX_DELAY_SECONDS

    def __post_init__(self):
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")

    def next_delay(
        self,
        attempt: int,
        status_code: Optional[int],
        retry_after: Optional[float] = None,
    ) -> Optional[float]:
        """Returns the delay before the next attempt, or None to stop.

        Args:
            attempt: Zero-based index of the attempt that just failed.
            status_code: HTTP status of that attempt, None if no response arrived.
            retry_after: Server supplied Retry-After hint in seconds, if any.

        Returns:
            Seconds to wait, or None when the failure is not retryable or the
            attempt budget is used up.
        """
        if not is_retryable_status(status_code):
            return None
        if attempt + 1 >= self.max_attempts:
            return None
        delay = self.base_delay * (2 ** attempt)
        if retry_after is not None:
            delay = max(delay, retry_after)
        return min(delay, self.max_delay)
