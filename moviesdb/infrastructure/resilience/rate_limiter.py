"""Implementation of a rate-limit budget.

Controls the frequency of outgoing requests so that one or more clients
sharing an instance stay under the provider's quota. Uses a sliding window.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional

from moviesdb.domain.interfaces.clock import Clock
from moviesdb.domain.interfaces.rate_limit import RateLimitBudget
from moviesdb.infrastructure.resilience.clock import SystemClock

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 5
DEFAULT_TIME_WINDOW_SECONDS = 1.0


class RateLimiter(RateLimitBudget):
    """Simple sliding window rate limiter."""

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        time_window: float = DEFAULT_TIME_WINDOW_SECONDS,
        clock: Optional[Clock] = None,
    ):
        """Initializes the rate limiter.

        Args:
            max_requests: Maximum number of requests allowed in the time window.
            time_window: The time window in seconds.
            clock: Time source (defaults to the system clock).
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if time_window <= 0:
            raise ValueError("time_window must be > 0")
        self.max_requests = max_requests
        self.time_window = time_window
        self.clock = clock or SystemClock()
        self.timestamps: Deque[float] = deque()
        self._lock = asyncio.Lock()
        logger.info(f"RateLimiter initialized: {max_requests} requests / {time_window} seconds")

    def _cleanup_timestamps(self, now: float) -> None:
        """Removes timestamps older than the time window."""
        while self.timestamps and now - self.timestamps[0] >= self.time_window:
            self.timestamps.popleft()

    async def reserve(self, cost: int = 1) -> float:
        """Grants `cost` request slots, or returns how long to wait before asking again."""
        if cost < 1:
            raise ValueError("cost must be >= 1")
        if cost > self.max_requests:
            raise ValueError(f"cost {cost} exceeds the window capacity of {self.max_requests}")
        async with self._lock:
            now = self.clock.monotonic()
            self._cleanup_timestamps(now)
            if len(self.timestamps) + cost <= self.max_requests:
                self.timestamps.extend([now] * cost)
                logger.debug("Rate limit permission granted.")
                return 0.0
            # Oldest slot that has to expire before `cost` slots are free
            blocking = self.timestamps[len(self.timestamps) + cost - self.max_requests - 1]
            wait_time = max(0.0, blocking + self.time_window - now)
            logger.debug(f"Rate limit reached. Suggesting a wait of {wait_time:.2f} seconds.")
            return wait_time

    async def wait_for_permission(self, cost: int = 1) -> float:
        """Waits until `cost` slots are granted; returns the total time waited."""
        waited = 0.0
        while True:
            wait_time = await self.reserve(cost)
            if wait_time <= 0:
                return waited
            await self.clock.sleep(wait_time)
            waited += wait_time
