"""Interface for time sources.

All waiting done by the client (backoff delays, rate-limit deferrals) goes
through a Clock so tests can run without real wall-clock waits.
"""

import abc


class Clock(abc.ABC):
    """Abstract Base Class for reading time and sleeping."""

    @abc.abstractmethod
    def monotonic(self) -> float:
        """Returns a monotonic timestamp in seconds."""
        pass

    @abc.abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspends the current task for `seconds`."""
        pass
