"""Clock backed by the event loop and time.monotonic."""

import asyncio
import time

from moviesdb.domain.interfaces.clock import Clock


class SystemClock(Clock):
    """Real time source used outside of tests."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
