"""Observer that writes API call events to the standard logging system."""

import logging
from typing import Optional

from moviesdb.domain.events.api_events import (
    ApiCallCompleted, ApiCallDeferred, DomainEvent, RetryScheduled,
)

logger = logging.getLogger(__name__)


class LoggingEventObserver:
    """Callable observer; pass an instance as `observer=` to MoviesApiClient."""

    def __init__(self, target: Optional[logging.Logger] = None):
        self.logger = target or logger

    def __call__(self, event: DomainEvent) -> None:
        if isinstance(event, ApiCallCompleted):
            if event.from_cache:
                self.logger.info(f"{event.endpoint}: served from cache")
            elif event.succeeded:
                self.logger.info(
                    f"{event.endpoint}: status={event.final_status} attempts={event.attempt_count} "
                    f"elapsed={event.elapsed:.3f}s"
                )
            else:
                self.logger.warning(
                    f"{event.endpoint}: failed ({event.error_kind.value}) status={event.final_status} "
                    f"attempts={event.attempt_count} elapsed={event.elapsed:.3f}s"
                )
        elif isinstance(event, RetryScheduled):
            self.logger.info(
                f"{event.endpoint}: retry #{event.attempt_number} in {event.delay_seconds:.2f}s "
                f"after {event.error_kind.value}"
            )
        elif isinstance(event, ApiCallDeferred):
            self.logger.debug(f"{event.endpoint}: deferred {event.wait_time_seconds:.2f}s by rate limit budget")
        else:
            self.logger.debug(f"EVENT: {event}")
