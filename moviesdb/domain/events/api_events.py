"""Domain Events related to API calls and resilience.

Emitted when calls are deferred by the rate-limit budget, when a retry is
scheduled, and once per completed logical call.
"""

from dataclasses import dataclass, field
import time
from typing import Callable, Optional

from ..models.errors import ErrorKind


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


# --- Specific API Events ---

@dataclass
class ApiCallDeferred(DomainEvent):
    """Event triggered when an attempt waits on the rate-limit budget."""
    endpoint: str
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed attempt."""
    endpoint: str
    attempt_number: int
    delay_seconds: float
    error_kind: ErrorKind
    last_status: Optional[int] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallCompleted(DomainEvent):
    """Outcome of one logical call, successful or not.

    `attempt_count` counts transport attempts (0 when the call failed
    validation or was served from cache). `final_status` is the last HTTP
    status seen, None when no response was received.
    """
    endpoint: str
    attempt_count: int
    final_status: Optional[int]
    elapsed: float
    error_kind: Optional[ErrorKind] = None
    from_cache: bool = False
    timestamp: float = field(default_factory=time.time)

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None


EventObserver = Callable[[DomainEvent], None]
