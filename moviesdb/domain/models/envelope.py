"""Domain models for raw and validated API responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .common import Item


@dataclass(frozen=True)
class RawResponse:
    """What the transport saw on the wire for one attempt."""
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def retry_after(self) -> Optional[float]:
        """Parsed Retry-After header (seconds), if the server sent a numeric one."""
        value = self.headers.get("retry-after") or self.headers.get("Retry-After")
        if not value:
            return None
        try:
            return max(0.0, float(value))
        except ValueError:
            return None


@dataclass(frozen=True)
class Envelope:
    """A successful response envelope.

    `results` is kept exactly as sent: a list for list endpoints, a mapping for
    single-object endpoints, or None when the provider found nothing. Pagination
    fields stay None when the provider omitted them.
    """
    results: Any
    page: Optional[int] = None
    next: Optional[str] = None
    entries: Optional[int] = None

    @property
    def has_next(self) -> bool:
        return self.next is not None


@dataclass(frozen=True)
class Page:
    """One page of a paginated endpoint."""
    items: List[Item]
    number: int
    next: Optional[str] = None
    entries: Optional[int] = None

    @property
    def has_next(self) -> bool:
        return self.next is not None

    def __len__(self) -> int:
        return len(self.items)
