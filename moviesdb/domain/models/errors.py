"""Error taxonomy for calls against the movies API.

Every failure surfaced by the client is a MoviesApiError subclass carrying an
ErrorKind, so callers can tell "your input was invalid" apart from "the service
was unavailable" and "the service returned a business error".
"""

import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    """Classification of a failed call."""
    INVALID_PARAMETER = "invalid_parameter"
    TIMEOUT = "timeout"
    NETWORK = "network"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    API_ERROR = "api_error"
    MALFORMED_RESPONSE = "malformed_response"
    RETRY_BUDGET_EXHAUSTED = "retry_budget_exhausted"


# Kinds the retry service is allowed to intercept
RETRYABLE_KINDS = frozenset({
    ErrorKind.TIMEOUT,
    ErrorKind.NETWORK,
    ErrorKind.RATE_LIMITED,
    ErrorKind.SERVER_ERROR,
})


class MoviesApiError(Exception):
    """Base class for every failure raised by the client.

    Attributes:
        kind: The ErrorKind of this failure.
        status_code: Last HTTP status seen for the call, if any.
        body: Last raw response body seen for the call, if any.
        attempts: Transport attempts made before the failure surfaced.
    """

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        # Transport attempts made for the failed call; set by the retry service.
        self.attempts = 0

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def is_caller_error(self) -> bool:
        """True when the caller supplied a value outside the documented domain."""
        return self.kind is ErrorKind.INVALID_PARAMETER

    def is_service_unavailable(self) -> bool:
        """True when the service could not answer (transient failures, exhausted retries)."""
        return self.kind in RETRYABLE_KINDS or self.kind is ErrorKind.RETRY_BUDGET_EXHAUSTED

    def is_business_error(self) -> bool:
        """True when the service answered with an error envelope or an unusable body."""
        return self.kind in (ErrorKind.API_ERROR, ErrorKind.MALFORMED_RESPONSE)


class InvalidParameterError(MoviesApiError, ValueError):
    """A path or query parameter is outside its documented domain."""
    kind = ErrorKind.INVALID_PARAMETER

    def __init__(self, parameter: str, value: Any, reason: str):
        super().__init__(f"Invalid value for '{parameter}': {value!r} ({reason})")
        self.parameter = parameter
        self.value = value
        self.reason = reason


class RequestTimeoutError(MoviesApiError):
    """A single attempt exceeded its timeout budget."""
    kind = ErrorKind.TIMEOUT


class NetworkError(MoviesApiError):
    """The request never produced an HTTP response (DNS, connect, reset...)."""
    kind = ErrorKind.NETWORK


class RateLimitedError(MoviesApiError):
    """The service answered 429 Too Many Requests."""
    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        body: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, status_code=status_code, body=body)
        self.retry_after = retry_after


class ServerError(MoviesApiError):
    """The service answered with a 5xx status."""
    kind = ErrorKind.SERVER_ERROR


class ProviderApiError(MoviesApiError):
    """The service answered with an `error` envelope (or a non-retryable 4xx).

    The provider's code, message and details are kept verbatim.
    """
    kind = ErrorKind.API_ERROR

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code, body=body)
        self.code = code
        self.details = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class MalformedResponseError(MoviesApiError):
    """The response body is not one of the two documented envelope shapes."""
    kind = ErrorKind.MALFORMED_RESPONSE


class RetryBudgetExhaustedError(MoviesApiError):
    """Retries stopped after repeated retryable failures."""
    kind = ErrorKind.RETRY_BUDGET_EXHAUSTED

    def __init__(self, last_error: MoviesApiError, attempts: int):
        super().__init__(
            f"Gave up after {attempts} attempt(s). Last error: {last_error}",
            status_code=last_error.status_code,
            body=last_error.body,
        )
        self.last_error = last_error
        self.attempts = attempts


class ConfigurationError(Exception):
    """Required configuration (e.g. the API key) is missing or unusable."""
