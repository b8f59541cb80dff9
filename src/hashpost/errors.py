"""Error taxonomy and failure classification for the Hashnode client."""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx

from hashpost.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RETRY_AFTER = 60


class HashpostError(Exception):
    """Base class for every error raised by hashpost."""


class ConfigurationError(HashpostError):
    """Raised when client or retry configuration is invalid."""


class FrontMatterError(HashpostError):
    """Raised when a markdown file has missing or unusable front matter."""


class GraphQLResponseError(HashpostError):
    """Raised when a GraphQL response carries an ``errors`` array.

    The HTTP status of such a response is often 200, so this is checked
    before the status code.
    """

    def __init__(self, errors: list[dict[str, Any]], response: httpx.Response | None = None) -> None:
        self.errors = errors
        self.response = response
        first = errors[0] if errors else {}
        super().__init__(first.get("message") or "Unknown GraphQL error")


class ErrorKind(str, Enum):
    """The fixed set of failure categories."""

    RATE_LIMIT = "RATE_LIMIT"
    AUTH_ERROR = "AUTH_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN = "UNKNOWN"


class ClassifiedError(HashpostError):
    """A failure normalized into an ErrorKind plus diagnostic metadata.

    Instances are not modified once created; with_context() returns a copy.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
        details: Any = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.retry_after = retry_after
        self.details = details
        self.context: dict[str, Any] = dict(context or {})
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self.kind.value}, message={self.message!r}, "
            f"status_code={self.status_code}, retry_after={self.retry_after})"
        )

    def with_context(self, **context: Any) -> "ClassifiedError":
        """Return a copy of this error with extra context merged in."""
        return ClassifiedError(
            self.message,
            self.kind,
            status_code=self.status_code,
            retry_after=self.retry_after,
            details=self.details,
            context={**self.context, **context},
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the fields callers usually log or display."""
        return {
            "message": self.message,
            "kind": self.kind.value,
            "status_code": self.status_code,
            "retry_after": self.retry_after,
            "context": self.context,
        }


def _parse_retry_after(headers: Mapping[str, str] | None) -> float | None:
    """Parse a Retry-After header given in whole or fractional seconds."""
    if not headers:
        return None
    value = httpx.Headers(headers).get("retry-after")
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        # HTTP-date form is not used by the Hashnode API
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds


def _classify_graphql(error: GraphQLResponseError, headers: Mapping[str, str] | None) -> ClassifiedError:
    first = error.errors[0] if error.errors else {}
    message = first.get("message") or "Unknown GraphQL error"
    lowered = message.lower()
    status = error.response.status_code if error.response is not None else None

    if "rate limit" in lowered:
        retry_after = _parse_retry_after(headers)
        return ClassifiedError(
            "Rate limit exceeded",
            ErrorKind.RATE_LIMIT,
            status_code=status if status == 429 else None,
            retry_after=DEFAULT_RETRY_AFTER if retry_after is None else retry_after,
            details=first,
        )

    if "unauthorized" in lowered or "authentication" in lowered:
        return ClassifiedError(
            "Authentication failed", ErrorKind.AUTH_ERROR, status_code=401, details=first
        )

    extensions = first.get("extensions") or {}
    if extensions.get("code") == "BAD_USER_INPUT":
        return ClassifiedError(
            "Validation failed", ErrorKind.VALIDATION_ERROR, status_code=400, details=first
        )

    return ClassifiedError(message, ErrorKind.UNKNOWN, details=first)


def _classify_status(response: httpx.Response) -> ClassifiedError | None:
    status = response.status_code

    if status in (401, 403):
        return ClassifiedError(
            "Authentication failed", ErrorKind.AUTH_ERROR, status_code=status, details=response
        )

    if status == 429:
        retry_after = _parse_retry_after(response.headers)
        return ClassifiedError(
            "Rate limit exceeded",
            ErrorKind.RATE_LIMIT,
            status_code=status,
            retry_after=DEFAULT_RETRY_AFTER if retry_after is None else retry_after,
            details=response,
        )

    if status >= 500:
        return ClassifiedError(
            "Server error", ErrorKind.NETWORK_ERROR, status_code=status, details=response
        )

    return None


def classify_error(
    error: BaseException, headers: Mapping[str, str] | None = None
) -> ClassifiedError:
    """Map an arbitrary failure to exactly one ClassifiedError.

    Checks run in a fixed order and the first match wins: connection
    failures, then GraphQL error lists, then HTTP status codes, then a
    generic fallback. A GraphQL error whose message matches no rule is
    classified by the status of the response that carried it.

    Args:
        error: The exception raised by a request attempt.
        headers: Response headers to read ``Retry-After`` from. Defaults to
            the headers of the response attached to the error, if any.

    Returns:
        The classification of the failure.
    """
    if isinstance(error, ClassifiedError):
        return error

    if isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout)):
        return ClassifiedError(
            "Network connection failed", ErrorKind.NETWORK_ERROR, details=error
        )

    if isinstance(error, GraphQLResponseError):
        if headers is None and error.response is not None:
            headers = error.response.headers
        by_message = _classify_graphql(error, headers)
        if by_message.kind is ErrorKind.UNKNOWN and error.response is not None:
            # Unrecognized messages still honor the HTTP status they came with
            by_status = _classify_status(error.response)
            if by_status is not None:
                return by_status
        return by_message

    status_code = None
    if isinstance(error, httpx.HTTPStatusError):
        classified = _classify_status(error.response)
        if classified is not None:
            return classified
        status_code = error.response.status_code

    return ClassifiedError(
        str(error) or "Unknown error occurred",
        ErrorKind.UNKNOWN,
        status_code=status_code,
        details=error,
    )


def log_error(error: ClassifiedError, log: Any = None) -> None:
    """Emit a single structured record describing a surfaced error."""
    (log or logger).error(
        "Hashnode API error",
        error_message=error.message,
        kind=error.kind.value,
        status_code=error.status_code,
        retry_after=error.retry_after,
        context=error.context,
        details=repr(error.details) if error.details is not None else None,
    )
