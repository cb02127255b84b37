"""Response classification.

Maps HTTP status codes and transport/decode failures onto the failure kinds
that drive retry decisions in the batch executor.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Failure classification for a single request attempt."""

    TRANSPORT = "transport"
    """Connection failure or timeout; treated like a server error."""

    MALFORMED = "malformed"
    """2xx response whose body is not valid JSON."""

    SERVER_ERROR = "server_error"
    """HTTP 500."""

    OVERLOADED = "overloaded"
    """HTTP 502, the API is over capacity."""

    UNAUTHORIZED = "unauthorized"
    """HTTP 401, credentials rejected."""

    NOT_FOUND = "not_found"
    """HTTP 404, unknown subject."""

    UNCLASSIFIED = "unclassified"
    """Any other status code."""

    RETRIES_EXHAUSTED = "retries_exhausted"
    """A retryable failure that hit the configured retry ceiling."""


_TERMINAL_KINDS: frozenset[FailureKind] = frozenset(
    {
        FailureKind.UNAUTHORIZED,
        FailureKind.NOT_FOUND,
        FailureKind.RETRIES_EXHAUSTED,
    }
)

_STATUS_MAPPING: dict[int, FailureKind] = {
    401: FailureKind.UNAUTHORIZED,
    404: FailureKind.NOT_FOUND,
    500: FailureKind.SERVER_ERROR,
    502: FailureKind.OVERLOADED,
}


def classify_status(status_code: int) -> FailureKind | None:
    """Classify an HTTP status code.

    Args:
        status_code: HTTP status code

    Returns:
        None for 2xx responses (the body still has to decode), otherwise
        the failure kind for the status
    """
    if 200 <= status_code < 300:
        return None
    return _STATUS_MAPPING.get(status_code, FailureKind.UNCLASSIFIED)


def is_retryable(kind: FailureKind) -> bool:
    """Check if a failure kind should be retried with backoff."""
    return kind not in _TERMINAL_KINDS
