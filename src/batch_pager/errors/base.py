"""错误基类：提供分层错误体系和结构化错误上下文。

Base error classes for batch-pager.

Provides a layered error hierarchy:
- BatchPagerError: Base class for all library errors
- TransportError: Connection/timeout failures from the HTTP capability
- MalformedResponseError: A 2xx body that is not valid JSON
- TerminalError: A per-subject failure that is returned as data, never retried
- ConfigError: Invalid configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Hashable

    from batch_pager.errors.classification import FailureKind


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'transport', 'decode', 'remote', 'config')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class BatchPagerError(Exception):
    """Base class for all batch-pager errors.

    Attributes:
        message: Human-readable error message
        context: Structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message


class TransportError(BatchPagerError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure
    - Timeout
    - Protocol errors (malformed HTTP, TLS)
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class MalformedResponseError(BatchPagerError):
    """A response body could not be decoded as JSON."""

    def __init__(
        self,
        message: str,
        *,
        body: bytes | str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = ErrorContext(source="decode")
        super().__init__(message, ctx)
        self.body = body
        self.__cause__ = cause


class ConfigError(BatchPagerError):
    """Invalid or unreadable configuration."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = ErrorContext(source="config")
        if path:
            ctx.details["path"] = path
        super().__init__(message, ctx)
        self.path = path
        self.__cause__ = cause


_TERMINAL_HINTS: dict[str, str] = {
    "unauthorized": "Check the credentials passed to the client",
    "not_found": "Check that the subject id exists",
    "retries_exhausted": "Raise max_retries or retry the subject later",
}


class TerminalError(BatchPagerError):
    """A failure that ends processing for one subject.

    Terminal errors are returned in place of a result rather than raised,
    so one subject can fail without aborting the rest of its batch.

    Attributes:
        subject: The subject id the request was issued for
        status_code: HTTP status code of the last response (None for
            transport failures)
        body: Raw body of the last response
        url: Request URL
        kind: Failure classification
    """

    def __init__(
        self,
        subject: Hashable,
        *,
        kind: FailureKind,
        status_code: int | None = None,
        body: str | None = None,
        url: str | None = None,
        attempts: int = 1,
    ) -> None:
        ctx = ErrorContext(source="remote", hint=_TERMINAL_HINTS.get(kind.value))
        ctx.details["subject"] = subject
        ctx.details["kind"] = kind.value
        if status_code is not None:
            ctx.details["status_code"] = status_code
        if url:
            ctx.details["url"] = url

        label = status_code if status_code is not None else kind.value
        super().__init__(f"{label} - {body}" if body else str(label), ctx)

        self.subject = subject
        self.kind = kind
        self.status_code = status_code
        self.body = body
        self.url = url
        self.attempts = attempts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TerminalError):
            return NotImplemented
        return (
            self.subject == other.subject
            and self.kind == other.kind
            and self.status_code == other.status_code
            and self.body == other.body
        )

    def __hash__(self) -> int:
        return hash((self.subject, self.kind, self.status_code, self.body))

    def __repr__(self) -> str:
        return (
            f"TerminalError(subject={self.subject!r}, kind={self.kind.value!r}, "
            f"status_code={self.status_code!r})"
        )
