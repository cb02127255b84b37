"""
Outbound request descriptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one outbound HTTP call.

    Headers and query params are frozen into read-only mappings, so the same
    descriptor can be resubmitted any number of times on retry.

    Attributes:
        url: Absolute URL or path relative to the transport's base URL
        headers: Request headers (auth headers included)
        params: Query parameters
        method: HTTP method

    Example:
        >>> req = RequestDescriptor(
        ...     "/followers/ids.json",
        ...     headers={"Authorization": "Basic dXNlcjpwYXNz"},
        ...     params={"screen_name": "jack", "cursor": -1},
        ... )
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    method: str = "GET"

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "method", self.method.upper())

    def with_headers(self, extra: Mapping[str, str]) -> RequestDescriptor:
        """Return a copy with additional headers merged in."""
        return RequestDescriptor(
            self.url,
            headers={**self.headers, **extra},
            params=self.params,
            method=self.method,
        )

    def with_params(self, extra: Mapping[str, Any]) -> RequestDescriptor:
        """Return a copy with additional query params merged in."""
        return RequestDescriptor(
            self.url,
            headers=self.headers,
            params={**self.params, **extra},
            method=self.method,
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.method,
                self.url,
                tuple(sorted(self.headers.items())),
                tuple(sorted((k, str(v)) for k, v in self.params.items())),
            )
        )

    def __repr__(self) -> str:
        return f"RequestDescriptor({self.method} {self.url}, params={dict(self.params)!r})"
