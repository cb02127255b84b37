"""
Builder for fluent PagerClient construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from batch_pager.config import PagerConfig
from batch_pager.transport import HttpTransport, basic_auth_header, bearer_auth_header

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from batch_pager.batch import RetryEvent
    from batch_pager.client.core import PagerClient


class PagerClientBuilder:
    """Builder for creating PagerClient instances with custom configuration.

    Example:
        >>> client = (
        ...     PagerClient.builder()
        ...     .base_url("https://twitter.com")
        ...     .basic_auth("me", "secret")
        ...     .concurrency(20)
        ...     .max_retries(8)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}
        self._headers: dict[str, str] = {}
        self._mock_transport: httpx.AsyncBaseTransport | None = None
        self._on_retry: Callable[[RetryEvent], None] | None = None

    def config(self, config: PagerConfig) -> PagerClientBuilder:
        """Start from an existing configuration."""
        self._config.update(config.model_dump())
        return self

    def base_url(self, url: str) -> PagerClientBuilder:
        self._config["base_url"] = url
        return self

    def concurrency(self, limit: int) -> PagerClientBuilder:
        """Set the maximum number of requests in flight."""
        self._config["concurrency_limit"] = limit
        return self

    def timeout(self, seconds: float) -> PagerClientBuilder:
        self._config["timeout_secs"] = seconds
        return self

    def max_retries(self, retries: int | None) -> PagerClientBuilder:
        """Set the retry ceiling per request (None = retry until resolved)."""
        self._config["max_retries"] = retries
        return self

    def backoff_unit(self, seconds: float) -> PagerClientBuilder:
        """Set the length of one backoff unit (retry N sleeps N² units)."""
        self._config["backoff_unit_secs"] = seconds
        return self

    def basic_auth(self, login: str, password: str) -> PagerClientBuilder:
        self._headers.update(basic_auth_header(login, password))
        return self

    def bearer_token(self, token: str) -> PagerClientBuilder:
        self._headers.update(bearer_auth_header(token))
        return self

    def headers(self, headers: dict[str, str]) -> PagerClientBuilder:
        """Add precomputed headers sent with every request."""
        self._headers.update(headers)
        return self

    def on_retry(self, callback: Callable[[RetryEvent], None]) -> PagerClientBuilder:
        self._on_retry = callback
        return self

    def mock_transport(self, transport: httpx.AsyncBaseTransport) -> PagerClientBuilder:
        """Route requests through an httpx transport (e.g. httpx.MockTransport)."""
        self._mock_transport = transport
        return self

    def build(self) -> PagerClient:
        """Build the client.

        Raises:
            ConfigError: If the accumulated settings are invalid
        """
        from batch_pager.client.core import PagerClient

        config = PagerConfig._validate(dict(self._config), source="builder")
        transport = HttpTransport.from_config(config, mock_transport=self._mock_transport)
        return PagerClient(
            config,
            headers=self._headers,
            transport=transport,
            on_retry=self._on_retry,
        )
