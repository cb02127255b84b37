"""HTTP 传输层：基于 httpx 的异步 HTTP 客户端。

HTTP transport using httpx for async requests.

Provides:
- Sending a RequestDescriptor and reporting (status code, body)
- Configurable timeouts
- Mapping of connection/timeout failures to TransportError
- JSON body decoding with a distinguishable failure
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from batch_pager.errors import MalformedResponseError, TransportError

if TYPE_CHECKING:
    from batch_pager.config import PagerConfig
    from batch_pager.types import RequestDescriptor


# Default timeouts
_DEFAULT_TIMEOUT = 30.0
_DEFAULT_CONNECT_TIMEOUT = 10.0


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("BATCH_PAGER_HTTP_TRUST_ENV", "0") == "1"


@dataclass(frozen=True)
class RawResponse:
    """Undecoded result of one HTTP call.

    Attributes:
        status_code: HTTP status code
        body: Raw response body
        url: Final request URL
        headers: Response headers
    """

    status_code: int
    body: bytes
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """Body decoded as UTF-8, replacing undecodable bytes."""
        return self.body.decode("utf-8", errors="replace")


def decode_json(body: bytes | str) -> Any:
    """Decode a response body as JSON.

    Raises:
        MalformedResponseError: If the body is not valid JSON
    """
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(
            f"Response body is not valid JSON: {e}", body=body, cause=e
        ) from e


class HttpTransport:
    """HTTP transport for API communication.

    Uses httpx for async HTTP requests. Unlike a typical client, status codes
    are not turned into exceptions here: every completed response is
    returned so the batch executor can classify it.

    Example:
        >>> async with HttpTransport(base_url="https://twitter.com") as transport:
        ...     response = await transport.send(descriptor)
        ...     print(response.status_code)
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        user_agent: str | None = None,
        proxy: str | None = None,
        client: httpx.AsyncClient | None = None,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            base_url: Base URL that relative descriptor URLs resolve against
            timeout: Request timeout in seconds
            connect_timeout: Connect timeout in seconds
            user_agent: User-Agent header value
            proxy: Proxy URL
            client: Pre-built httpx client (caller keeps ownership)
            mock_transport: httpx transport to route requests through (tests)
        """
        self._base_url = base_url
        self._timeout = timeout if timeout is not None else _DEFAULT_TIMEOUT
        self._connect_timeout = (
            connect_timeout if connect_timeout is not None else _DEFAULT_CONNECT_TIMEOUT
        )
        self._user_agent = user_agent
        self._proxy = proxy
        self._mock_transport = mock_transport

        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(
        cls,
        config: PagerConfig,
        *,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpTransport:
        """Create a transport from a PagerConfig."""
        return cls(
            config.base_url,
            timeout=config.timeout_secs,
            connect_timeout=config.connect_timeout_secs,
            user_agent=config.user_agent,
            proxy=config.proxy,
            mock_transport=mock_transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            timeout = httpx.Timeout(self._timeout, connect=self._connect_timeout)
            headers = {"Accept": "application/json"}
            if self._user_agent:
                headers["User-Agent"] = self._user_agent

            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=timeout,
                headers=headers,
                proxy=self._proxy,
                transport=self._mock_transport,
                trust_env=_trust_env_enabled(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def resolve_url(self, descriptor: RequestDescriptor) -> str:
        """Full URL of a descriptor, for logging."""
        if descriptor.url.startswith(("http://", "https://")) or not self._base_url:
            return descriptor.url
        return f"{self._base_url.rstrip('/')}/{descriptor.url.lstrip('/')}"

    async def send(self, descriptor: RequestDescriptor) -> RawResponse:
        """Perform one HTTP call.

        Args:
            descriptor: Request to send

        Returns:
            RawResponse for any completed HTTP exchange, whatever its status

        Raises:
            TransportError: On network/connection errors
        """
        client = self._get_client()
        url = self.resolve_url(descriptor)

        try:
            response = await client.request(
                method=descriptor.method,
                url=descriptor.url,
                headers=dict(descriptor.headers),
                params=dict(descriptor.params) or None,
            )
        except httpx.ConnectError as e:
            raise TransportError(f"Connection failed: {e}", url=url, cause=e) from e
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {e}", url=url, cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=url, cause=e) from e

        return RawResponse(
            status_code=response.status_code,
            body=response.content,
            url=str(response.request.url),
            headers=dict(response.headers),
        )

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
