"""核心客户端实现：并发批量获取用户、关注者与时间线。

Core PagerClient implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from batch_pager.batch import BatchExecutor
from batch_pager.client.endpoints import Endpoints
from batch_pager.config import PagerConfig
from batch_pager.pagination import (
    CursorPageReader,
    CursorPaginator,
    PageNumberReader,
    ResultAggregator,
)
from batch_pager.transport import HttpTransport

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Hashable, Iterable, Mapping

    from batch_pager.batch import RetryEvent
    from batch_pager.client.builder import PagerClientBuilder
    from batch_pager.errors import TerminalError
    from batch_pager.types import PageResult

    OnPage = Callable[[Any, PageResult], bool | Awaitable[bool]]


class PagerClient:
    """Concurrent client for user, follower and timeline lookups.

    Every call fans out one request per subject through the batch executor;
    paginated calls keep fetching pages per subject until the API runs out
    of pages or the caller's callback says stop.

    Example:
        >>> async with PagerClient(headers=basic_auth_header("me", "secret")) as client:
        ...     users = await client.get_users(["jack", 12])
        ...     followers = await client.get_followers(["jack"], limit=500)

        >>> # Stop one subject early while the others keep paging
        >>> async def on_page(subject, page):
        ...     if isinstance(page, TerminalError):
        ...         return False
        ...     return subject == "jack"
        >>> await client.process_follower_ids(["jack", "biz"], on_page)
    """

    def __init__(
        self,
        config: PagerConfig | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        transport: HttpTransport | None = None,
        on_retry: Callable[[RetryEvent], None] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration (default: PagerConfig())
            headers: Precomputed auth headers sent with every request
            transport: HTTP transport (default: built from config)
            on_retry: Optional observer for retries
        """
        self._config = config or PagerConfig()
        self._transport = transport or HttpTransport.from_config(self._config)
        self._endpoints = Endpoints(headers)
        self._executor = BatchExecutor(
            self._transport,
            concurrency_limit=self._config.concurrency_limit,
            backoff=self._config.backoff_policy(),
            on_retry=on_retry,
        )

    @classmethod
    def builder(cls) -> PagerClientBuilder:
        """Create a builder for fluent configuration."""
        from batch_pager.client.builder import PagerClientBuilder

        return PagerClientBuilder()

    @property
    def config(self) -> PagerConfig:
        return self._config

    @property
    def executor(self) -> BatchExecutor:
        return self._executor

    @property
    def endpoints(self) -> Endpoints:
        return self._endpoints

    def paginator(self, items_key: str) -> CursorPaginator:
        """Cursor paginator reading ``items_key`` out of each page."""
        return CursorPaginator(self._executor, reader=CursorPageReader(items_key))

    def timeline_paginator(self) -> CursorPaginator:
        """Page-number paginator for user timelines."""
        return CursorPaginator(self._executor, reader=PageNumberReader())

    async def get_users(self, subject_ids: Iterable[Hashable]) -> dict[Any, Any]:
        """Look up user records.

        Returns:
            Decoded user record per subject, or its TerminalError
        """
        result = await self._executor.execute(subject_ids, self._endpoints.users_show)
        return result.values_or_errors()

    async def process_followers(self, subject_ids: Iterable[Hashable], on_page: OnPage) -> None:
        """Feed follower records to ``on_page`` one page at a time."""
        await self.paginator("users").paginate(
            subject_ids, self._endpoints.followers, on_page
        )

    async def process_follower_ids(self, subject_ids: Iterable[Hashable], on_page: OnPage) -> None:
        """Feed follower ids to ``on_page`` one page at a time."""
        await self.paginator("ids").paginate(
            subject_ids, self._endpoints.follower_ids, on_page
        )

    async def process_user_timeline(self, subject_ids: Iterable[Hashable], on_page: OnPage) -> None:
        """Feed timeline updates to ``on_page`` one page at a time."""
        count = self._config.timeline_page_size
        await self.timeline_paginator().paginate(
            subject_ids,
            lambda subject, page: self._endpoints.user_timeline(subject, page, count),
            on_page,
        )

    async def get_followers(
        self, subject_ids: Iterable[Hashable], limit: int | None = None
    ) -> dict[Any, list[Any] | TerminalError]:
        """Collect follower records, at most ``limit`` per subject."""
        aggregator = ResultAggregator(self.paginator("users"), limit=limit)
        return await aggregator.collect(subject_ids, self._endpoints.followers)

    async def get_follower_ids(
        self, subject_ids: Iterable[Hashable], limit: int | None = None
    ) -> dict[Any, list[Any] | TerminalError]:
        """Collect follower ids, at most ``limit`` per subject."""
        aggregator = ResultAggregator(self.paginator("ids"), limit=limit)
        return await aggregator.collect(subject_ids, self._endpoints.follower_ids)

    async def get_user_timeline(
        self, subject_ids: Iterable[Hashable]
    ) -> dict[Any, list[Any] | TerminalError]:
        """Collect every timeline update of every subject."""
        count = self._config.timeline_page_size
        return await ResultAggregator(self.timeline_paginator()).collect(
            subject_ids,
            lambda subject, page: self._endpoints.user_timeline(subject, page, count),
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self) -> PagerClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
