"""并发分页抓取引擎：有界并发批量请求、失败重试与按主体游标分页。

batch-pager: concurrent, retrying, cursor-paginated fetching from HTTP APIs.

Issues bounded-concurrency waves of requests, retries transient failures
with quadratic backoff, and drives per-subject cursor pagination where each
subject can be stopped independently.
"""
from __future__ import annotations

from batch_pager.batch import BatchExecutor, BatchResult, RetryEvent
from batch_pager.client import PagerClient, PagerClientBuilder
from batch_pager.config import PagerConfig
from batch_pager.errors import (
    BatchPagerError,
    ConfigError,
    FailureKind,
    MalformedResponseError,
    TerminalError,
    TransportError,
)
from batch_pager.pagination import (
    CursorPageReader,
    CursorPaginator,
    PageNumberReader,
    ResultAggregator,
    collect_all,
    collect_with_limit,
)
from batch_pager.resilience import BackoffPolicy
from batch_pager.transport import HttpTransport, basic_auth_header, bearer_auth_header
from batch_pager.types import Outcome, Page, RequestDescriptor, Success

__version__ = "0.1.0"

__all__ = [
    # Client
    "PagerClient",
    "PagerClientBuilder",
    "PagerConfig",
    # Core
    "BatchExecutor",
    "BatchResult",
    "RetryEvent",
    "BackoffPolicy",
    "HttpTransport",
    "basic_auth_header",
    "bearer_auth_header",
    # Pagination
    "CursorPageReader",
    "CursorPaginator",
    "PageNumberReader",
    "ResultAggregator",
    "collect_all",
    "collect_with_limit",
    # Types
    "Outcome",
    "Page",
    "RequestDescriptor",
    "Success",
    # Errors
    "BatchPagerError",
    "ConfigError",
    "FailureKind",
    "MalformedResponseError",
    "TerminalError",
    "TransportError",
    "__version__",
]
