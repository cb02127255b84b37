"""错误体系：提供结构化错误类型和响应分类。

Error hierarchy for batch-pager.

Provides structured error types and the status classification used for
retry decisions.
"""

from batch_pager.errors.base import (
    BatchPagerError,
    ConfigError,
    ErrorContext,
    MalformedResponseError,
    TerminalError,
    TransportError,
)
from batch_pager.errors.classification import (
    FailureKind,
    classify_status,
    is_retryable,
)

__all__ = [
    "BatchPagerError",
    "ConfigError",
    "ErrorContext",
    "FailureKind",
    "MalformedResponseError",
    "TerminalError",
    "TransportError",
    "classify_status",
    "is_retryable",
]
