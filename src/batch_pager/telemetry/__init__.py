"""
Telemetry module for batch-pager.

Provides structured logging with credential masking.
"""

from batch_pager.telemetry.logger import (
    JsonFormatter,
    LogContext,
    LogLevel,
    PagerLogger,
    SensitiveDataMasker,
    TextFormatter,
    bind_log_context,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "PagerLogger",
    "SensitiveDataMasker",
    "TextFormatter",
    "bind_log_context",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
