"""
Batch processing module for batch-pager.

Provides the concurrent, retrying request round used by pagination.
"""

from batch_pager.batch.executor import BatchExecutor, BatchResult, RetryEvent

__all__ = [
    "BatchExecutor",
    "BatchResult",
    "RetryEvent",
]
