"""
Pagination module for batch-pager.

Provides the cursor paginator, page readers and result aggregation.
"""

from batch_pager.pagination.aggregate import (
    ResultAggregator,
    collect_all,
    collect_with_limit,
)
from batch_pager.pagination.cursor import CursorPaginator
from batch_pager.pagination.readers import (
    END_CURSOR,
    START_CURSOR,
    CursorPageReader,
    PageNumberReader,
    PageReader,
)

__all__ = [
    "END_CURSOR",
    "START_CURSOR",
    "CursorPageReader",
    "CursorPaginator",
    "PageNumberReader",
    "PageReader",
    "ResultAggregator",
    "collect_all",
    "collect_with_limit",
]
