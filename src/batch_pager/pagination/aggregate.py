"""
Result aggregation on top of CursorPaginator.

Collects every page of every subject into one list per subject, optionally
stopping a subject once it has enough items.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, TypeVar

from batch_pager.errors import TerminalError
from batch_pager.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from batch_pager.pagination.cursor import CursorPaginator
    from batch_pager.types import PageResult, RequestDescriptor

S = TypeVar("S", bound=Hashable)

logger = get_logger("batch_pager.pagination")


class ResultAggregator:
    """Accumulates pages per subject.

    A subject that hits a terminal error maps to that error instead of a
    list; items gathered before the error are discarded.

    Example:
        >>> aggregator = ResultAggregator(paginator, limit=500)
        >>> followers = await aggregator.collect(["jack", "biz"], build_request)
        >>> len(followers["jack"])
        500
    """

    def __init__(self, paginator: CursorPaginator, *, limit: int | None = None) -> None:
        """Initialize aggregator.

        Args:
            paginator: Paginator used to fetch pages
            limit: Maximum items kept per subject (None = everything)
        """
        if limit is not None and limit < 0:
            raise ValueError("limit must be >= 0 or None")
        self._paginator = paginator
        self._limit = limit

    @property
    def limit(self) -> int | None:
        return self._limit

    async def collect(
        self,
        subject_ids: Iterable[S],
        build_request: Callable[[S, int], RequestDescriptor],
    ) -> dict[S, list[Any] | TerminalError]:
        """Paginate all subjects and return their accumulated items."""
        items: dict[S, list[Any]] = {}
        errors: dict[S, TerminalError] = {}

        def on_page(subject: S, page: PageResult) -> bool:
            if isinstance(page, TerminalError):
                # The error replaces any partial list.
                items.pop(subject, None)
                errors[subject] = page
                return False

            accumulated = items.setdefault(subject, [])
            accumulated.extend(page.items)

            if self._limit is not None and len(accumulated) >= self._limit:
                del accumulated[self._limit :]
                logger.info(
                    f"{subject} - {len(accumulated)} items retrieved, limit reached"
                )
                return False

            logger.info(f"{subject} - {len(accumulated)} items retrieved.")
            return True

        await self._paginator.paginate(subject_ids, build_request, on_page)
        return {**items, **errors}


async def collect_all(
    paginator: CursorPaginator,
    subject_ids: Iterable[S],
    build_request: Callable[[S, int], RequestDescriptor],
) -> dict[S, list[Any] | TerminalError]:
    """Collect every page of every subject.

    Args:
        paginator: Paginator used to fetch pages
        subject_ids: Subjects to paginate
        build_request: Builds the request for a subject at a cursor

    Returns:
        Items per subject in page order, or the subject's TerminalError
    """
    return await ResultAggregator(paginator).collect(subject_ids, build_request)


async def collect_with_limit(
    paginator: CursorPaginator,
    subject_ids: Iterable[S],
    build_request: Callable[[S, int], RequestDescriptor],
    limit: int,
) -> dict[S, list[Any] | TerminalError]:
    """Collect pages until each subject has ``limit`` items.

    A subject's list is truncated to exactly ``limit`` items and no further
    page is requested for it; other subjects are unaffected.
    """
    return await ResultAggregator(paginator, limit=limit).collect(subject_ids, build_request)
