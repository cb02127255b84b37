"""
Cursor-driven pagination over batch rounds.

Every subject starts at the reader's initial cursor. Each round fetches the
current page of every still-active subject in one batch; the caller's
``on_page`` callback then decides, per subject, whether to keep going.
Stopping one subject never holds back or speeds up another.
"""

from __future__ import annotations

import inspect
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, TypeVar

from batch_pager.errors import TerminalError
from batch_pager.pagination.readers import END_CURSOR, CursorPageReader, PageReader
from batch_pager.telemetry import bind_log_context, get_logger
from batch_pager.types import Page, Success

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from batch_pager.batch import BatchExecutor
    from batch_pager.types import PageResult, RequestDescriptor

S = TypeVar("S", bound=Hashable)

logger = get_logger("batch_pager.pagination")


class CursorPaginator:
    """Paginates many subjects concurrently, one batch round per page.

    Example:
        >>> paginator = CursorPaginator(executor, reader=CursorPageReader("ids"))
        >>> def on_page(subject, page):
        ...     if isinstance(page, TerminalError):
        ...         return False
        ...     store(subject, page.items)
        ...     return len(page.items) < 10_000
        >>> await paginator.paginate(
        ...     ["jack", 12],
        ...     lambda subject, cursor: build_ids_request(subject, cursor),
        ...     on_page,
        ... )
    """

    def __init__(
        self,
        executor: BatchExecutor,
        *,
        reader: PageReader | None = None,
        initial_cursor: int | None = None,
        on_round: Callable[[int, dict[Any, int]], None] | None = None,
    ) -> None:
        """Initialize paginator.

        Args:
            executor: Batch executor that runs each round
            reader: Decodes pages (default: ``{"items": [...], "next_cursor": n}``)
            initial_cursor: Starting cursor (default: the reader's, -1 for cursors)
            on_round: Called after each round with the round number and a
                snapshot of the remaining cursor state
        """
        self._executor = executor
        self._reader = reader or CursorPageReader("items")
        self._initial_cursor = (
            initial_cursor if initial_cursor is not None else self._reader.initial_cursor
        )
        self._on_round = on_round

    @property
    def executor(self) -> BatchExecutor:
        return self._executor

    @property
    def reader(self) -> PageReader:
        return self._reader

    async def paginate(
        self,
        subject_ids: Iterable[S],
        build_request: Callable[[S, int], RequestDescriptor],
        on_page: Callable[[S, PageResult], bool | Awaitable[bool]],
    ) -> int:
        """Fetch pages for every subject until each one is done.

        ``on_page`` is called once per subject per round with either the
        ``Page`` that was fetched or the subject's ``TerminalError``. Returning
        True asks for the next page; it is only fetched if the API reported
        one. Errors and empty pages always end the subject.

        Args:
            subject_ids: Subjects to paginate
            build_request: Builds the request for a subject at a cursor
            on_page: Per-page continuation callback (sync or async)

        Returns:
            Number of rounds executed
        """
        cursors: dict[S, int] = {s: self._initial_cursor for s in subject_ids}
        round_no = 0

        while cursors:
            round_no += 1
            logger.debug("Starting pagination round", round=round_no, active=len(cursors))

            current = dict(cursors)
            result = await self._executor.execute(
                current.keys(),
                lambda subject: build_request(subject, current[subject]),
            )

            cursors = {}
            for subject, outcome in result.items():
                with bind_log_context(subject=subject, round=round_no):
                    next_cursor = await self._handle_outcome(
                        subject, current[subject], outcome, on_page
                    )
                if next_cursor != END_CURSOR:
                    cursors[subject] = next_cursor

            if self._on_round:
                self._on_round(round_no, dict(cursors))

        logger.debug("Pagination finished", rounds=round_no)
        return round_no

    async def _handle_outcome(
        self,
        subject: S,
        cursor: int,
        outcome: Success | TerminalError,
        on_page: Callable[[S, PageResult], bool | Awaitable[bool]],
    ) -> int:
        """Report one outcome and return the subject's next cursor (0 = done)."""
        match outcome:
            case Success(value=value):
                page = self._reader.read(subject, cursor, value)
                if page.is_empty:
                    await _call(on_page, subject, page)
                    return END_CURSOR
                keep_going = await _call(on_page, subject, page)
                if keep_going and page.has_more:
                    return page.next_cursor
                logger.debug(
                    "Subject finished",
                    stopped_by_caller=not keep_going,
                    items=len(page),
                )
                return END_CURSOR
            case TerminalError():
                logger.warning(
                    "Subject failed", kind=outcome.kind.value, status=outcome.status_code
                )
                await _call(on_page, subject, outcome)
                return END_CURSOR
            case _:
                raise TypeError(f"Unexpected outcome type: {type(outcome).__name__}")


async def _call(
    on_page: Callable[[Any, PageResult], bool | Awaitable[bool]],
    subject: Any,
    result: Page | TerminalError,
) -> bool:
    """Invoke a sync or async page callback."""
    decision = on_page(subject, result)
    if inspect.isawaitable(decision):
        decision = await decision
    return bool(decision)
