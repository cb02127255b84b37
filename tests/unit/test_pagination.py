"""Tests for cursor pagination and page readers."""

from typing import Any

import pytest
from fakes import ScriptedApi, cursor_page, json_response, text_response

from batch_pager.errors import FailureKind, TerminalError
from batch_pager.pagination import (
    END_CURSOR,
    START_CURSOR,
    CursorPageReader,
    CursorPaginator,
    PageNumberReader,
)
from batch_pager.types import Page, PageResult, RequestDescriptor


def ids_request(subject: Any, cursor: int) -> RequestDescriptor:
    return RequestDescriptor(
        "/followers/ids.json", params={"cursor": cursor, "screen_name": subject}
    )


def timeline_request(subject: Any, page: int) -> RequestDescriptor:
    return RequestDescriptor(
        "/statuses/user_timeline.json",
        params={"screen_name": subject, "page": page, "count": 200},
    )


class PageLog:
    """Records every on_page call and answers with a fixed decision."""

    def __init__(self, decide=lambda subject, page: True) -> None:
        self.seen: list[tuple[Any, PageResult]] = []
        self._decide = decide

    def __call__(self, subject: Any, page: PageResult) -> bool:
        self.seen.append((subject, page))
        return self._decide(subject, page)

    def for_subject(self, subject: Any) -> list[PageResult]:
        return [page for s, page in self.seen if s == subject]


class TestCursorPageReader:
    """Tests for CursorPageReader."""

    def test_reads_envelope(self) -> None:
        """Test items and next_cursor are extracted."""
        reader = CursorPageReader("ids")
        page = reader.read("jack", -1, {"ids": [1, 2], "next_cursor": 1300})
        assert page == Page(
            subject="jack",
            items=[1, 2],
            next_cursor=1300,
            raw={"ids": [1, 2], "next_cursor": 1300},
        )

    def test_missing_cursor_ends(self) -> None:
        """Test a page without next_cursor is the last one."""
        page = CursorPageReader("users").read("jack", -1, {"users": [{"id": 1}]})
        assert page.next_cursor == END_CURSOR
        assert not page.has_more

    def test_non_envelope_is_empty(self) -> None:
        """Test unexpected bodies read as an empty page."""
        page = CursorPageReader("ids").read("jack", -1, ["not", "an", "envelope"])
        assert page.is_empty

    def test_initial_cursor(self) -> None:
        """Test cursor paging starts at -1."""
        assert CursorPageReader("ids").initial_cursor == START_CURSOR == -1


class TestPageNumberReader:
    """Tests for PageNumberReader."""

    def test_advances_page(self) -> None:
        """Test a non-empty page points at the next page number."""
        page = PageNumberReader().read("jack", 3, [{"id": 1}])
        assert page.next_cursor == 4

    def test_empty_page_ends(self) -> None:
        """Test an empty list ends paging."""
        page = PageNumberReader().read("jack", 3, [])
        assert page.next_cursor == END_CURSOR
        assert page.is_empty

    def test_initial_page(self) -> None:
        """Test page numbers start at 1."""
        assert PageNumberReader().initial_cursor == 1


class TestCursorPaginator:
    """Tests for CursorPaginator."""

    @pytest.mark.asyncio
    async def test_stops_at_zero_cursor(self, api: ScriptedApi, make_executor) -> None:
        """Test a zero next_cursor on page two ends after two rounds."""
        api.pages("jack", [cursor_page([1, 2], 1300, "ids"), cursor_page([3], 0, "ids")])
        log = PageLog()

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        rounds = await paginator.paginate(["jack"], ids_request, log)

        assert rounds == 2
        assert [p.items for p in log.for_subject("jack")] == [[1, 2], [3]]
        assert api.calls_by_subject["jack"] == ["-1", "1300"]

    @pytest.mark.asyncio
    async def test_subjects_stop_independently(self, api: ScriptedApi, make_executor) -> None:
        """Test a subject stopped by the caller does not affect the others."""
        api.pages("a", [cursor_page([1], 11, "ids"), cursor_page([2], 12, "ids")])
        api.pages(
            "b",
            [
                cursor_page([10], 21, "ids"),
                cursor_page([20], 22, "ids"),
                cursor_page([30], 0, "ids"),
            ],
        )
        snapshots: list[tuple[int, dict[Any, int]]] = []
        log = PageLog(decide=lambda subject, page: subject != "a")

        paginator = CursorPaginator(
            make_executor(),
            reader=CursorPageReader("ids"),
            on_round=lambda n, cursors: snapshots.append((n, cursors)),
        )
        rounds = await paginator.paginate(["a", "b"], ids_request, log)

        assert rounds == 3
        assert snapshots == [(1, {"b": 21}), (2, {"b": 22}), (3, {})]
        assert api.calls_by_subject["a"] == ["-1"]
        assert api.calls_by_subject["b"] == ["-1", "21", "22"]
        assert len(log.for_subject("a")) == 1

    @pytest.mark.asyncio
    async def test_terminal_error_ends_subject(self, api: ScriptedApi, make_executor) -> None:
        """Test a terminal error is reported once and ends the subject."""
        api.script("ghost", -1, text_response(404, "Not found"))
        api.pages("jack", [cursor_page([1], 5, "ids"), cursor_page([2], 0, "ids")])
        log = PageLog()

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        rounds = await paginator.paginate(["ghost", "jack"], ids_request, log)

        assert rounds == 2
        [error] = log.for_subject("ghost")
        assert isinstance(error, TerminalError)
        assert error.kind == FailureKind.NOT_FOUND
        assert api.calls_by_subject["ghost"] == ["-1"]

    @pytest.mark.asyncio
    async def test_empty_page_ends_subject(self, api: ScriptedApi, make_executor) -> None:
        """Test an empty page ends paging even with a non-zero cursor."""
        api.pages("jack", [cursor_page([], 999, "ids")])
        log = PageLog()

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        rounds = await paginator.paginate(["jack"], ids_request, log)

        assert rounds == 1
        [page] = log.for_subject("jack")
        assert isinstance(page, Page)
        assert page.is_empty

    @pytest.mark.asyncio
    async def test_transient_failure_mid_pagination(
        self, api: ScriptedApi, make_executor
    ) -> None:
        """Test a retried page does not disturb the cursor sequence."""
        api.script("jack", -1, json_response(200, cursor_page([1], 7, "ids")))
        api.script(
            "jack",
            7,
            text_response(502, "Over capacity"),
            json_response(200, cursor_page([2], 0, "ids")),
        )
        log = PageLog()

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        rounds = await paginator.paginate(["jack"], ids_request, log)

        assert rounds == 2
        assert [p.items for p in log.for_subject("jack")] == [[1], [2]]
        assert api.calls_by_subject["jack"] == ["-1", "7", "7"]

    @pytest.mark.asyncio
    async def test_cursor_echoed_verbatim(self, api: ScriptedApi, make_executor) -> None:
        """Test large opaque cursors are passed back unchanged."""
        big = 1374004777531007833
        api.pages("jack", [cursor_page([1], big, "ids"), cursor_page([2], 0, "ids")])

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        await paginator.paginate(["jack"], ids_request, PageLog())

        assert api.calls_by_subject["jack"] == ["-1", str(big)]

    @pytest.mark.asyncio
    async def test_async_callback(self, api: ScriptedApi, make_executor) -> None:
        """Test on_page may be a coroutine function."""
        api.pages("jack", [cursor_page([1], 2, "ids"), cursor_page([2], 0, "ids")])
        seen: list[Any] = []

        async def on_page(subject: Any, page: PageResult) -> bool:
            seen.extend(page.items)
            return True

        paginator = CursorPaginator(make_executor(), reader=CursorPageReader("ids"))
        rounds = await paginator.paginate(["jack"], ids_request, on_page)

        assert rounds == 2
        assert seen == [1, 2]

    @pytest.mark.asyncio
    async def test_no_subjects(self, make_executor) -> None:
        """Test an empty subject list runs no rounds."""
        paginator = CursorPaginator(make_executor())
        assert await paginator.paginate([], ids_request, PageLog()) == 0

    @pytest.mark.asyncio
    async def test_page_number_mode(self, api: ScriptedApi, make_executor) -> None:
        """Test bare-list pages are walked by page number until empty."""
        api.script("jack", 1, json_response(200, [{"id": 1}, {"id": 2}]))
        api.script("jack", 2, json_response(200, [{"id": 3}]))
        api.script("jack", 3, json_response(200, []))
        log = PageLog()

        paginator = CursorPaginator(make_executor(), reader=PageNumberReader())
        rounds = await paginator.paginate(["jack"], timeline_request, log)

        assert rounds == 3
        assert api.calls_by_subject["jack"] == ["1", "2", "3"]
        assert [len(p) for p in log.for_subject("jack")] == [2, 1, 0]

    @pytest.mark.asyncio
    async def test_initial_cursor_override(self, api: ScriptedApi, make_executor) -> None:
        """Test a custom starting cursor."""
        api.pages("jack", [cursor_page([1], 0, "ids")], start=500)

        paginator = CursorPaginator(
            make_executor(), reader=CursorPageReader("ids"), initial_cursor=500
        )
        await paginator.paginate(["jack"], ids_request, PageLog())

        assert api.calls_by_subject["jack"] == ["500"]
