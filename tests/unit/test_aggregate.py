"""Tests for result aggregation."""

from typing import Any

import pytest
from fakes import ScriptedApi, cursor_page, text_response

from batch_pager.errors import FailureKind, TerminalError
from batch_pager.pagination import (
    CursorPageReader,
    CursorPaginator,
    ResultAggregator,
    collect_all,
    collect_with_limit,
)
from batch_pager.types import RequestDescriptor


def ids_request(subject: Any, cursor: int) -> RequestDescriptor:
    return RequestDescriptor(
        "/followers/ids.json", params={"cursor": cursor, "screen_name": subject}
    )


@pytest.fixture
def paginator(make_executor) -> CursorPaginator:
    return CursorPaginator(make_executor(), reader=CursorPageReader("ids"))


class TestCollectAll:
    """Tests for collect_all."""

    @pytest.mark.asyncio
    async def test_concatenates_pages(self, api: ScriptedApi, paginator) -> None:
        """Test pages are concatenated in order per subject."""
        api.pages("jack", [cursor_page([1, 2], 9, "ids"), cursor_page([3], 0, "ids")])
        api.pages("biz", [cursor_page([7], 0, "ids")])

        results = await collect_all(paginator, ["jack", "biz"], ids_request)

        assert results == {"jack": [1, 2, 3], "biz": [7]}

    @pytest.mark.asyncio
    async def test_error_replaces_results(self, api: ScriptedApi, paginator) -> None:
        """Test a terminal error discards items gathered before it."""
        api.script("jack", -1, text_response(200, '{"ids": [1, 2], "next_cursor": 4}'))
        api.script("jack", 4, text_response(401, "Not authorized"))
        api.pages("biz", [cursor_page([7], 0, "ids")])

        results = await collect_all(paginator, ["jack", "biz"], ids_request)

        error = results["jack"]
        assert isinstance(error, TerminalError)
        assert error.kind == FailureKind.UNAUTHORIZED
        assert error.body == "Not authorized"
        assert results["biz"] == [7]

    @pytest.mark.asyncio
    async def test_empty_first_page(self, api: ScriptedApi, paginator) -> None:
        """Test a subject with no items maps to an empty list."""
        api.pages("quiet", [cursor_page([], 0, "ids")])

        results = await collect_all(paginator, ["quiet"], ids_request)

        assert results == {"quiet": []}


class TestCollectWithLimit:
    """Tests for limited collection."""

    @pytest.mark.asyncio
    async def test_truncates_and_stops(self, api: ScriptedApi, paginator) -> None:
        """Test the limit cuts the list and skips further pages."""
        api.pages(
            "jack",
            [
                cursor_page([1, 2, 3], 10, "ids"),
                cursor_page([4, 5, 6], 20, "ids"),
                cursor_page([7, 8, 9], 0, "ids"),
            ],
        )

        results = await collect_with_limit(paginator, ["jack"], ids_request, 5)

        assert results == {"jack": [1, 2, 3, 4, 5]}
        assert api.calls_by_subject["jack"] == ["-1", "10"]

    @pytest.mark.asyncio
    async def test_limit_is_per_subject(self, api: ScriptedApi, paginator) -> None:
        """Test reaching the limit for one subject leaves others paging."""
        api.pages("big", [cursor_page([1, 2, 3, 4], 5, "ids"), cursor_page([5], 0, "ids")])
        api.pages("small", [cursor_page([1], 6, "ids"), cursor_page([2], 0, "ids")])

        results = await collect_with_limit(paginator, ["big", "small"], ids_request, 3)

        assert results == {"big": [1, 2, 3], "small": [1, 2]}
        assert api.calls_by_subject["big"] == ["-1"]
        assert api.calls_by_subject["small"] == ["-1", "6"]

    @pytest.mark.asyncio
    async def test_limit_exact_boundary(self, api: ScriptedApi, paginator) -> None:
        """Test hitting the limit exactly at a page boundary stops."""
        api.pages("jack", [cursor_page([1, 2], 3, "ids"), cursor_page([3, 4], 0, "ids")])

        results = await collect_with_limit(paginator, ["jack"], ids_request, 2)

        assert results == {"jack": [1, 2]}
        assert api.calls_by_subject["jack"] == ["-1"]

    def test_negative_limit(self, paginator) -> None:
        """Test negative limits are rejected."""
        with pytest.raises(ValueError):
            ResultAggregator(paginator, limit=-1)
