"""
Integration tests for full client round trips.

Requests go through a real httpx client; pytest-httpx answers them.
"""

from typing import Any

import httpx
import pytest

from batch_pager.client import PagerClient
from batch_pager.errors import FailureKind, TerminalError
from batch_pager.transport import basic_auth_header

# Must match the base URL of the ``client`` fixture.
API_BASE = "https://api.twitter.test"


def api_url(path: str, **params: Any) -> httpx.URL:
    """Absolute URL of an endpoint with its query params."""
    return httpx.URL(f"{API_BASE}{path}", params=params)


def add_page(httpx_mock, path: str, payload: Any, **params: Any) -> None:
    """Register one JSON response for an endpoint and query."""
    httpx_mock.add_response(url=api_url(path, **params), method="GET", json=payload)


def add_text(httpx_mock, path: str, status_code: int, text: str, **params: Any) -> None:
    """Register one plain-text response for an endpoint and query."""
    httpx_mock.add_response(
        url=api_url(path, **params),
        method="GET",
        status_code=status_code,
        text=text,
    )


class TestUserLookup:
    """Tests for single-round lookups."""

    @pytest.mark.asyncio
    async def test_users_and_missing_user(self, httpx_mock, client: PagerClient) -> None:
        """Test found and missing users in one batch."""
        add_page(
            httpx_mock, "/users/show.json", {"id": 12, "screen_name": "jack"}, screen_name="jack"
        )
        add_text(httpx_mock, "/users/show.json", 404, "Not found", user_id=99)

        async with client:
            users = await client.get_users(["jack", 99])

        assert users["jack"]["id"] == 12
        assert isinstance(users[99], TerminalError)
        assert users[99].status_code == 404

        auth = basic_auth_header("me", "secret")["Authorization"]
        assert all(r.headers["Authorization"] == auth for r in httpx_mock.get_requests())

    @pytest.mark.asyncio
    async def test_connection_failure_is_retried(self, httpx_mock, client: PagerClient) -> None:
        """Test a dropped connection is retried until the API answers."""
        httpx_mock.add_exception(
            httpx.ConnectError("Connection refused"),
            url=api_url("/users/show.json", screen_name="jack"),
        )
        add_page(httpx_mock, "/users/show.json", {"id": 12}, screen_name="jack")

        async with client:
            users = await client.get_users(["jack"])

        assert users == {"jack": {"id": 12}}

    @pytest.mark.asyncio
    async def test_retry_ceiling(self, httpx_mock, client: PagerClient) -> None:
        """Test a persistently failing subject ends in RETRIES_EXHAUSTED."""
        for _ in range(4):
            add_text(httpx_mock, "/users/show.json", 500, "Something broke", screen_name="jack")

        async with client:
            users = await client.get_users(["jack"])

        error = users["jack"]
        assert isinstance(error, TerminalError)
        assert error.kind == FailureKind.RETRIES_EXHAUSTED
        assert error.attempts == 4
        assert len(httpx_mock.get_requests()) == 4


class TestFollowerPagination:
    """Tests for paginated follower retrieval."""

    @pytest.mark.asyncio
    async def test_follower_ids_across_pages(self, httpx_mock, client: PagerClient) -> None:
        """Test pages, transient failures and terminal errors together."""
        path = "/followers/ids.json"
        add_text(httpx_mock, path, 502, "Over capacity", cursor=-1, screen_name="jack")
        add_page(httpx_mock, path, {"ids": [1, 2], "next_cursor": 77}, cursor=-1, screen_name="jack")
        add_page(httpx_mock, path, {"ids": [3], "next_cursor": 0}, cursor=77, screen_name="jack")
        add_text(httpx_mock, path, 401, "Not authorized", cursor=-1, screen_name="locked")

        async with client:
            ids = await client.get_follower_ids(["jack", "locked"])

        assert ids["jack"] == [1, 2, 3]
        assert isinstance(ids["locked"], TerminalError)
        assert ids["locked"].kind == FailureKind.UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_followers_limit(self, httpx_mock, client: PagerClient) -> None:
        """Test a limit stops paging before the last page."""
        path = "/statuses/followers.json"
        add_page(
            httpx_mock,
            path,
            {"users": [{"id": 1}, {"id": 2}], "next_cursor": 5},
            cursor=-1,
            user_id=12,
        )
        add_page(
            httpx_mock,
            path,
            {"users": [{"id": 3}, {"id": 4}], "next_cursor": 6},
            cursor=5,
            user_id=12,
        )

        async with client:
            followers = await client.get_followers([12], limit=3)

        assert followers == {12: [{"id": 1}, {"id": 2}, {"id": 3}]}
        assert len(httpx_mock.get_requests()) == 2
