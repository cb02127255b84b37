"""
Page readers: turn a decoded response body into a ``Page``.

Two shapes are supported:

- Cursor envelopes, ``{"users": [...], "next_cursor": 1374004777531007833}``.
  ``next_cursor`` is echoed verbatim into the next request; 0 ends paging.
- Bare lists addressed by page number (1, 2, 3, ...); an empty list ends
  paging.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any

from batch_pager.types import Page

START_CURSOR = -1
END_CURSOR = 0


class PageReader(ABC):
    """Reads one page of items out of a decoded response body."""

    initial_cursor: int = START_CURSOR

    @abstractmethod
    def read(self, subject: Hashable, cursor: int, value: Any) -> Page:
        """Build the page for ``subject`` fetched at ``cursor``.

        Args:
            subject: Subject id
            cursor: Cursor the page was requested with
            value: Decoded response body

        Returns:
            Page with ``next_cursor`` set to 0 when no further page exists
        """


class CursorPageReader(PageReader):
    """Reads ``{items_key: [...], "next_cursor": n}`` envelopes."""

    initial_cursor = START_CURSOR

    def __init__(self, items_key: str, cursor_key: str = "next_cursor") -> None:
        self.items_key = items_key
        self.cursor_key = cursor_key

    def read(self, subject: Hashable, cursor: int, value: Any) -> Page:
        if not isinstance(value, dict):
            return Page(subject=subject, raw=value)

        items = value.get(self.items_key) or []
        if not isinstance(items, list):
            items = [items]

        next_cursor = value.get(self.cursor_key)
        if next_cursor is None:
            next_cursor = END_CURSOR

        return Page(subject=subject, items=list(items), next_cursor=next_cursor, raw=value)

    def __repr__(self) -> str:
        return f"CursorPageReader(items_key={self.items_key!r})"


class PageNumberReader(PageReader):
    """Reads bare-list pages addressed by a 1-based page number."""

    initial_cursor = 1

    def read(self, subject: Hashable, cursor: int, value: Any) -> Page:
        items = value if isinstance(value, list) else []
        next_cursor = cursor + 1 if items else END_CURSOR
        return Page(subject=subject, items=list(items), next_cursor=next_cursor, raw=value)
