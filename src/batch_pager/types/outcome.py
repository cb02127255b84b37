"""
Per-subject outcomes of a batch round and pagination pages.

An outcome is either a ``Success`` carrying the decoded JSON value or a
``TerminalError``. Inspect it with ``match``:

    >>> match outcome:
    ...     case Success(value=value):
    ...         handle(value)
    ...     case TerminalError(status_code=code):
    ...         report(code)
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from batch_pager.errors import TerminalError


@dataclass(frozen=True)
class Success:
    """A request that completed with a decodable 2xx body.

    Attributes:
        value: Decoded JSON value
        attempts: Number of attempts it took, including the successful one
    """

    value: Any
    attempts: int = 1


Outcome: TypeAlias = Success | TerminalError


@dataclass
class Page:
    """One page of a paginated listing for a single subject.

    Attributes:
        subject: Subject id the page belongs to
        items: Items on this page
        next_cursor: Cursor for the following page (0 = no further pages)
        raw: Decoded response body the page was read from
    """

    subject: Hashable
    items: list[Any] = field(default_factory=list)
    next_cursor: int = 0
    raw: Any = None

    @property
    def is_empty(self) -> bool:
        """True when the page carries no items."""
        return not self.items

    @property
    def has_more(self) -> bool:
        """True when the API reported another page."""
        return self.next_cursor != 0

    def __len__(self) -> int:
        return len(self.items)


PageResult: TypeAlias = Page | TerminalError
