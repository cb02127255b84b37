"""
Request builders for the users / followers / timeline endpoints.

Integer subject ids are sent as ``user_id``, anything else as
``screen_name``.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

from batch_pager.types import RequestDescriptor

USERS_SHOW_PATH = "/users/show.json"
FOLLOWERS_PATH = "/statuses/followers.json"
FOLLOWER_IDS_PATH = "/followers/ids.json"
USER_TIMELINE_PATH = "/statuses/user_timeline.json"


def subject_params(subject: Hashable) -> dict[str, Any]:
    """Query params identifying a subject."""
    if isinstance(subject, int) and not isinstance(subject, bool):
        return {"user_id": subject}
    return {"screen_name": str(subject)}


class Endpoints:
    """Builds request descriptors carrying a fixed set of auth headers."""

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._headers = dict(headers or {})

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def _request(self, path: str, params: dict[str, Any]) -> RequestDescriptor:
        return RequestDescriptor(path, headers=self._headers, params=params)

    def users_show(self, subject: Hashable) -> RequestDescriptor:
        return self._request(USERS_SHOW_PATH, subject_params(subject))

    def followers(self, subject: Hashable, cursor: int) -> RequestDescriptor:
        return self._request(FOLLOWERS_PATH, {"cursor": cursor, **subject_params(subject)})

    def follower_ids(self, subject: Hashable, cursor: int) -> RequestDescriptor:
        return self._request(FOLLOWER_IDS_PATH, {"cursor": cursor, **subject_params(subject)})

    def user_timeline(self, subject: Hashable, page: int, count: int = 200) -> RequestDescriptor:
        return self._request(
            USER_TIMELINE_PATH,
            {**subject_params(subject), "page": page, "count": count},
        )
