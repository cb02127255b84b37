"""
Integration test fixtures.

Builds clients whose requests are intercepted by pytest-httpx.
"""

from __future__ import annotations

import pytest

from batch_pager.client import PagerClient

API_BASE = "https://api.twitter.test"


@pytest.fixture
def client() -> PagerClient:
    """Client with instant, bounded retries."""
    return (
        PagerClient.builder()
        .base_url(API_BASE)
        .basic_auth("me", "secret")
        .backoff_unit(0)
        .max_retries(3)
        .concurrency(4)
        .build()
    )
