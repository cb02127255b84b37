"""
Example: fetching users and followers for many accounts at once.

Demonstrates:
- Concurrent user lookups with per-subject error isolation
- Cursor pagination with a per-subject item limit
- Stopping one subject early from a page callback
- Watching retries as they happen

Credentials are read from BATCH_PAGER_LOGIN / BATCH_PAGER_PASSWORD or
BATCH_PAGER_TOKEN.
"""

import asyncio
import os

from batch_pager import PagerClient, PagerConfig, RetryEvent, TerminalError
from batch_pager.telemetry import LogLevel, PagerLogger
from batch_pager.transport import resolve_auth_headers

SUBJECTS = os.getenv("SUBJECTS", "jack,biz,12").split(",")


def parse_subject(raw: str) -> str | int:
    """Numeric ids are looked up by user_id, anything else by screen name."""
    return int(raw) if raw.isdigit() else raw


def report_retry(event: RetryEvent) -> None:
    print(f"  retry #{event.attempt} for {event.subject} in {event.delay:g}s ({event.kind.value})")


async def example_users(client: PagerClient, subjects: list[str | int]) -> None:
    """Look up every subject in one round."""
    print("User lookups:")
    users = await client.get_users(subjects)
    for subject, user in users.items():
        if isinstance(user, TerminalError):
            print(f"  {subject}: failed ({user})")
        else:
            print(f"  {subject}: {user.get('followers_count', '?')} followers")
    print()


async def example_follower_ids(client: PagerClient, subjects: list[str | int]) -> None:
    """Collect at most 10,000 follower ids per subject."""
    print("Follower ids (limit 10000):")
    ids = await client.get_follower_ids(subjects, limit=10_000)
    for subject, result in ids.items():
        if isinstance(result, TerminalError):
            print(f"  {subject}: failed ({result})")
        else:
            print(f"  {subject}: {len(result)} ids")
    print()


async def example_first_page_only(client: PagerClient, subjects: list[str | int]) -> None:
    """Print the first follower page of each subject, then stop."""
    print("First follower page:")

    def on_page(subject, page) -> bool:
        if isinstance(page, TerminalError):
            print(f"  {subject}: failed ({page})")
            return False
        names = ", ".join(u.get("screen_name", "?") for u in page.items[:5])
        print(f"  {subject}: {names}")
        return False

    await client.process_followers(subjects, on_page)
    print()


async def main() -> None:
    PagerLogger.configure(level=LogLevel.WARNING)
    subjects = [parse_subject(s) for s in SUBJECTS]

    config = PagerConfig.from_env(concurrency_limit=20, max_retries=8)
    async with PagerClient(
        config, headers=resolve_auth_headers(), on_retry=report_retry
    ) as client:
        await example_users(client, subjects)
        await example_follower_ids(client, subjects)
        await example_first_page_only(client, subjects)


if __name__ == "__main__":
    asyncio.run(main())
