"""
Batch executor for concurrent request rounds.

Sends one request per subject through a shared concurrency-bounded pool,
classifies every response, and resubmits retryable failures with quadratic
backoff until each subject reaches a success or a terminal error.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from batch_pager.errors import (
    FailureKind,
    MalformedResponseError,
    TerminalError,
    TransportError,
    classify_status,
    is_retryable,
)
from batch_pager.resilience import (
    DEFAULT_CONCURRENCY_LIMIT,
    BackoffPolicy,
    Backpressure,
    BackpressureConfig,
)
from batch_pager.telemetry import bind_log_context, get_logger
from batch_pager.transport.http import decode_json
from batch_pager.types import Outcome, Success

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from batch_pager.transport.http import HttpTransport, RawResponse
    from batch_pager.types import RequestDescriptor

S = TypeVar("S", bound=Hashable)

logger = get_logger("batch_pager.batch")


@dataclass(frozen=True)
class RetryEvent:
    """A retry about to happen.

    Attributes:
        subject: Subject id of the request
        attempt: Retry number for this request (1-based)
        delay: Backoff before resubmitting, in seconds
        kind: Failure that triggered the retry
        status_code: Status of the failed response (None on transport failure)
        url: Request URL
    """

    subject: Hashable
    attempt: int
    delay: float
    kind: FailureKind
    status_code: int | None
    url: str


@dataclass
class _Attempt:
    """Classified result of sending a request once."""

    kind: FailureKind | None
    response: RawResponse | None = None
    value: object = None

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response else None

    def to_error(
        self,
        subject: Hashable,
        url: str,
        *,
        kind: FailureKind,
        attempts: int,
    ) -> TerminalError:
        return TerminalError(
            subject,
            kind=kind,
            status_code=self.status_code,
            body=self.response.text if self.response else None,
            url=url,
            attempts=attempts,
        )


class BatchResult(Mapping[S, Outcome], Generic[S]):
    """Outcomes of one batch round, keyed by subject id.

    Behaves as a read-only mapping of subject id to ``Success`` or
    ``TerminalError``, with a few aggregate statistics on top.

    Attributes:
        total_time_ms: Wall-clock time of the round in milliseconds
        retry_count: Retries performed across all subjects
    """

    def __init__(
        self,
        outcomes: dict[S, Outcome],
        *,
        total_time_ms: float = 0.0,
        retry_count: int = 0,
    ) -> None:
        self._outcomes = outcomes
        self.total_time_ms = total_time_ms
        self.retry_count = retry_count

    def __getitem__(self, subject: S) -> Outcome:
        return self._outcomes[subject]

    def __iter__(self) -> Iterator[S]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    @property
    def successful_count(self) -> int:
        """Get count of successful subjects."""
        return sum(1 for o in self._outcomes.values() if isinstance(o, Success))

    @property
    def failed_count(self) -> int:
        """Get count of subjects that ended in a terminal error."""
        return len(self._outcomes) - self.successful_count

    @property
    def all_successful(self) -> bool:
        return self.failed_count == 0

    def successes(self) -> dict[S, object]:
        """Decoded values of the successful subjects."""
        return {
            s: o.value for s, o in self._outcomes.items() if isinstance(o, Success)
        }

    def errors(self) -> dict[S, TerminalError]:
        """Terminal errors keyed by subject."""
        return {
            s: o for s, o in self._outcomes.items() if isinstance(o, TerminalError)
        }

    def values_or_errors(self) -> dict[S, object]:
        """Map each subject to its decoded value or its TerminalError."""
        return {
            s: o.value if isinstance(o, Success) else o
            for s, o in self._outcomes.items()
        }

    def __repr__(self) -> str:
        return (
            f"BatchResult(ok={self.successful_count}, failed={self.failed_count}, "
            f"retries={self.retry_count})"
        )


class BatchExecutor:
    """Runs a round of concurrent requests, one per subject.

    Each subject's request is built once and resubmitted unchanged on every
    retry. A retrying subject sleeps without holding a pool permit, so its
    backoff never stalls the other subjects of the round.

    Example:
        >>> executor = BatchExecutor(transport, concurrency_limit=20)
        >>> result = await executor.execute(
        ...     ["jack", "biz"],
        ...     lambda name: RequestDescriptor("/users/show.json", params={"screen_name": name}),
        ... )
        >>> result["jack"]
        Success(value={...}, attempts=1)
    """

    def __init__(
        self,
        transport: HttpTransport,
        *,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        backoff: BackoffPolicy | None = None,
        on_retry: Callable[[RetryEvent], None] | None = None,
    ) -> None:
        """Initialize batch executor.

        Args:
            transport: HTTP capability used to send requests
            concurrency_limit: Maximum requests in flight at once
            backoff: Retry backoff policy (default: unbounded, 1s unit)
            on_retry: Optional callback invoked before each retry sleep
        """
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")
        self._transport = transport
        self._concurrency_limit = concurrency_limit
        self._backoff = backoff or BackoffPolicy()
        self._on_retry = on_retry

    @property
    def concurrency_limit(self) -> int:
        return self._concurrency_limit

    @property
    def backoff(self) -> BackoffPolicy:
        return self._backoff

    async def execute(
        self,
        subject_ids: Iterable[S],
        build_request: Callable[[S], RequestDescriptor],
    ) -> BatchResult[S]:
        """Execute one request per subject and wait for all of them.

        Args:
            subject_ids: Subjects to query; duplicates are collapsed
            build_request: Maps a subject id to its request

        Returns:
            BatchResult holding exactly one outcome per distinct subject
        """
        start_time = time.time()
        subjects = list(dict.fromkeys(subject_ids))
        pool = Backpressure(BackpressureConfig(max_concurrent=self._concurrency_limit))
        retries: dict[S, int] = {}

        requests = {subject: build_request(subject) for subject in subjects}
        tasks = [
            asyncio.create_task(self._run_subject(subject, requests[subject], pool, retries))
            for subject in subjects
        ]
        try:
            outcomes = await asyncio.gather(*tasks)
        except BaseException:
            # No subject may outlive a failed round.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.debug(
            "Batch round finished",
            subjects=len(subjects),
            retries=sum(retries.values()),
            peak_inflight=pool.peak_inflight,
            max_concurrent=pool.max_concurrent,
        )

        return BatchResult(
            dict(zip(subjects, outcomes, strict=True)),
            total_time_ms=(time.time() - start_time) * 1000,
            retry_count=sum(retries.values()),
        )

    async def _run_subject(
        self,
        subject: S,
        request: RequestDescriptor,
        pool: Backpressure,
        retries: dict[S, int],
    ) -> Outcome:
        """Drive one subject's request until it succeeds or fails terminally."""
        url = self._transport.resolve_url(request)
        attempt = 0

        with bind_log_context(subject=subject):
            while True:
                result = await self._attempt(request, pool)
                retries[subject] = attempt

                if result.kind is None:
                    return Success(value=result.value, attempts=attempt + 1)

                if not is_retryable(result.kind):
                    logger.warning(
                        "Terminal failure",
                        kind=result.kind.value,
                        status=result.status_code,
                        url=url,
                    )
                    return result.to_error(
                        subject, url, kind=result.kind, attempts=attempt + 1
                    )

                attempt += 1
                if not self._backoff.should_retry(attempt):
                    logger.error(
                        "Retries exhausted",
                        kind=result.kind.value,
                        status=result.status_code,
                        url=url,
                        retries=attempt - 1,
                    )
                    return result.to_error(
                        subject,
                        url,
                        kind=FailureKind.RETRIES_EXHAUSTED,
                        attempts=attempt,
                    )

                delay = self._backoff.delay_for(attempt)
                logger.info(
                    f"Will retry after sleeping for {delay:g} seconds",
                    kind=result.kind.value,
                    status=result.status_code,
                    attempt=attempt,
                    url=url,
                )
                if self._on_retry:
                    self._on_retry(
                        RetryEvent(
                            subject=subject,
                            attempt=attempt,
                            delay=delay,
                            kind=result.kind,
                            status_code=result.status_code,
                            url=url,
                        )
                    )
                # Sleep outside the pool so other subjects keep their slots.
                await asyncio.sleep(delay)

    async def _attempt(self, request: RequestDescriptor, pool: Backpressure) -> _Attempt:
        """Send the request once and classify the result."""
        async with pool.acquire():
            try:
                response = await self._transport.send(request)
            except TransportError as e:
                logger.warning("Transport failure", error=e.message, url=e.url)
                return _Attempt(kind=FailureKind.TRANSPORT)

        logger.info(f"[{response.status_code}] - {response.url}")

        kind = classify_status(response.status_code)
        if kind is not None:
            return _Attempt(kind=kind, response=response)

        try:
            value = decode_json(response.body)
        except MalformedResponseError as e:
            logger.warning("Malformed response body", error=e.message, url=response.url)
            return _Attempt(kind=FailureKind.MALFORMED, response=response)

        return _Attempt(kind=None, response=response, value=value)
