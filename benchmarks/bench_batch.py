#!/usr/bin/env python3
"""
Batch executor and pagination benchmarks.

Measures round overhead against an in-process mock API.
"""

import asyncio
import json
import time
from typing import Any

import httpx

from batch_pager.batch import BatchExecutor
from batch_pager.pagination import CursorPageReader, CursorPaginator, collect_all
from batch_pager.resilience import Backpressure, BackpressureConfig
from batch_pager.transport import HttpTransport
from batch_pager.types import RequestDescriptor

PAGES_PER_SUBJECT = 5


def handler(request: httpx.Request) -> httpx.Response:
    cursor = int(request.url.params.get("cursor", "-1"))
    page = 1 if cursor == -1 else cursor + 1
    next_cursor = 0 if page >= PAGES_PER_SUBJECT else page
    body = {"ids": list(range(100)), "next_cursor": next_cursor}
    return httpx.Response(200, content=json.dumps(body).encode())


def make_transport() -> HttpTransport:
    return HttpTransport("https://bench.test", mock_transport=httpx.MockTransport(handler))


def ids_request(subject: int, cursor: int = -1) -> RequestDescriptor:
    return RequestDescriptor("/followers/ids.json", params={"user_id": subject, "cursor": cursor})


async def noop_operation() -> str:
    """No-op operation for overhead measurement."""
    return "result"


async def benchmark_batch_round(subjects: int = 1000, concurrency: int = 40) -> dict[str, Any]:
    """Benchmark one batch round."""
    executor = BatchExecutor(make_transport(), concurrency_limit=concurrency)

    start = time.perf_counter()
    result = await executor.execute(range(subjects), ids_request)
    elapsed = time.perf_counter() - start

    return {
        "name": f"Batch round ({concurrency} parallel)",
        "iterations": len(result),
        "elapsed_seconds": elapsed,
        "throughput_ops": subjects / elapsed,
        "latency_us": (elapsed / subjects) * 1_000_000,
    }


async def benchmark_pagination(subjects: int = 200, concurrency: int = 40) -> dict[str, Any]:
    """Benchmark full pagination of every subject."""
    executor = BatchExecutor(make_transport(), concurrency_limit=concurrency)
    paginator = CursorPaginator(executor, reader=CursorPageReader("ids"))
    requests = subjects * PAGES_PER_SUBJECT

    start = time.perf_counter()
    await collect_all(paginator, range(subjects), ids_request)
    elapsed = time.perf_counter() - start

    return {
        "name": f"Pagination ({PAGES_PER_SUBJECT} pages x {subjects} subjects)",
        "iterations": requests,
        "elapsed_seconds": elapsed,
        "throughput_ops": requests / elapsed,
        "latency_us": (elapsed / requests) * 1_000_000,
    }


async def benchmark_backpressure(concurrency: int = 100, iterations: int = 1000) -> dict[str, Any]:
    """Benchmark the request pool alone."""
    bp = Backpressure(BackpressureConfig(max_concurrent=concurrency))

    async def task() -> None:
        async with bp.acquire():
            await noop_operation()

    start = time.perf_counter()
    await asyncio.gather(*(task() for _ in range(iterations)))
    elapsed = time.perf_counter() - start

    return {
        "name": f"Backpressure ({concurrency} parallel)",
        "iterations": iterations,
        "elapsed_seconds": elapsed,
        "throughput_ops": iterations / elapsed,
        "latency_us": (elapsed / iterations) * 1_000_000,
        "peak_inflight": bp.peak_inflight,
    }


async def run_benchmarks() -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("Batch Benchmarks")
    print("=" * 60)
    print()

    results = [await benchmark_backpressure()]
    for concurrency in [10, 40, 100]:
        results.append(await benchmark_batch_round(concurrency=concurrency))
    results.append(await benchmark_pagination())

    for result in results:
        print(f"{result['name']}:")
        print(f"  Throughput: {result['throughput_ops']:.0f} requests/sec")
        print(f"  Latency: {result['latency_us']:.2f} µs/request")
        print()


if __name__ == "__main__":
    asyncio.run(run_benchmarks())
