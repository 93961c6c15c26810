# domain_scout/pool.py
"""
Worker pool: a fixed number of asyncio tasks draining one shared work queue.
"""
from __future__ import annotations

import asyncio
import time
from typing import Callable, List, MutableSequence, Optional, Protocol

from domain_scout.logger import logger
from domain_scout.models import ProbeOutcome
from domain_scout.store import ResultStore

__all__ = ("WorkerPool", "SupportsProbe", "RecordHook")


class SupportsProbe(Protocol):
    async def probe(self, domain: str) -> ProbeOutcome: ...


RecordHook = Callable[[ResultStore], object]


class WorkerPool:
    """
    Runs ``concurrency`` workers over a shared queue until it is empty.

    A worker claims a domain with ``queue.pop()``. Nothing is awaited between
    the emptiness check and the pop, so every domain is claimed by exactly one
    worker. An empty queue is the only stop signal.
    """

    def __init__(self, concurrency: int) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency

    async def run(
        self,
        queue: MutableSequence[str],
        prober: SupportsProbe,
        store: ResultStore,
        on_record: Optional[RecordHook] = None,
    ) -> int:
        """Drain *queue*; return how many domains were processed."""
        total = len(queue)
        logger.info("Probing %d domains with %d workers", total, self.concurrency)
        start = time.monotonic()
        workers: List[asyncio.Task] = [
            asyncio.create_task(self._worker(queue, prober, store, on_record), name=f"worker-{i}")
            for i in range(self.concurrency)
        ]
        counts = await asyncio.gather(*workers)
        processed = sum(counts)
        duration = time.monotonic() - start
        logger.info(
            "Done: %d domains in %.2f s (%.2f/s)",
            processed,
            duration,
            processed / duration if duration else 0,
        )
        return processed

    async def _worker(
        self,
        queue: MutableSequence[str],
        prober: SupportsProbe,
        store: ResultStore,
        on_record: Optional[RecordHook],
    ) -> int:
        processed = 0
        while True:
            try:
                domain = queue.pop()
            except IndexError:
                return processed

            try:
                outcome = await prober.probe(domain)
            except Exception as exc:
                logger.exception("Prober crashed on %s", domain)
                outcome = ProbeOutcome.failure(domain, f"Unexpected error: {exc}")

            store.record(outcome)
            processed += 1
            self._report(outcome, remaining=len(queue))
            if on_record is not None:
                on_record(store)

    @staticmethod
    def _report(outcome: ProbeOutcome, remaining: int) -> None:
        if outcome.data is not None:
            logger.info(
                "%s [%d left] %d %s",
                outcome.domain,
                remaining,
                outcome.data.status,
                outcome.data.title or "-",
            )
        else:
            logger.info("%s [%d left] error: %s", outcome.domain, remaining, outcome.error)
