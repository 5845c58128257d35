from __future__ import annotations

import asyncio
from typing import FrozenSet, Set


class Frontier:
    """
    FIFO of normalized URLs waiting to be crawled.

    Thin wrapper over asyncio.Queue: a get() hands each entry to exactly one
    worker, and join() returns once every entry taken has been marked done.
    The same URL may sit in the queue more than once when two pages discover
    it concurrently; the engine drops repeats on dequeue.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self.total_enqueued = 0

    def put(self, url: str) -> None:
        self._queue.put_nowait(url)
        self.total_enqueued += 1

    async def get(self) -> str:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def __len__(self) -> int:
        return self._queue.qsize()


class VisitedSet:
    """Monotonic set of processed URLs. add() is a single step on the event loop."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()

    def add(self, url: str) -> bool:
        """Return True if the URL was not present yet."""
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def snapshot(self) -> FrozenSet[str]:
        return frozenset(self._urls)


class PageCounter:
    """Counts URLs dequeued for processing against the page budget."""

    def __init__(self, budget: int) -> None:
        self.budget = budget
        self.count = 0

    def try_increment(self) -> bool:
        """Claim one page of budget. False once the budget is spent."""
        if self.count >= self.budget:
            return False
        self.count += 1
        return True
