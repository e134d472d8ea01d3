"""
Table-keyed change notification and re-evaluating queries.

Writers call InvalidationTracker.notify() after commit with the tables they
touched; every LiveQuery observing one of those tables re-runs its query and
yields the new result to its consumer.
"""
import asyncio
from collections import defaultdict
from typing import AsyncIterator, Awaitable, Callable, Dict, Generic, Iterable, Set, TypeVar
from moviefinder.logger import get_logger

logger = get_logger()

T = TypeVar("T")

_CLOSED = object()


class InvalidationTracker:
    """Routes table-change notifications to registered observer queues."""

    def __init__(self):
        self._observers: Dict[str, Set[asyncio.Queue]] = defaultdict(set)

    def register(self, tables: Iterable[str], queue: asyncio.Queue):
        for table in tables:
            self._observers[table].add(queue)

    def unregister(self, queue: asyncio.Queue):
        for queues in self._observers.values():
            queues.discard(queue)

    def observer_count(self, table: str) -> int:
        return len(self._observers.get(table, ()))

    def notify(self, *tables: str):
        """Wake each observer of any of `tables` exactly once."""
        woken: Set[asyncio.Queue] = set()
        for table in tables:
            woken.update(self._observers.get(table, ()))
        for queue in woken:
            queue.put_nowait(tables)
        if woken:
            logger.debug(f"Invalidated {tables}, woke {len(woken)} live queries")


class LiveQuery(Generic[T]):
    """
    A cancellable subscription to a query result.

    Iterating yields the current result immediately and again after every
    commit that touches one of `tables`. Notifications that pile up while the
    consumer is busy collapse into a single re-query.
    """

    def __init__(self, tracker: InvalidationTracker, tables: Iterable[str],
                 query: Callable[[], Awaitable[T]]):
        self._tracker = tracker
        self._tables = frozenset(tables)
        self._query = query
        # One queue per active iteration
        self._queues: Set[asyncio.Queue] = set()
        self._closed = False

    @property
    def tables(self) -> frozenset:
        return self._tables

    @property
    def closed(self) -> bool:
        return self._closed

    async def snapshot(self) -> T:
        """Run the query once without subscribing."""
        return await self._query()

    def close(self):
        """Stop emitting. Stored data is untouched."""
        if not self._closed:
            self._closed = True
            for queue in self._queues:
                queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        if self._closed:
            return
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.add(queue)
        # Register before the first query so no commit can slip in between
        self._tracker.register(self._tables, queue)
        try:
            while True:
                result = await self._query()
                if self._closed:
                    return
                yield result
                item = await queue.get()
                while not queue.empty() and item is not _CLOSED:
                    item = queue.get_nowait()
                if item is _CLOSED or self._closed:
                    return
        finally:
            self._queues.discard(queue)
            self._tracker.unregister(queue)
