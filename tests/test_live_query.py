import asyncio
import pytest
from moviefinder.services.live_query import InvalidationTracker, LiveQuery


def test_notify_wakes_only_observers_of_touched_tables():
    tracker = InvalidationTracker()
    movies_queue, actors_queue = asyncio.Queue(), asyncio.Queue()
    tracker.register({"movies"}, movies_queue)
    tracker.register({"actors"}, actors_queue)

    tracker.notify("movies")

    assert movies_queue.qsize() == 1
    assert actors_queue.empty()


def test_observer_of_several_tables_is_woken_once_per_notify():
    tracker = InvalidationTracker()
    queue = asyncio.Queue()
    tracker.register({"movies", "actors"}, queue)

    tracker.notify("movies", "actors")

    assert queue.qsize() == 1


def test_unregister_removes_queue_from_all_tables():
    tracker = InvalidationTracker()
    queue = asyncio.Queue()
    tracker.register({"movies", "actors"}, queue)

    tracker.unregister(queue)
    tracker.notify("movies", "actors")

    assert queue.empty()
    assert tracker.observer_count("movies") == 0
    assert tracker.observer_count("actors") == 0


async def test_live_query_reruns_query_on_notification():
    tracker = InvalidationTracker()
    source = ["a"]

    async def query():
        return list(source)

    live = LiveQuery(tracker, {"letters"}, query)
    results = live.__aiter__()
    assert await results.__anext__() == ["a"]

    source.append("b")
    tracker.notify("letters")

    assert await asyncio.wait_for(results.__anext__(), 1) == ["a", "b"]
    live.close()


async def test_unrelated_notification_does_not_wake_live_query():
    tracker = InvalidationTracker()
    calls = []

    async def query():
        calls.append(1)
        return len(calls)

    live = LiveQuery(tracker, {"movies"}, query)
    results = live.__aiter__()
    await results.__anext__()

    pending = asyncio.ensure_future(results.__anext__())
    tracker.notify("actors")
    await asyncio.sleep(0.05)

    assert not pending.done()
    assert calls == [1]
    live.close()
    with pytest.raises(StopAsyncIteration):
        await pending


async def test_closed_live_query_yields_nothing():
    tracker = InvalidationTracker()

    async def query():
        return 1

    live = LiveQuery(tracker, {"movies"}, query)
    live.close()

    assert [result async for result in live] == []
    assert live.closed
    assert tracker.observer_count("movies") == 0


async def test_snapshot_does_not_subscribe():
    tracker = InvalidationTracker()

    async def query():
        return "value"

    live = LiveQuery(tracker, {"movies"}, query)

    assert await live.snapshot() == "value"
    assert tracker.observer_count("movies") == 0


async def test_each_iteration_gets_its_own_notifications():
    tracker = InvalidationTracker()
    source = ["a"]

    async def query():
        return list(source)

    live = LiveQuery(tracker, {"letters"}, query)
    first, second = live.__aiter__(), live.__aiter__()
    assert await first.__anext__() == ["a"]
    assert await second.__anext__() == ["a"]
    assert tracker.observer_count("letters") == 2

    source.append("b")
    tracker.notify("letters")

    assert await asyncio.wait_for(first.__anext__(), 1) == ["a", "b"]
    assert await asyncio.wait_for(second.__anext__(), 1) == ["a", "b"]

    await first.aclose()
    assert tracker.observer_count("letters") == 1

    live.close()
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(second.__anext__(), 1)
    assert tracker.observer_count("letters") == 0
