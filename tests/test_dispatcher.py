import pytest

from trwatch.watch.dispatcher import EventDispatcher
from trwatch.watch.models import EventKind, LifecycleEvent

from conftest import make_snapshot


@pytest.mark.asyncio
async def test_dispatch_calls_handler_with_snapshot():
    seen = []
    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.ADDED, seen.append)

    torrent = make_snapshot("a")
    await dispatcher.dispatch(LifecycleEvent(EventKind.ADDED, torrent))

    assert seen == [torrent]


@pytest.mark.asyncio
async def test_dispatch_awaits_coroutine_handler():
    seen = []

    async def handler(torrent):
        seen.append(torrent.hash_string)

    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.SEEDED, handler)
    await dispatcher.dispatch(LifecycleEvent(EventKind.SEEDED, make_snapshot("a")))

    assert seen == ["a"]


@pytest.mark.asyncio
async def test_dispatch_without_handler_is_noop():
    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.ADDED, lambda _: pytest.fail("wrong handler"))
    await dispatcher.dispatch(LifecycleEvent(EventKind.DELETED, make_snapshot("a")))


@pytest.mark.asyncio
async def test_register_replaces_previous_handler():
    first, second = [], []
    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.MOVED, first.append)
    dispatcher.register(EventKind.MOVED, second.append)

    await dispatcher.dispatch(LifecycleEvent(EventKind.MOVED, make_snapshot("a")))

    assert first == []
    assert len(second) == 1


@pytest.mark.asyncio
async def test_unregister_removes_handler():
    seen = []
    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.STOPPED, seen.append)
    dispatcher.unregister(EventKind.STOPPED)
    dispatcher.unregister(EventKind.STOPPED)

    await dispatcher.dispatch(LifecycleEvent(EventKind.STOPPED, make_snapshot("a")))

    assert seen == []
    assert dispatcher.get_handler(EventKind.STOPPED) is None


@pytest.mark.asyncio
async def test_handler_error_propagates():
    def handler(_):
        raise RuntimeError("boom")

    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.EXISTS, handler)
    with pytest.raises(RuntimeError):
        await dispatcher.dispatch(LifecycleEvent(EventKind.EXISTS, make_snapshot("a")))


@pytest.mark.asyncio
async def test_falsy_callable_handler_is_called():
    class Recorder:
        def __init__(self):
            self.seen = []

        def __len__(self):
            return len(self.seen)

        def __call__(self, torrent):
            self.seen.append(torrent)

    recorder = Recorder()
    assert not recorder
    dispatcher = EventDispatcher()
    dispatcher.register(EventKind.CHECKED, recorder)

    await dispatcher.dispatch(LifecycleEvent(EventKind.CHECKED, make_snapshot("a")))

    assert len(recorder.seen) == 1
