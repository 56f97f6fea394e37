import asyncio
import logging
from asyncio import Task
from collections.abc import Callable
from enum import Enum

from ..rpc.transport import AuthChallengeError, RpcError
from .diff import diff
from .dispatcher import EventDispatcher
from .fetcher import SnapshotFetcher
from .models import SnapshotSet


type ErrorObserver = Callable[[Exception], None]


_L = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class PollScheduler:
    """
    Polls the daemon on a fixed interval and dispatches lifecycle events.

    At most one poll is in flight; a tick that finds the previous poll still
    running is skipped. `stop()` only prevents future ticks, an in-flight poll
    finishes and dispatches its events.
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        dispatcher: EventDispatcher,
        *,
        interval: float = 1.0,
        on_error: ErrorObserver | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"invalid poll interval: {interval}")
        self._fetcher = fetcher
        self._dispatcher = dispatcher
        self._interval = interval
        self._on_error = on_error
        self._state = SchedulerState.IDLE
        self._previous: SnapshotSet | None = None
        self._busy = False
        self._ticker: Task[None] | None = None
        self._poll_task: Task[None] | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def previous(self) -> SnapshotSet | None:
        return self._previous

    @property
    def busy(self) -> bool:
        return self._busy

    def start(self) -> None:
        if self._state == SchedulerState.RUNNING:
            return
        self._state = SchedulerState.RUNNING
        self._ticker = asyncio.create_task(self._tick_forever())
        _L.info(f"polling every {self._interval}s")

    def stop(self) -> None:
        if self._state != SchedulerState.RUNNING:
            return
        if self._ticker:
            self._ticker.cancel()
        self._state = SchedulerState.STOPPING if self._busy else SchedulerState.IDLE
        _L.info("polling stopped")

    async def join(self) -> None:
        """Wait until the ticker and the in-flight poll are done"""
        pending = [_ for _ in (self._ticker, self._poll_task) if _]
        if pending:
            await asyncio.wait(pending)

    async def poll(self) -> bool:
        """Run one fetch-diff-dispatch cycle, False if one is already running"""
        if self._busy:
            return False
        self._busy = True
        try:
            await self._poll()
        finally:
            self._release()
        return True

    async def _tick_forever(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self._tick()

    def _tick(self) -> None:
        if self._busy:
            _L.debug("previous poll is still running, skipped")
            return
        self._busy = True
        self._poll_task = asyncio.create_task(self._guarded_poll())

    async def _guarded_poll(self) -> None:
        try:
            await self._poll()
        except Exception:
            _L.exception("poll error")
        finally:
            self._release()

    def _release(self) -> None:
        self._busy = False
        if self._state == SchedulerState.STOPPING:
            self._state = SchedulerState.IDLE

    async def _poll(self) -> None:
        try:
            current = await self._fetcher.fetch()
        except AuthChallengeError as e:
            _L.warning(f"unauthorized, check credentials: {e}")
            self._report(e)
            return
        except RpcError as e:
            _L.warning(f"cannot fetch torrents: {e}")
            self._report(e)
            return

        events, self._previous = diff(self._previous, current)
        for event in events:
            try:
                await self._dispatcher.dispatch(event)
            except Exception as e:
                _L.exception(f"{event.kind.value} handler failed")
                self._report(e)

    def _report(self, error: Exception) -> None:
        if not self._on_error:
            return
        try:
            self._on_error(error)
        except Exception:
            _L.exception("error observer failed")
