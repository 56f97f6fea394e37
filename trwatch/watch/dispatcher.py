import logging
from collections.abc import Awaitable, Callable
from inspect import isawaitable

from .models import EventKind, LifecycleEvent, TorrentSnapshot


type Handler = Callable[[TorrentSnapshot], Awaitable[None] | None]


_L = logging.getLogger(__name__)


class EventDispatcher:
    """One handler slot per event kind"""

    def __init__(self) -> None:
        self._handlers: dict[EventKind, Handler] = {}

    def register(self, kind: EventKind, handler: Handler) -> None:
        if kind in self._handlers:
            _L.debug(f"replacing handler for {kind.value}")
        self._handlers[kind] = handler

    def unregister(self, kind: EventKind) -> None:
        self._handlers.pop(kind, None)

    def get_handler(self, kind: EventKind) -> Handler | None:
        return self._handlers.get(kind)

    async def dispatch(self, event: LifecycleEvent) -> None:
        # exceptions raised by the handler are left to the caller
        handler = self._handlers.get(event.kind)
        if handler is None:
            return
        rv = handler(event.torrent)
        if isawaitable(rv):
            await rv
