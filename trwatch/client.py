import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from aiohttp import ClientSession, ClientTimeout
from transmission_rpc.constants import RpcMethod

from .rpc.transmission import TransmissionTransport
from .rpc.transport import RpcTransport, unwrap
from .settings import Data
from .watch.dispatcher import EventDispatcher, Handler
from .watch.fetcher import SnapshotFetcher
from .watch.models import EventKind
from .watch.scheduler import ErrorObserver, PollScheduler


type TorrentId = int | str
type TorrentIds = TorrentId | Sequence[TorrentId] | Mapping[Any, Any]


_L = logging.getLogger(__name__)


class TransmissionClient:
    """
    Transmission RPC methods plus lifecycle callbacks.

    Registering the first callback with `on()` starts polling the daemon;
    `stop_callbacks()` stops it again. Both need a running event loop.
    """

    def __init__(
        self,
        transport: RpcTransport,
        *,
        interval: float = 1.0,
        on_error: ErrorObserver | None = None,
    ) -> None:
        self._transport = transport
        self._dispatcher = EventDispatcher()
        self._scheduler = PollScheduler(
            SnapshotFetcher(transport),
            self._dispatcher,
            interval=interval,
            on_error=on_error,
        )

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    def on(self, kind: EventKind, handler: Handler) -> None:
        self._dispatcher.register(kind, handler)
        self._scheduler.start()

    def stop_callbacks(self) -> None:
        self._scheduler.stop()

    async def session_set(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request(RpcMethod.SessionSet, dict(arguments))

    async def session_get(self) -> dict[str, Any]:
        return await self._request(RpcMethod.SessionGet)

    async def session_stats(self) -> dict[str, Any]:
        return await self._request(RpcMethod.SessionStats)

    async def blocklist_update(self) -> dict[str, Any]:
        return await self._request(RpcMethod.BlocklistUpdate)

    async def port_test(self) -> dict[str, Any]:
        return await self._request(RpcMethod.PortTest)

    async def get(
        self, fields: Sequence[str], ids: TorrentIds | None = None
    ) -> dict[str, Any]:
        arguments: dict[str, Any] = {"fields": list(fields)}
        if ids is not None:
            arguments["ids"] = format_ids(ids)
        return await self._request(RpcMethod.TorrentGet, arguments)

    async def start(self, ids: TorrentIds) -> dict[str, Any]:
        return await self._request(RpcMethod.TorrentStart, {"ids": format_ids(ids)})

    async def start_now(self, ids: TorrentIds) -> dict[str, Any]:
        return await self._request(
            RpcMethod.TorrentStartNow, {"ids": format_ids(ids)}
        )

    async def stop(self, ids: TorrentIds) -> dict[str, Any]:
        return await self._request(RpcMethod.TorrentStop, {"ids": format_ids(ids)})

    async def verify(self, ids: TorrentIds) -> dict[str, Any]:
        return await self._request(RpcMethod.TorrentVerify, {"ids": format_ids(ids)})

    async def reannounce(self, ids: TorrentIds) -> dict[str, Any]:
        return await self._request(
            RpcMethod.TorrentReannounce, {"ids": format_ids(ids)}
        )

    async def set(self, ids: TorrentIds, property: str, value: Any) -> dict[str, Any]:
        return await self._request(
            RpcMethod.TorrentSet, {"ids": format_ids(ids), property: value}
        )

    async def add_as_file(
        self, filename: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"filename": filename}
        if arguments:
            body.update(arguments)
        return await self._request(RpcMethod.TorrentAdd, body)

    async def add_as_metainfo(
        self, metainfo: str, arguments: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"metainfo": metainfo}
        if arguments:
            body.update(arguments)
        return await self._request(RpcMethod.TorrentAdd, body)

    async def remove(
        self, ids: TorrentIds | None = None, delete_local_data: bool = False
    ) -> dict[str, Any]:
        arguments: dict[str, Any] = {"delete-local-data": delete_local_data}
        if ids is not None:
            arguments["ids"] = format_ids(ids)
        return await self._request(RpcMethod.TorrentRemove, arguments)

    async def move(
        self, location: str, ids: TorrentIds | None = None, move: bool | None = True
    ) -> dict[str, Any]:
        arguments: dict[str, Any] = {"location": location}
        if ids is not None:
            arguments["ids"] = format_ids(ids)
        if move is not None:
            arguments["move"] = move
        return await self._request(RpcMethod.TorrentSetLocation, arguments)

    async def _request(
        self, method: RpcMethod, arguments: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        _L.debug(f"{method.value} {arguments}")
        result = await self._transport.call(method.value, arguments)
        payload = unwrap(result, method.value)
        return payload.get("arguments") or {}


def format_ids(ids: TorrentIds) -> list[Any]:
    match ids:
        case Mapping():
            return list(ids.items())
        case str():
            return [ids]
        case Sequence():
            return list(ids)
        case _:
            return [ids]


@asynccontextmanager
async def create_client(
    data: Data, *, on_error: ErrorObserver | None = None
) -> AsyncIterator[TransmissionClient]:
    """Open an HTTP session for the daemon and stop polling on exit"""
    timeout = ClientTimeout(total=data.timeout)
    async with ClientSession(timeout=timeout) as session:
        transport = TransmissionTransport(
            data.rpc_url,
            session=session,
            username=data.username,
            password=data.password,
        )
        client = TransmissionClient(
            transport, interval=data.interval, on_error=on_error
        )
        try:
            yield client
        finally:
            client.stop_callbacks()
            await client.scheduler.join()
