import logging
import signal
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser
from asyncio import Event, get_running_loop
from functools import partial

from wcpan.logging import ConfigBuilder

from .client import create_client
from .settings import load_from_path
from .watch.models import EventKind, TorrentSnapshot


_L = logging.getLogger(__name__)


class Daemon:
    def __init__(self, args: list[str]) -> None:
        from logging.config import dictConfig

        kwargs = _parse_args(args)
        self._cfg = load_from_path(kwargs.settings)
        dictConfig(
            ConfigBuilder(path=self._cfg.log_path, rotate=True)
            .add("trwatch", level="D")
            .add("aiohttp", level="I")
            .to_dict()
        )
        self._finished = None

    async def __call__(self) -> int:
        loop = get_running_loop()
        self._finished = Event()
        loop.add_signal_handler(signal.SIGINT, self._close_from_signal)
        loop.add_signal_handler(signal.SIGTERM, self._close_from_signal)
        return await self._guard()

    async def _guard(self) -> int:
        try:
            return await self._main()
        except Exception:
            _L.exception("main function error")
        return 1

    async def _main(self) -> int:
        async with create_client(self._cfg) as client:
            for kind in EventKind:
                client.on(kind, partial(log_event, kind))

            _L.info(f"watching {self._cfg.rpc_url}")
            await self._wait_for_finished()

        return 0

    def _close_from_signal(self) -> None:
        assert self._finished
        self._finished.set()

    async def _wait_for_finished(self) -> None:
        assert self._finished
        await self._finished.wait()


def log_event(kind: EventKind, torrent: TorrentSnapshot) -> None:
    match kind:
        case EventKind.PROGRESS:
            _L.info(f"{torrent.name} ({torrent.id}): {torrent.downloaded_ever} bytes")
        case EventKind.MOVED:
            _L.info(f"{torrent.name} ({torrent.id}): moved to {torrent.download_dir}")
        case _:
            _L.info(f"{torrent.name} ({torrent.id}): {kind.value}")


def _parse_args(args: list[str]):
    parser = ArgumentParser(
        prog="trwatch", formatter_class=ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-s", "--settings", type=str, default="trwatch.yaml", help="settings file name"
    )
    kwargs = parser.parse_args(args[1:])
    return kwargs
