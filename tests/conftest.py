"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from trwatch.rpc.transport import RpcResult, RpcSuccess, RpcTransport
from trwatch.watch.models import TorrentSnapshot, TorrentStatus


class DummyTransport(RpcTransport):
    """Transport replaying queued results; exceptions in the queue are raised."""

    def __init__(self, results: list[RpcResult | Exception] | None = None) -> None:
        self.results = list(results or [])
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.gate: asyncio.Event | None = None

    async def call(
        self, method: str, arguments: Mapping[str, Any] | None = None
    ) -> RpcResult:
        self.calls.append((method, dict(arguments) if arguments is not None else None))
        if self.gate:
            await self.gate.wait()
        if not self.results:
            return torrents_result()
        rv = self.results.pop(0)
        if isinstance(rv, Exception):
            raise rv
        return rv


def make_record(
    hash_string: str,
    *,
    id: int = 1,
    name: str | None = None,
    status: int = 4,
    downloaded_ever: int = 0,
    download_dir: str = "/d",
) -> dict[str, Any]:
    return {
        "id": id,
        "name": name or f"torrent-{hash_string}",
        "hashString": hash_string,
        "status": status,
        "downloadedEver": downloaded_ever,
        "downloadDir": download_dir,
    }


def make_snapshot(
    hash_string: str,
    *,
    id: int = 1,
    status: int = 4,
    downloaded_ever: int = 0,
    download_dir: str = "/d",
) -> TorrentSnapshot:
    return TorrentSnapshot(
        id=id,
        name=f"torrent-{hash_string}",
        hash_string=hash_string,
        status=TorrentStatus(status),
        downloaded_ever=downloaded_ever,
        download_dir=download_dir,
    )


def torrents_result(*records: dict[str, Any]) -> RpcSuccess:
    return RpcSuccess(
        {"result": "success", "arguments": {"torrents": list(records)}}
    )
