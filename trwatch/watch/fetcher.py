import logging
from typing import Any

from transmission_rpc.constants import RpcMethod

from ..rpc.transport import MalformedPayloadError, RpcTransport, unwrap
from .models import SnapshotSet, TorrentSnapshot, TorrentStatus


SNAPSHOT_FIELDS = [
    "id",
    "name",
    "hashString",
    "status",
    "downloadedEver",
    "downloadDir",
]
_L = logging.getLogger(__name__)


class SnapshotFetcher:
    """Lists every torrent of the daemon with the fields the diff needs"""

    def __init__(self, transport: RpcTransport) -> None:
        self._transport = transport

    async def fetch(self) -> SnapshotSet:
        method = RpcMethod.TorrentGet.value
        result = await self._transport.call(method, {"fields": SNAPSHOT_FIELDS})
        payload = unwrap(result, method)

        try:
            records = payload["arguments"]["torrents"]
        except (KeyError, TypeError) as e:
            raise MalformedPayloadError(
                f"{method}: no torrent list in response", status=200, payload=payload
            ) from e
        if not isinstance(records, list):
            raise MalformedPayloadError(
                f"{method}: torrent list is not an array", status=200, payload=payload
            )

        snapshots: SnapshotSet = {}
        for record in records:
            torrent = parse_snapshot(record)
            snapshots[torrent.hash_string] = torrent
        _L.debug(f"fetched {len(snapshots)} torrents")
        return snapshots


def parse_snapshot(record: Any) -> TorrentSnapshot:
    """Convert one `torrent-get` record, raise MalformedPayloadError if invalid"""
    try:
        downloaded_ever = int(record["downloadedEver"])
        if downloaded_ever < 0:
            raise ValueError(f"negative downloadedEver: {downloaded_ever}")
        return TorrentSnapshot(
            id=int(record["id"]),
            name=str(record["name"]),
            hash_string=str(record["hashString"]),
            status=TorrentStatus(int(record["status"])),
            downloaded_ever=downloaded_ever,
            download_dir=str(record["downloadDir"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedPayloadError(
            f"invalid torrent record: {e}", status=200, payload=record
        ) from e
