from dataclasses import dataclass
from enum import Enum, IntEnum


class TorrentStatus(IntEnum):
    STOPPED = 0
    CHECK_WAIT = 1
    CHECKING = 2
    DOWNLOAD_WAIT = 3
    DOWNLOADING = 4
    SEED_WAIT = 5
    SEEDING = 6


class EventKind(Enum):
    ADDED = "added"
    DELETED = "deleted"
    MOVED = "moved"
    STARTED = "started"
    STOPPED = "stopped"
    CHECK_WAIT = "check_wait"
    CHECKED = "checked"
    START_WAIT = "start_wait"
    SEED_WAIT = "seed_wait"
    SEEDED = "seeded"
    PROGRESS = "progress"
    EXISTS = "exists"


@dataclass(frozen=True)
class TorrentSnapshot:
    """Observable fields of one torrent at one poll"""

    id: int
    name: str
    hash_string: str
    status: TorrentStatus
    downloaded_ever: int
    download_dir: str


# keyed by hash_string, ordered as the daemon listed them
type SnapshotSet = dict[str, TorrentSnapshot]


@dataclass(frozen=True)
class LifecycleEvent:
    kind: EventKind
    torrent: TorrentSnapshot
    previous: TorrentSnapshot | None = None


# the event fired when a torrent enters the given status
STATUS_EVENTS: dict[TorrentStatus, EventKind] = {
    TorrentStatus.STOPPED: EventKind.STOPPED,
    TorrentStatus.CHECK_WAIT: EventKind.CHECK_WAIT,
    TorrentStatus.CHECKING: EventKind.CHECKED,
    TorrentStatus.DOWNLOAD_WAIT: EventKind.START_WAIT,
    TorrentStatus.DOWNLOADING: EventKind.STARTED,
    TorrentStatus.SEED_WAIT: EventKind.SEED_WAIT,
    TorrentStatus.SEEDING: EventKind.SEEDED,
}
