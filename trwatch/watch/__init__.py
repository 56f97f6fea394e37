"""
Change detection on top of periodic torrent listing.

This package provides:
- Snapshot and lifecycle event models
- Diff engine comparing two consecutive polls
- Event dispatcher with one handler per event kind
- Poll scheduler driving fetch, diff and dispatch
"""

from .diff import diff
from .dispatcher import EventDispatcher, Handler
from .fetcher import SNAPSHOT_FIELDS, SnapshotFetcher, parse_snapshot
from .models import (
    EventKind,
    LifecycleEvent,
    SnapshotSet,
    TorrentSnapshot,
    TorrentStatus,
)
from .scheduler import ErrorObserver, PollScheduler, SchedulerState


__all__ = [
    # Models
    "EventKind",
    "LifecycleEvent",
    "SnapshotSet",
    "TorrentSnapshot",
    "TorrentStatus",
    # Diff and fetch
    "diff",
    "parse_snapshot",
    "SnapshotFetcher",
    "SNAPSHOT_FIELDS",
    # Dispatch and scheduling
    "EventDispatcher",
    "Handler",
    "ErrorObserver",
    "PollScheduler",
    "SchedulerState",
]
