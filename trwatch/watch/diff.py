from .models import (
    STATUS_EVENTS,
    EventKind,
    LifecycleEvent,
    SnapshotSet,
    TorrentSnapshot,
)


def diff(
    previous: SnapshotSet | None, current: SnapshotSet
) -> tuple[list[LifecycleEvent], SnapshotSet]:
    """
    Compare two consecutive polls.

    Returns the ordered events and the state to keep for the next poll, which
    is always `current`. Without a previous poll every torrent is reported as
    EXISTS and nothing else fires.
    """
    if previous is None:
        events = [LifecycleEvent(EventKind.EXISTS, t) for t in current.values()]
        return events, current

    events: list[LifecycleEvent] = []
    for hash_string, torrent in current.items():
        old = previous.get(hash_string)
        if old is None:
            events.append(LifecycleEvent(EventKind.ADDED, torrent))
        else:
            events.extend(_compare(old, torrent))

    for hash_string, old in previous.items():
        if hash_string not in current:
            events.append(LifecycleEvent(EventKind.DELETED, old))

    return events, current


def _compare(old: TorrentSnapshot, new: TorrentSnapshot) -> list[LifecycleEvent]:
    kinds: list[EventKind] = []
    if new.download_dir != old.download_dir:
        kinds.append(EventKind.MOVED)
    if new.downloaded_ever != old.downloaded_ever:
        kinds.append(EventKind.PROGRESS)
    if new.status != old.status:
        kinds.append(STATUS_EVENTS[new.status])
    return [LifecycleEvent(kind, new, old) for kind in kinds]
