from .client import TransmissionClient, create_client
from .watch import EventKind, LifecycleEvent, TorrentSnapshot, TorrentStatus


__all__ = [
    "TransmissionClient",
    "create_client",
    "EventKind",
    "LifecycleEvent",
    "TorrentSnapshot",
    "TorrentStatus",
]
