"""In-process notification feed and background scheduling helpers."""

from .emergency_feed import EmergencyFeed, FeedListener
from .manager import FeedConnectionManager
from .publisher import FeedBroadcaster, serialize_feed, serialize_feed_entry
from .tasks import BackgroundTaskRunner, NoEventLoopError

__all__ = [
    "BackgroundTaskRunner",
    "EmergencyFeed",
    "FeedBroadcaster",
    "FeedConnectionManager",
    "FeedListener",
    "NoEventLoopError",
    "serialize_feed",
    "serialize_feed_entry",
]
