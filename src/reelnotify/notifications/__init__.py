"""
Notification engine for reelnotify.

Parses media titles, resolves posters, builds status cards and delivers
them to a Discord webhook, editing a job's earlier message when asked.
"""

from reelnotify.notifications.card import CardField, NotificationCard, build_card
from reelnotify.notifications.config import DeliveryMode, NotifierSettings, TimeoutConfig
from reelnotify.notifications.events import (
    DispatchResult,
    EventKind,
    FileContext,
    MediaCategory,
    MediaInfo,
    NotificationEvent,
    StreamInfo,
)
from reelnotify.notifications.media import extract_catalog_id, parse_media_info
from reelnotify.notifications.notifier import Notifier
from reelnotify.notifications.state import (
    FileMessageStore,
    InMemoryMessageStore,
    MessageStateStore,
)

__all__ = [
    "CardField",
    "DeliveryMode",
    "DispatchResult",
    "EventKind",
    "FileContext",
    "FileMessageStore",
    "InMemoryMessageStore",
    "MediaCategory",
    "MediaInfo",
    "MessageStateStore",
    "NotificationCard",
    "NotificationEvent",
    "Notifier",
    "NotifierSettings",
    "StreamInfo",
    "TimeoutConfig",
    "build_card",
    "extract_catalog_id",
    "parse_media_info",
]
