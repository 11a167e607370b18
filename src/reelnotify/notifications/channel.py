"""
NotificationChannel — abstract base class for card destinations.

The Discord webhook channel is the real destination; the console channel
renders the same card locally for previews.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from reelnotify.notifications.card import NotificationCard
from reelnotify.notifications.config import DeliveryMode
from reelnotify.notifications.events import DispatchResult


class NotificationChannel(ABC):
    """Base class for notification channels."""

    name: str = "unnamed"

    @abstractmethod
    async def deliver(
        self,
        card: NotificationCard,
        job_id: Optional[str] = None,
        mode: DeliveryMode = DeliveryMode.UPDATES,
    ) -> DispatchResult:
        """Deliver a card, creating or editing the job's message."""
        ...
