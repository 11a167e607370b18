"""
Notifier — one call per host event.

Validates the settings, parses the file name, optionally looks up a
poster, builds the card and hands it to the channel. Whatever happens,
the host gets a DispatchResult back; nothing here raises.
"""

from __future__ import annotations

import logging
from typing import Optional

from reelnotify.notifications.card import build_card
from reelnotify.notifications.channel import NotificationChannel
from reelnotify.notifications.channels.discord import DiscordWebhookChannel
from reelnotify.notifications.config import DeliveryMode, NotifierSettings
from reelnotify.notifications.events import DispatchResult, NotificationEvent
from reelnotify.notifications.joblog import JobLog
from reelnotify.notifications.media import parse_media_info
from reelnotify.notifications.poster import PosterResolver
from reelnotify.notifications.redact import redact_webhook
from reelnotify.notifications.state import MessageStateStore
from reelnotify.notifications.transport import HttpTransport

logger = logging.getLogger(__name__)


class Notifier:
    """Runs parse → poster → card → deliver for a single event."""

    def __init__(
        self,
        settings: NotifierSettings,
        *,
        store: Optional[MessageStateStore] = None,
        transport: Optional[HttpTransport] = None,
        job_log: Optional[JobLog] = None,
        channel: Optional[NotificationChannel] = None,
    ) -> None:
        self.settings = settings
        self.job_log = job_log or JobLog()
        self.transport = transport or HttpTransport()
        self.posters = PosterResolver(
            self.transport,
            settings.omdb_api_key,
            job_log=self.job_log,
            timeout=settings.timeouts.metadata,
        )
        self.channel = channel or DiscordWebhookChannel(
            settings.webhook_url,
            store=store,
            transport=self.transport,
            job_log=self.job_log,
            timeout=settings.timeouts.webhook,
        )

    def validate(self) -> bool:
        errors = self.settings.collect_errors()
        for error in errors:
            self.job_log.error(f"❌ Validation error: {error}")
        return not errors

    async def notify(self, event: NotificationEvent) -> DispatchResult:
        if not self.validate():
            return DispatchResult(delivered=False)

        try:
            media = parse_media_info(event.file.path)
            poster_url = await self.posters.resolve(
                media.title, media.year, media.category, event.file.path
            )

            card = build_card(
                event, media, poster_url, server_url=self.settings.server_url
            )
            return await self.channel.deliver(
                card, event.job_id, DeliveryMode(self.settings.mode)
            )
        except Exception as exc:
            logger.exception("Notification failed for job %s", event.job_id)
            self.job_log.error(
                f"❌ Discord notification failed to "
                f"{redact_webhook(self.settings.webhook_url)}: {type(exc).__name__}"
            )
            return DispatchResult(delivered=False)
