"""
Discord channel — webhook delivery with in-place message updates.

In ``updates`` mode the first card for a job is posted and its message id
remembered; later cards for the same job edit that message. If the edit
fails (message deleted, webhook rotated) a fresh message is posted.
``sequential`` mode always posts.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from reelnotify import __version__
from reelnotify.notifications.card import NotificationCard
from reelnotify.notifications.channel import NotificationChannel
from reelnotify.notifications.config import DeliveryMode
from reelnotify.notifications.events import DispatchResult
from reelnotify.notifications.joblog import JobLog
from reelnotify.notifications.redact import redact_webhook
from reelnotify.notifications.state import InMemoryMessageStore, MessageStateStore
from reelnotify.notifications.transport import (
    WEBHOOK_TIMEOUT,
    HttpTransport,
    TransportResult,
)

logger = logging.getLogger(__name__)

MAX_PAYLOAD_BYTES = 50_000
USER_AGENT = f"reelnotify/{__version__}"

# Shared by every channel in the process unless a store is injected.
_default_store = InMemoryMessageStore()


class JobLocks:
    """
    Per-job ``asyncio.Lock`` registry.

    A lock exists only while someone holds or waits on it, so the registry
    stays empty between dispatches.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, job_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(job_id, asyncio.Lock())
        self._waiters[job_id] = self._waiters.get(job_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[job_id] -= 1
            if not self._waiters[job_id]:
                del self._waiters[job_id]
                del self._locks[job_id]

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every channel in the process, whichever store it writes to.
_job_locks = JobLocks()


def validate_payload(payload: Any, job_log: JobLog) -> bool:
    """Structural check of an ``{"embeds": [...]}`` payload."""
    if not isinstance(payload, dict):
        job_log.error(f"❌ Invalid payload structure: {type(payload).__name__}")
        return False

    embeds = payload.get("embeds")
    if not isinstance(embeds, list):
        job_log.error(f"❌ Invalid embeds structure: {type(embeds).__name__}")
        return False

    for i, embed in enumerate(embeds):
        if not isinstance(embed, dict):
            job_log.error(f"❌ Invalid embed {i} structure: {type(embed).__name__}")
            return False
    return True


def _snippet(result: TransportResult) -> str:
    return f" - {result.body[:100]}" if result.body else ""


class DiscordWebhookChannel(NotificationChannel):
    """Posts and edits status cards through a Discord webhook."""

    name: str = "discord"

    def __init__(
        self,
        webhook_url: str,
        *,
        store: Optional[MessageStateStore] = None,
        transport: Optional[HttpTransport] = None,
        job_log: Optional[JobLog] = None,
        timeout: float = WEBHOOK_TIMEOUT,
        locks: Optional[JobLocks] = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.store = store if store is not None else _default_store
        self.transport = transport or HttpTransport()
        self.job_log = job_log or JobLog()
        self.timeout = timeout
        self.locks = locks if locks is not None else _job_locks

    @property
    def create_url(self) -> str:
        return str(httpx.URL(self.webhook_url).copy_set_param("wait", "true"))

    def edit_url(self, message_id: str) -> str:
        url = httpx.URL(self.webhook_url)
        url = url.copy_with(path=f"{url.path}/messages/{message_id}")
        return str(url.copy_set_param("wait", "true"))

    async def deliver(
        self,
        card: NotificationCard,
        job_id: Optional[str] = None,
        mode: DeliveryMode = DeliveryMode.UPDATES,
    ) -> DispatchResult:
        return await self.deliver_payload({"embeds": [card.to_embed()]}, job_id, mode)

    async def deliver_payload(
        self,
        payload: Any,
        job_id: Optional[str] = None,
        mode: DeliveryMode = DeliveryMode.UPDATES,
    ) -> DispatchResult:
        if not validate_payload(payload, self.job_log):
            return DispatchResult(delivered=False)

        body = json.dumps(payload).encode("utf-8")
        if len(body) > MAX_PAYLOAD_BYTES:
            self.job_log.error(
                f"❌ Payload too large ({len(body)} bytes) for Discord webhook"
            )
            return DispatchResult(delivered=False)

        if not job_id or mode != DeliveryMode.UPDATES:
            return await self._create(body)

        # one dispatch per job at a time, so two events can't both create
        async with self.locks.hold(job_id):
            return await self._update(body, job_id)

    async def _update(self, body: bytes, job_id: str) -> DispatchResult:
        message_id = self.store.get(job_id)
        if message_id:
            self.job_log.info(
                "📝 Found existing Discord message - updating instead of creating new"
            )
            if await self._edit(body, message_id):
                return DispatchResult(delivered=True, remote_message_id=message_id)

        result = await self._create(body)
        if result.delivered and result.remote_message_id:
            self.store.put(job_id, result.remote_message_id)
            self.job_log.info("💾 Stored Discord message ID for future updates")
        return result

    async def _edit(self, body: bytes, message_id: str) -> bool:
        result = await self.transport.request(
            self.edit_url(message_id),
            method="PATCH",
            headers=self._headers(body),
            body=body,
            timeout=self.timeout,
        )
        if result.success:
            self.job_log.info(
                f"✅ Discord message edited successfully ({result.status_code})"
            )
            return True

        if result.status_code is None:
            self.job_log.error(f"❌ Discord webhook edit error: {result.error}")
        else:
            self.job_log.error(
                f"❌ Discord message edit failed: {result.status_code}{_snippet(result)}"
            )
        return False

    async def _create(self, body: bytes) -> DispatchResult:
        target = redact_webhook(self.webhook_url)
        result = await self.transport.request(
            self.create_url,
            method="POST",
            headers=self._headers(body),
            body=body,
            timeout=self.timeout,
        )

        if result.status_code is None:
            self.job_log.error(f"❌ Discord webhook error to {target}: {result.error}")
            return DispatchResult(delivered=False)
        if not result.success:
            self.job_log.error(
                f"❌ Discord webhook failed to {target}: "
                f"{result.status_code}{_snippet(result)}"
            )
            return DispatchResult(delivered=False)

        self.job_log.info(f"✅ Discord notification sent to {target} ({result.status_code})")
        return DispatchResult(delivered=True, remote_message_id=self._message_id(result))

    def _message_id(self, result: TransportResult) -> Optional[str]:
        if not result.body.strip():
            self.job_log.warning(
                "⚠️ Discord notification sent but no response data received"
            )
            return None
        try:
            data = json.loads(result.body)
        except ValueError as exc:
            self.job_log.warning(
                f"⚠️ Discord notification sent but failed to parse response: {exc}"
            )
            return None
        message_id = data.get("id") if isinstance(data, dict) else None
        return str(message_id) if message_id else None

    def _headers(self, body: bytes) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "User-Agent": USER_AGENT,
        }
