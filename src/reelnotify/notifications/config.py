"""
Configuration models for the notification engine.
"""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from reelnotify.notifications.events import EventKind
from reelnotify.notifications.redact import redact_api_key, redact_webhook
from reelnotify.notifications.transport import METADATA_TIMEOUT, WEBHOOK_TIMEOUT

WEBHOOK_PATTERN = re.compile(
    r"^https://discord(?:app)?\.com/api/webhooks/\d+/[\w-]+$"
)
_API_KEY_CHARS = re.compile(r"^[a-zA-Z0-9]+$")


class DeliveryMode(str, Enum):
    UPDATES = "updates"        # edit the job's previous message
    SEQUENTIAL = "sequential"  # always post a new message


class TimeoutConfig(BaseModel):
    """Per-call deadlines in seconds."""

    metadata: float = METADATA_TIMEOUT
    webhook: float = WEBHOOK_TIMEOUT


class NotifierSettings(BaseModel):
    """Inputs the host supplies for one notification."""

    webhook_url: str = ""
    kind: str = EventKind.STARTED.value
    omdb_api_key: str = ""
    server_url: str = ""  # display-only management link
    mode: str = DeliveryMode.UPDATES.value
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)

    def collect_errors(self) -> list[str]:
        """Return every configuration problem; secrets are redacted."""
        errors: list[str] = []

        if not self.webhook_url:
            errors.append("Discord webhook URL is required")
        elif not urlparse(self.webhook_url).scheme:
            errors.append(f"Invalid URL format: {redact_webhook(self.webhook_url)}")
        elif not WEBHOOK_PATTERN.fullmatch(self.webhook_url):
            errors.append(
                f"Invalid Discord webhook URL format: {redact_webhook(self.webhook_url)}"
            )

        valid_kinds = [k.value for k in EventKind]
        if self.kind not in valid_kinds:
            errors.append(
                f"Invalid notification type: {self.kind}. "
                f"Valid types: {', '.join(valid_kinds)}"
            )

        if self.omdb_api_key:
            key = self.omdb_api_key
            if not key.strip():
                errors.append("OMDb API key cannot be empty")
            elif not 8 <= len(key) <= 50:
                errors.append(f"OMDb API key has invalid length: {redact_api_key(key)}")
            elif not _API_KEY_CHARS.fullmatch(key):
                errors.append(
                    f"OMDb API key contains invalid characters: {redact_api_key(key)}"
                )

        if self.server_url:
            parsed = urlparse(self.server_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append(f"Invalid server URL format: {self.server_url}")

        valid_modes = [m.value for m in DeliveryMode]
        if self.mode not in valid_modes:
            errors.append(
                f"Invalid notification mode: {self.mode}. "
                f"Valid modes: {', '.join(valid_modes)}"
            )

        return errors
