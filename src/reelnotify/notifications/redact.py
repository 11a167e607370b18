"""
Secret redaction for log lines.

Webhook URLs embed a token in their path and OMDb URLs carry the API key
in the query string; neither may reach a log unredacted.
"""

from __future__ import annotations

import re

_WEBHOOK_PREFIX = re.compile(
    r"^(https://discord(?:app)?\.com/api/webhooks/\d+/).+$"
)


def redact_webhook(url: object) -> str:
    """Reduce a webhook URL to its non-secret prefix."""
    if not url or not isinstance(url, str):
        return "[INVALID]"
    match = _WEBHOOK_PREFIX.match(url)
    if match:
        return f"{match.group(1)}***"
    return "***[INVALID_WEBHOOK]***"


def redact_api_key(key: object) -> str:
    """Keep the first four and last two characters of an API key."""
    if not key or not isinstance(key, str):
        return "[INVALID]"
    if len(key) > 6:
        return f"{key[:4]}***{key[-2:]}"
    return "***"


def redact_text(text: str, *secrets: str) -> str:
    """Replace every occurrence of the given secrets inside free text."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, redact_api_key(secret))
    return text
