"""
Card builder — turns an event plus media info into a size-safe embed.

All destination limits are enforced here: field names, field values,
description, title and footer are capped, so ``NotificationCard.to_embed``
never emits an over-long string. The total payload size check lives in
the dispatcher because it depends on the envelope.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from reelnotify.notifications.events import (
    EventKind,
    MediaCategory,
    MediaInfo,
    NotificationEvent,
    StreamInfo,
    StreamKind,
    StreamRole,
)

EMBED_TITLE = "File Processing Status"
PLACEHOLDER_POSTER_URL = (
    "https://github.com/HaveAGitGat/Tdarr/raw/master/src/assets/images/favicon.png"
)
DEFAULT_DETAILS = "Processing file..."
ELLIPSIS = "..."

FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
DESCRIPTION_LIMIT = 4000
FOOTER_LIMIT = 2048
TITLE_LIMIT = 256

_KIND_STYLE = {
    EventKind.STARTED: (0x3498DB, "\U0001f680", "Started processing file"),    # rocket
    EventKind.SUCCEEDED: (0x2ECC71, "\u2705", "Transcode completed"),        # check
    EventKind.FAILED: (0xE74C3C, "\u274c", "Transcode failed"),              # cross
}

CHANNEL_LABELS = {1: "Mono", 2: "Stereo", 6: "5.1", 8: "7.1"}

_ROLE_LABELS = {
    StreamRole.COMMENTARY: "Commentary",
    StreamRole.MAIN: "Main",
    StreamRole.DUBBED: "Dubbed",
    StreamRole.ORIGINAL: "Original",
    StreamRole.DESCRIPTION: "Audio Description",
}

LANGUAGE_FLAGS = {
    "EN": "🇺🇸", "ENG": "🇺🇸",
    "FR": "🇫🇷", "FRA": "🇫🇷", "FRE": "🇫🇷",
    "ES": "🇪🇸", "SPA": "🇪🇸",
    "DE": "🇩🇪", "DEU": "🇩🇪", "GER": "🇩🇪",
    "IT": "🇮🇹", "ITA": "🇮🇹",
    "JA": "🇯🇵", "JPN": "🇯🇵",
    "KO": "🇰🇷", "KOR": "🇰🇷",
    "ZH": "🇨🇳", "ZHO": "🇨🇳", "CHI": "🇨🇳",
}
UNKNOWN_LANGUAGE_FLAG = "🌐"


class CardField(BaseModel):
    name: str
    value: str
    inline: bool = True


class NotificationCard(BaseModel):
    """Destination-agnostic status card."""

    accent_color: int
    headline: str
    description: str
    body_text: str = ""
    fields: list[CardField] = Field(default_factory=list)
    thumbnail_url: str = PLACEHOLDER_POSTER_URL
    footer_text: str = ""
    issued_at: str = ""

    def to_embed(self) -> dict[str, Any]:
        return {
            "color": self.accent_color,
            "title": truncate(EMBED_TITLE, TITLE_LIMIT),
            "description": self.description,
            "fields": [field.model_dump() for field in self.fields],
            "thumbnail": {"url": self.thumbnail_url},
            "footer": {"text": self.footer_text},
            "timestamp": self.issued_at,
        }


def truncate(text: str, limit: int) -> str:
    """Cap ``text`` at ``limit`` characters, the last ones being the ellipsis."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    total = int(seconds)
    return f"{total // 3600}:{total % 3600 // 60:02d}:{total % 60:02d}"


def format_elapsed(seconds: float) -> str:
    seconds = int(abs(seconds))
    minutes, hours = seconds // 60, seconds // 3600
    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def format_size(size_mb: Optional[float]) -> str:
    return f"{size_mb:.2f} MB" if size_mb and size_mb > 0 else "Unknown"


def format_compression(original_mb: float, new_mb: float) -> str:
    ratio = (original_mb - new_mb) / original_mb * 100
    delta = original_mb - new_mb
    if delta >= 0:
        return f"{ratio:.1f}% ({delta:.2f} MB saved)"
    return f"{ratio:.1f}% ({abs(delta):.2f} MB larger)"


def describe_audio(stream: StreamInfo) -> str:
    parts = [(stream.codec_name or "Unknown").upper()]

    channels = stream.channel_count or 0
    label = CHANNEL_LABELS.get(channels) or (f"{channels}ch" if channels else "")
    if label:
        parts.append(label)
    text = " ".join(parts)

    if stream.role is not None:
        text += f" ({_ROLE_LABELS[stream.role]})"
    if stream.language:
        lang = stream.language.upper()
        text += f" {LANGUAGE_FLAGS.get(lang, UNKNOWN_LANGUAGE_FLAG)} {lang}"
    return text


def describe_video(stream: StreamInfo) -> str:
    codec = (stream.codec_name or "Unknown").upper()
    resolution = (
        f"{stream.width}x{stream.height}" if stream.width and stream.height else "Unknown"
    )
    return f"Video: {codec} • {resolution}"


def stream_lines(streams: list[StreamInfo]) -> list[str]:
    lines: list[str] = []

    video = next((s for s in streams if s.kind == StreamKind.VIDEO), None)
    if video is not None:
        lines.append(describe_video(video))

    audio = [describe_audio(s) for s in streams if s.kind == StreamKind.AUDIO]
    if len(audio) == 1:
        lines.append(f"Audio: {audio[0]}")
    elif audio:
        numbered = "\n".join(f"{i}. {line}" for i, line in enumerate(audio, start=1))
        lines.append(f"Audio Tracks:\n{numbered}")
    return lines


def build_body(event: NotificationEvent, media: MediaInfo) -> str:
    sections: list[str] = []
    if media.category == MediaCategory.SERIES and media.season and media.episode:
        sections.append(f"**Season {media.season} • Episode {media.episode}**")

    facts: list[str] = []
    if event.file.path:
        facts.append(f"File: {event.file.path}")
    facts.extend(stream_lines(event.file.streams))
    if facts:
        sections.append("```\n" + "\n".join(facts) + "\n```")

    return truncate("\n".join(sections), DESCRIPTION_LIMIT)


def _size_fields(event: NotificationEvent) -> list[CardField]:
    file = event.file
    if event.kind == EventKind.STARTED:
        return [CardField(name="Original Size", value=format_size(file.size_mb))]

    if event.kind == EventKind.SUCCEEDED:
        original = file.original_size_mb or 0
        if original > 0 and file.size_mb > 0:
            return [
                CardField(name="Original Size", value=format_size(original)),
                CardField(name="New Size", value=format_size(file.size_mb)),
                CardField(
                    name="Compression",
                    value=format_compression(original, file.size_mb),
                ),
            ]
        return [CardField(name="New Size", value=format_size(file.size_mb))]

    return [CardField(name="File Size", value=format_size(file.size_mb))]


def _as_utc(moment: datetime) -> datetime:
    # naive timestamps from the host are UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _started_at(event: NotificationEvent) -> str:
    moment = _as_utc(event.job_started_at or event.now)
    return moment.astimezone().strftime("%H:%M:%S")


def _processing_time(event: NotificationEvent) -> str:
    if event.kind == EventKind.STARTED:
        return "Starting..."
    if event.job_started_at is None:
        return "Unknown"
    elapsed = _as_utc(event.now) - _as_utc(event.job_started_at)
    return format_elapsed(elapsed.total_seconds())


def build_card(
    event: NotificationEvent,
    media: MediaInfo,
    poster_url: Optional[str] = None,
    *,
    server_url: str = "",
) -> NotificationCard:
    color, emoji, label = _KIND_STYLE[event.kind]
    body = build_body(event, media)

    duration = event.file.duration_seconds
    fields = [
        CardField(name="Current Status", value=f"{emoji} {label}"),
        CardField(name="Started", value=_started_at(event)),
        CardField(name="Processing Time", value=_processing_time(event)),
        CardField(
            name="File Duration",
            value=format_duration(duration) if duration > 0 else "Unknown",
        ),
        *_size_fields(event),
        CardField(name="Details", value=body or DEFAULT_DETAILS, inline=False),
    ]
    fields = [
        CardField(
            name=truncate(f.name, FIELD_NAME_LIMIT),
            value=truncate(f.value, FIELD_VALUE_LIMIT),
            inline=f.inline,
        )
        for f in fields
    ]

    description = f"`{event.library_name}`\n### {media.headline}"
    if server_url:
        description += f"\n[Manage]({server_url})"

    footer = f"Job ID: {event.job_id}" if event.job_id else "Job ID: Unknown"

    return NotificationCard(
        accent_color=color,
        headline=media.headline,
        description=truncate(description, DESCRIPTION_LIMIT),
        body_text=body,
        fields=fields,
        thumbnail_url=poster_url or PLACEHOLDER_POSTER_URL,
        footer_text=truncate(footer, FOOTER_LIMIT),
        issued_at=datetime.now(timezone.utc).isoformat(),
    )
