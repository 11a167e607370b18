"""
Notification events — the data flowing through the notification engine.

Defines the event kinds a host can report, the file/stream snapshot that
comes with each event, and the derived media info and delivery result.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LIBRARY = "Unknown Library"


class EventKind(str, Enum):
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class StreamKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


class StreamRole(str, Enum):
    COMMENTARY = "commentary"
    MAIN = "main"
    DUBBED = "dubbed"
    ORIGINAL = "original"
    DESCRIPTION = "description"


class MediaCategory(str, Enum):
    MOVIE = "movie"
    SERIES = "series"
    UNKNOWN = "unknown"


# ffprobe disposition flag → role, checked in this order
_DISPOSITION_ROLES = (
    ("comment", StreamRole.COMMENTARY),
    ("default", StreamRole.MAIN),
    ("dub", StreamRole.DUBBED),
    ("original", StreamRole.ORIGINAL),
    ("hearing_impaired", StreamRole.DESCRIPTION),
)


class StreamInfo(BaseModel):
    """A single media stream as reported by the prober."""

    model_config = ConfigDict(frozen=True)

    kind: StreamKind = StreamKind.OTHER
    codec_name: str = ""
    channel_count: Optional[int] = None
    language: Optional[str] = None
    role: Optional[StreamRole] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_probe(cls, stream: dict[str, Any]) -> StreamInfo:
        """Build from an ffprobe-style stream dict."""
        codec_type = stream.get("codec_type", "")
        try:
            kind = StreamKind(codec_type)
        except ValueError:
            kind = StreamKind.OTHER

        role = None
        disposition = stream.get("disposition") or {}
        for flag, candidate in _DISPOSITION_ROLES:
            if disposition.get(flag) == 1:
                role = candidate
                break

        tags = stream.get("tags") or {}
        return cls(
            kind=kind,
            codec_name=stream.get("codec_name") or "",
            channel_count=stream.get("channels") or None,
            language=tags.get("language") or None,
            role=role,
            width=stream.get("width") or None,
            height=stream.get("height") or None,
        )


class FileContext(BaseModel):
    """Snapshot of the file being processed."""

    model_config = ConfigDict(frozen=True)

    path: str = ""
    size_mb: float = 0.0
    duration_seconds: float = 0.0
    streams: list[StreamInfo] = Field(default_factory=list)
    original_size_mb: Optional[float] = None

    @classmethod
    def from_probe(
        cls,
        file_obj: dict[str, Any],
        original_size_mb: Optional[float] = None,
    ) -> FileContext:
        """Build from a host file object (``file``, ``file_size``, ``ffProbeData``)."""
        probe = file_obj.get("ffProbeData") or {}
        return cls(
            path=file_obj.get("file") or "",
            size_mb=float(file_obj.get("file_size") or 0),
            duration_seconds=float(file_obj.get("duration") or 0),
            streams=[StreamInfo.from_probe(s) for s in probe.get("streams") or []],
            original_size_mb=original_size_mb,
        )


class NotificationEvent(BaseModel):
    """A single job event handed over by the host."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    job_id: Optional[str] = None
    file: FileContext = Field(default_factory=FileContext)
    library_name: str = UNKNOWN_LIBRARY
    job_started_at: Optional[datetime] = None
    now: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class MediaInfo(BaseModel):
    """Title information derived from a file name."""

    category: MediaCategory = MediaCategory.UNKNOWN
    title: str = ""
    year: Optional[str] = None
    season: Optional[str] = None
    episode: Optional[str] = None

    @property
    def headline(self) -> str:
        if self.year:
            return f"{self.title} ({self.year})"
        return self.title


class DispatchResult(BaseModel):
    delivered: bool = False
    remote_message_id: Optional[str] = None
