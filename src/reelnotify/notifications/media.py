"""
Media title parsing.

Turns a release-style file name into title / year / season / episode by
trying a fixed list of patterns in priority order. The IMDb id lookup is
a separate pattern and plays no part in that ordering.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import NamedTuple, Optional

from reelnotify.notifications.events import MediaCategory, MediaInfo

_SEP = r"[\s.\-]*"


class TitlePattern(NamedTuple):
    name: str
    regex: re.Pattern[str]
    category: MediaCategory


TITLE_PATTERNS: tuple[TitlePattern, ...] = (
    TitlePattern(
        "tv_with_year",
        re.compile(
            rf"^(?P<title>.+?){_SEP}[(\[]?(?P<year>\d{{4}})[)\]]?{_SEP}"
            rf"S(?P<season>\d+)E(?P<episode>\d+){_SEP}(?P<rest>.*)$",
            re.IGNORECASE,
        ),
        MediaCategory.SERIES,
    ),
    TitlePattern(
        "tv_no_year",
        re.compile(
            rf"^(?P<title>.+?){_SEP}S(?P<season>\d+)E(?P<episode>\d+){_SEP}(?P<rest>.*)$",
            re.IGNORECASE,
        ),
        MediaCategory.SERIES,
    ),
    TitlePattern(
        "tv_season_episode",
        re.compile(
            rf"^(?P<title>.+?){_SEP}Season{_SEP}(?P<season>\d+){_SEP}"
            rf"Episode{_SEP}(?P<episode>\d+){_SEP}(?P<rest>.*)$",
            re.IGNORECASE,
        ),
        MediaCategory.SERIES,
    ),
    TitlePattern(
        "movie",
        re.compile(
            rf"^(?P<title>.+?){_SEP}[(\[]?(?P<year>\d{{4}})[)\]]?",
            re.IGNORECASE,
        ),
        MediaCategory.MOVIE,
    ),
)

CATALOG_ID_PATTERN = re.compile(
    r"(?:\[|\{|\()?(?:imdb[-\s]?)?(?:id[-\s]?)?(tt\d{7,8})(?:\]|\}|\))?",
    re.IGNORECASE,
)

_SEPARATORS = re.compile(r"[.\-_]")
_EXTENSION = re.compile(r"\.[^/.]+$")


def clean_title(text: str) -> str:
    return _SEPARATORS.sub(" ", text).strip()


def _pad(value: Optional[str]) -> Optional[str]:
    return value.zfill(2) if value is not None else None


def parse_media_info(file_name: str) -> MediaInfo:
    """Parse a file name (a leading directory path is ignored)."""
    name = PurePosixPath(file_name).name if file_name else ""

    for pattern in TITLE_PATTERNS:
        match = pattern.regex.match(name)
        if not match:
            continue
        groups = match.groupdict()
        return MediaInfo(
            category=pattern.category,
            title=clean_title(groups["title"]),
            year=groups.get("year"),
            season=_pad(groups.get("season")),
            episode=_pad(groups.get("episode")),
        )

    return MediaInfo(
        category=MediaCategory.UNKNOWN,
        title=clean_title(_EXTENSION.sub("", name)),
    )


def extract_catalog_id(file_name: Optional[str]) -> Optional[str]:
    """Return an embedded IMDb id such as ``tt0133093``, if any."""
    if not file_name:
        return None
    match = CATALOG_ID_PATTERN.search(file_name)
    return match.group(1) if match else None
