"""
PosterResolver — optional artwork lookup against the OMDb API.

Lookups run as an ordered list of attempts: the IMDb id embedded in the
file name first (when there is one), then a title search. The first
usable poster wins. Without an API key nothing is requested at all.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from reelnotify.notifications.events import MediaCategory
from reelnotify.notifications.joblog import JobLog
from reelnotify.notifications.media import extract_catalog_id
from reelnotify.notifications.redact import redact_api_key, redact_text
from reelnotify.notifications.transport import METADATA_TIMEOUT, HttpTransport

OMDB_URL = "https://www.omdbapi.com/"
_MISSING_POSTER = "N/A"


class PosterLookupError(Exception):
    """A metadata request failed (network, HTTP status or JSON)."""


@dataclass(frozen=True)
class PosterAttempt:
    """One lookup strategy: a label for the log and the query to send."""

    strategy: str
    params: dict[str, str]


def poster_from_response(data: Any) -> Optional[str]:
    """Return the poster URL if the OMDb response carries a usable one."""
    if not isinstance(data, dict) or data.get("Response") != "True":
        return None
    poster = data.get("Poster")
    if not poster or poster == _MISSING_POSTER:
        return None
    return str(poster)


class PosterResolver:
    """Resolves a poster URL for a parsed title, or None."""

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        api_key: str = "",
        *,
        job_log: Optional[JobLog] = None,
        timeout: float = METADATA_TIMEOUT,
        base_url: str = OMDB_URL,
    ) -> None:
        self.transport = transport or HttpTransport()
        self.api_key = api_key
        self.job_log = job_log or JobLog()
        self.timeout = timeout
        self.base_url = base_url

    def plan(
        self,
        title: str,
        year: Optional[str],
        category: MediaCategory,
        file_name: Optional[str],
    ) -> list[PosterAttempt]:
        attempts: list[PosterAttempt] = []

        catalog_id = extract_catalog_id(file_name)
        if catalog_id:
            attempts.append(PosterAttempt("imdb_id", {"i": catalog_id}))

        search: dict[str, str] = {"t": title}
        if year:
            search["y"] = year
        search["type"] = "series" if category == MediaCategory.SERIES else "movie"
        attempts.append(PosterAttempt("title_search", search))
        return attempts

    async def resolve(
        self,
        title: str,
        year: Optional[str] = None,
        category: MediaCategory = MediaCategory.UNKNOWN,
        file_name: Optional[str] = None,
    ) -> Optional[str]:
        if not self.api_key or not self.api_key.strip():
            self.job_log.info("🔍 No OMDb API key provided, skipping poster fetch")
            return None

        try:
            for attempt in self.plan(title, year, category, file_name):
                if attempt.strategy == "imdb_id":
                    self.job_log.info(f"🎬 Found IMDb ID: {attempt.params['i']}")
                poster = poster_from_response(await self._fetch(attempt))
                if poster:
                    return poster
        except PosterLookupError as exc:
            self.job_log.error(
                f"❌ OMDb error (API key: {redact_api_key(self.api_key)}): "
                f"{redact_text(str(exc), self.api_key)}"
            )
        return None

    async def _fetch(self, attempt: PosterAttempt) -> Any:
        url = httpx.URL(self.base_url, params={**attempt.params, "apikey": self.api_key})
        result = await self.transport.request(str(url), timeout=self.timeout)

        if result.status_code is None:
            raise PosterLookupError(result.error or "request failed")
        if not result.success:
            raise PosterLookupError(f"HTTP {result.status_code}: {result.body[:100]}")
        try:
            return json.loads(result.body)
        except ValueError as exc:
            raise PosterLookupError(f"Invalid JSON response: {exc}") from exc
