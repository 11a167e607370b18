"""PosterResolver tests with a recording transport."""

import asyncio
import json

import httpx
import pytest

from reelnotify.notifications.events import MediaCategory
from reelnotify.notifications.joblog import JobLog
from reelnotify.notifications.poster import PosterResolver, poster_from_response
from reelnotify.notifications.transport import TransportResult

API_KEY = "abcd1234efgh"
POSTER = "https://m.media-amazon.com/images/M/poster.jpg"


class RecordingTransport:
    """Returns queued results and records every request."""

    def __init__(self, *results: TransportResult):
        self.results = list(results)
        self.calls: list[dict] = []

    async def request(self, url, method="GET", headers=None, body=None, timeout=5.0):
        self.calls.append({"url": url, "method": method, "timeout": timeout})
        await asyncio.sleep(0)
        return self.results.pop(0)


def _ok(data: dict) -> TransportResult:
    return TransportResult(success=True, status_code=200, body=json.dumps(data))


def _params(call: dict) -> httpx.QueryParams:
    return httpx.URL(call["url"]).params


def _resolver(transport, api_key=API_KEY):
    lines: list[str] = []
    resolver = PosterResolver(transport, api_key, job_log=JobLog(lines.append))
    return resolver, lines


class TestPosterFromResponse:
    def test_usable(self):
        assert poster_from_response({"Response": "True", "Poster": POSTER}) == POSTER

    @pytest.mark.parametrize(
        "data",
        [
            {"Response": "False", "Error": "Movie not found!"},
            {"Response": "True", "Poster": "N/A"},
            {"Response": "True"},
            ["not", "a", "dict"],
        ],
    )
    def test_unusable(self, data):
        assert poster_from_response(data) is None


class TestPosterResolver:
    @pytest.mark.asyncio
    async def test_no_api_key_skips_network(self):
        transport = RecordingTransport()
        resolver, lines = _resolver(transport, api_key="")

        assert await resolver.resolve("Movie Title", "1999", MediaCategory.MOVIE) is None
        assert transport.calls == []
        assert any("skipping poster fetch" in line for line in lines)

    @pytest.mark.asyncio
    async def test_imdb_id_lookup_first(self):
        transport = RecordingTransport(_ok({"Response": "True", "Poster": POSTER}))
        resolver, _ = _resolver(transport)

        poster = await resolver.resolve(
            "The Matrix", "1999", MediaCategory.MOVIE, "The.Matrix.1999.[imdbid-tt0133093].mkv"
        )

        assert poster == POSTER
        assert len(transport.calls) == 1
        params = _params(transport.calls[0])
        assert params["i"] == "tt0133093"
        assert params["apikey"] == API_KEY
        assert transport.calls[0]["timeout"] == 5.0

    @pytest.mark.asyncio
    async def test_falls_back_to_title_search(self):
        transport = RecordingTransport(
            _ok({"Response": "True", "Poster": "N/A"}),
            _ok({"Response": "True", "Poster": POSTER}),
        )
        resolver, _ = _resolver(transport)

        poster = await resolver.resolve(
            "Show Name", "2020", MediaCategory.SERIES, "Show.Name.2020.tt7654321.S01E03.mkv"
        )

        assert poster == POSTER
        assert len(transport.calls) == 2
        search = _params(transport.calls[1])
        assert search["t"] == "Show Name"
        assert search["y"] == "2020"
        assert search["type"] == "series"

    @pytest.mark.asyncio
    async def test_title_search_without_year(self):
        transport = RecordingTransport(_ok({"Response": "False"}))
        resolver, _ = _resolver(transport)

        assert await resolver.resolve("Home Video", None, MediaCategory.UNKNOWN, "home_video.mkv") is None
        assert len(transport.calls) == 1
        search = _params(transport.calls[0])
        assert "y" not in search
        assert search["type"] == "movie"

    @pytest.mark.asyncio
    async def test_network_failure_is_swallowed_and_redacted(self):
        transport = RecordingTransport(
            TransportResult.failure(f"connect failed for ...apikey={API_KEY}")
        )
        resolver, lines = _resolver(transport)

        assert await resolver.resolve("Movie Title", "1999", MediaCategory.MOVIE) is None
        assert any("OMDb error" in line for line in lines)
        assert all(API_KEY not in line for line in lines)
        assert any("abcd***gh" in line for line in lines)

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        transport = RecordingTransport(
            TransportResult(success=False, status_code=401, body='{"Error":"Invalid API key!"}')
        )
        resolver, lines = _resolver(transport)

        assert await resolver.resolve("Movie Title", "1999", MediaCategory.MOVIE) is None
        assert any("HTTP 401" in line for line in lines)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        transport = RecordingTransport(TransportResult(success=True, status_code=200, body="<html>"))
        resolver, lines = _resolver(transport)

        assert await resolver.resolve("Movie Title", "1999", MediaCategory.MOVIE) is None
        assert any("Invalid JSON response" in line for line in lines)

    @pytest.mark.asyncio
    async def test_never_more_than_two_calls(self):
        transport = RecordingTransport(
            _ok({"Response": "False"}),
            _ok({"Response": "False"}),
        )
        resolver, _ = _resolver(transport)

        await resolver.resolve("The Matrix", "1999", MediaCategory.MOVIE, "The.Matrix.tt0133093.mkv")
        assert len(transport.calls) == 2
