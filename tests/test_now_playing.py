"""Mapping the currently-playing response into a snapshot, and the fetch flow."""

import asyncio

import httpx
import pytest

from conftest import FakeClock, RecordingTransport, currently_playing_body, make_settings
from nowplaying.core.errors import SpotifyApiError
from nowplaying.models.snapshot import NotPlaying, PlaybackSnapshot, SetupError
from nowplaying.services.cover_cache import FALLBACK_PIXEL, CoverArtCache
from nowplaying.services.now_playing import MISSING_TOKEN_ERROR, NowPlayingService, normalize_item
from nowplaying.services.spotify_client import SpotifyClient

NOW = 1_700_000_000_000


class TestNormalizeItem:
    def test_maps_track_fields(self):
        snap = normalize_item(currently_playing_body(timestamp=NOW - 1_000), NOW)

        assert isinstance(snap, PlaybackSnapshot)
        assert snap.isPlaying is True
        assert snap.title == "Song"
        assert snap.album == "Record"
        assert snap.artists == ["A", "B"]
        assert snap.explicit is True
        assert snap.trackUrl == "https://open.spotify.com/track/xyz"
        assert snap.coverUrl == "https://i.scdn.co/image/large"
        assert snap.durationMs == 200_000
        assert snap.progressMs == 51_000
        assert snap.remainingMs == 149_000
        assert snap.accent == "#1DB954"

    def test_none_is_not_playing(self):
        assert normalize_item(None, NOW) == NotPlaying()

    def test_missing_item_is_not_playing(self):
        result = normalize_item({"is_playing": True, "item": None}, NOW)
        assert result.model_dump() == {"isPlaying": False}

    def test_sparse_item_gets_defaults(self):
        snap = normalize_item({"is_playing": False, "item": {"id": "x"}}, NOW)

        assert snap.title == ""
        assert snap.album == ""
        assert snap.artists == []
        assert snap.explicit is False
        assert snap.trackUrl == ""
        assert snap.coverUrl == ""
        assert snap.durationMs == 0
        assert snap.progressMs == 0
        assert snap.remainingMs == 0

    def test_episode_uses_show_metadata(self):
        raw = {
            "is_playing": True,
            "progress_ms": 1_000,
            "currently_playing_type": "episode",
            "item": {
                "name": "Episode 12",
                "duration_ms": 3_600_000,
                "images": [{"url": "https://i.scdn.co/image/episode"}],
                "show": {"name": "The Show", "publisher": "Host Network"},
                "external_urls": {"spotify": "https://open.spotify.com/episode/1"},
            },
        }

        snap = normalize_item(raw, NOW)

        assert snap.album == "The Show"
        assert snap.artists == ["Host Network"]
        assert snap.coverUrl == "https://i.scdn.co/image/episode"


def _service(handler, refresh_token="refresh-123", clock=None):
    transport = RecordingTransport(handler)
    http = httpx.AsyncClient(transport=transport)
    settings = make_settings(spotify_refresh_token=refresh_token)
    clock = clock or FakeClock(NOW)
    service = NowPlayingService(
        SpotifyClient(http, settings),
        CoverArtCache(http, clock=clock),
        refresh_token,
        clock=clock,
    )
    return service, transport


def _spotify_handler(player_response: httpx.Response):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/token":
            return httpx.Response(200, json={"access_token": "access-1", "expires_in": 3600})
        if request.url.path == "/v1/me/player/currently-playing":
            return player_response
        if request.url.host == "i.scdn.co":
            return httpx.Response(200, content=b"img", headers={"content-type": "image/jpeg"})
        return httpx.Response(500)

    return handler


class TestNowPlayingService:
    def test_missing_refresh_token_makes_no_network_call(self):
        service, transport = _service(_spotify_handler(httpx.Response(204)), refresh_token="")

        result = asyncio.run(service.fetch())

        assert result == SetupError(error=MISSING_TOKEN_ERROR)
        assert transport.requests == []

    def test_no_content_is_not_playing(self):
        service, _ = _service(_spotify_handler(httpx.Response(204)))

        assert asyncio.run(service.fetch()) == NotPlaying()

    def test_playing_track_resolves_cover(self):
        body = currently_playing_body(timestamp=NOW)
        service, transport = _service(_spotify_handler(httpx.Response(200, json=body)))

        snap = asyncio.run(service.fetch())

        assert snap.imageUrl == "data:image/jpeg;base64,aW1n"
        assert snap.progressMs == 50_000
        assert [r.url.host for r in transport.requests] == [
            "accounts.spotify.com",
            "api.spotify.com",
            "i.scdn.co",
        ]

    def test_skipped_cover_resolution_points_at_source_url(self):
        body = currently_playing_body(timestamp=NOW)
        service, transport = _service(_spotify_handler(httpx.Response(200, json=body)))

        snap = asyncio.run(service.fetch(resolve_cover=False))

        assert snap.imageUrl == "https://i.scdn.co/image/large"
        assert len(transport.requests) == 2

    def test_broken_cover_falls_back(self):
        body = currently_playing_body(timestamp=NOW)

        def handler(request):
            if request.url.host == "i.scdn.co":
                return httpx.Response(404)
            return _spotify_handler(httpx.Response(200, json=body))(request)

        service, _ = _service(handler)

        assert asyncio.run(service.fetch()).imageUrl == FALLBACK_PIXEL

    def test_api_error_propagates(self):
        service, _ = _service(_spotify_handler(httpx.Response(429, text="rate limited")))

        with pytest.raises(SpotifyApiError) as exc:
            asyncio.run(service.fetch())

        assert exc.value.status_code == 429
        assert "rate limited" in str(exc.value)
