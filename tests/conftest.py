"""Shared fakes and fixtures for the badge service tests."""

from typing import Callable, Optional

import httpx
import pytest

from nowplaying.core.config import Settings


# ── Fakes ───────────────────────────────────────────────────────────


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def make_settings(**overrides) -> Settings:
    values = dict(
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_refresh_token="refresh-123",
        app_base_url="https://badge.example.com",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def currently_playing_body(
    *,
    is_playing: bool = True,
    progress_ms: int = 50_000,
    timestamp: Optional[int] = None,
    duration_ms: int = 200_000,
    explicit: bool = True,
) -> dict:
    return {
        "is_playing": is_playing,
        "progress_ms": progress_ms,
        "timestamp": timestamp,
        "currently_playing_type": "track",
        "item": {
            "name": "Song",
            "explicit": explicit,
            "duration_ms": duration_ms,
            "artists": [{"name": "A"}, {"name": "B"}],
            "album": {
                "name": "Record",
                "images": [
                    {"url": "https://i.scdn.co/image/large", "width": 640},
                    {"url": "https://i.scdn.co/image/small", "width": 64},
                ],
            },
            "external_urls": {"spotify": "https://open.spotify.com/track/xyz"},
        },
    }


# ── Shared fixtures ─────────────────────────────────────────────────


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return make_settings()
