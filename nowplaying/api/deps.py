from __future__ import annotations

from fastapi import HTTPException, Request

from nowplaying.core.config import Settings
from nowplaying.services.now_playing import NowPlayingService
from nowplaying.services.spotify_client import SpotifyClient


def _from_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=500, detail=f"{name} not initialized")
    return value


def get_settings(request: Request) -> Settings:
    return _from_state(request, "settings")


def get_spotify(request: Request) -> SpotifyClient:
    return _from_state(request, "spotify")


def get_now_playing(request: Request) -> NowPlayingService:
    return _from_state(request, "now_playing")
