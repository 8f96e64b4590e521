from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from nowplaying.api.deps import get_settings
from nowplaying.core.config import Settings

router = APIRouter(tags=["index"])

INDEX_HTML = """
    <h1>Spotify Now Playing</h1>
    <ul>
      <li><a href="/login">/login</a> – authorize and get your refresh token</li>
      <li><a href="/now-playing.json">/now-playing.json</a> – raw data</li>
      <li><a href="/now-playing.svg">/now-playing.svg</a> – embeddable card
        (<code>?theme=dark|light&amp;size=wide|compact</code>)</li>
    </ul>
    <p>Set <code>APP_BASE_URL</code> in .env to your deployed URL for production.</p>
"""


@router.get("/", response_class=HTMLResponse)
async def index():
    return INDEX_HTML


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {
        "ok": True,
        "app": settings.app_name,
        "env": settings.app_env,
        "refreshTokenConfigured": bool(settings.spotify_refresh_token),
    }
