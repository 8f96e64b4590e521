from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from nowplaying.api.deps import get_spotify
from nowplaying.render.svg import esc
from nowplaying.services.spotify_client import SpotifyClient

log = logging.getLogger("api.auth")

router = APIRouter(tags=["auth"])


@router.get("/login")
async def login(spotify: SpotifyClient = Depends(get_spotify)):
    return RedirectResponse(spotify.authorize_url(), status_code=302)


@router.get("/callback")
async def callback(
    code: Optional[str] = None,
    spotify: SpotifyClient = Depends(get_spotify),
):
    if not code:
        return PlainTextResponse("Missing ?code", status_code=400)

    try:
        tokens = await spotify.exchange_code(code)
    except Exception as e:
        log.exception("callback_exchange_failed")
        return PlainTextResponse(str(e), status_code=500)

    refresh = tokens.get("refresh_token")
    if not refresh:
        return PlainTextResponse(
            "No refresh_token returned. Ensure you requested correct scopes.",
            status_code=500,
        )

    log.info("callback_refresh_token_issued")
    return HTMLResponse(
        f"""
      <h2>Copy your Refresh Token</h2>
      <pre style="white-space:pre-wrap;word-break:break-all;">{esc(refresh)}</pre>
      <p>Put this in your .env as <code>SPOTIFY_REFRESH_TOKEN</code> and restart the server.</p>
    """
    )
