from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from nowplaying.api.deps import get_now_playing
from nowplaying.models.snapshot import NotPlaying, PlaybackSnapshot, RenderOptions, SetupError
from nowplaying.render.card import content_etag, render_card, render_error_card
from nowplaying.services.now_playing import NowPlayingService

log = logging.getLogger("api.now_playing")

router = APIRouter(tags=["now-playing"])

SVG_MEDIA_TYPE = "image/svg+xml"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

# revalida sempre, mas nunca em cache compartilhado (camo/CDN)
BADGE_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def build_render_options(theme: Optional[str], size: Optional[str], label: Optional[str]) -> RenderOptions:
    return RenderOptions(
        theme="light" if theme == "light" else "dark",
        size="compact" if size == "compact" else "wide",
        statusLabel=label or None,
    )


def etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    if not if_none_match:
        return False
    candidates = [c.strip() for c in if_none_match.split(",")]
    if "*" in candidates:
        return True
    return any(c.removeprefix("W/") == etag for c in candidates)


# =====================================================
# JSON
# =====================================================

@router.get("/now-playing.json")
async def now_playing_json(service: NowPlayingService = Depends(get_now_playing)):
    try:
        payload = await service.fetch(resolve_cover=False)
    except Exception as e:
        log.exception("now_playing_json_failed")
        return JSONResponse({"error": str(e)}, status_code=500, headers={"Cache-Control": "no-cache"})

    return JSONResponse(payload.model_dump(), headers=NO_CACHE_HEADERS)


# =====================================================
# SVG BADGE
# =====================================================

@router.get("/now-playing.svg")
async def now_playing_svg(
    request: Request,
    theme: Optional[str] = None,
    size: Optional[str] = None,
    label: Optional[str] = None,
    service: NowPlayingService = Depends(get_now_playing),
):
    options = build_render_options(theme, size, label)

    try:
        payload = await service.fetch()

        if isinstance(payload, SetupError):
            snapshot = PlaybackSnapshot(title=payload.error)
            options = options.model_copy(update={"statusLabel": options.statusLabel or "Setup required"})
        elif isinstance(payload, NotPlaying):
            snapshot = PlaybackSnapshot()
        else:
            snapshot = payload

        svg = render_card(snapshot, options)
    except Exception as e:
        log.exception("now_playing_svg_failed")
        # sempre 200: quem embeda não deve ver ícone de imagem quebrada
        return Response(
            render_error_card(str(e)),
            media_type=SVG_MEDIA_TYPE,
            headers={"Cache-Control": "no-cache"},
        )

    etag = content_etag(svg)
    headers = {"ETag": etag, **BADGE_CACHE_HEADERS}

    if etag_matches(request.headers.get("if-none-match"), etag):
        return Response(status_code=304, headers=headers)

    return Response(svg, media_type=SVG_MEDIA_TYPE, headers=headers)
