from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from nowplaying.core.config import Settings, get_settings
from nowplaying.core.errors import ConfigurationError
from nowplaying.core.logging import setup_logging

from nowplaying.services.cover_cache import CoverArtCache
from nowplaying.services.now_playing import NowPlayingService
from nowplaying.services.spotify_client import SpotifyClient

from nowplaying.api.routes_auth import router as auth_router
from nowplaying.api.routes_index import router as index_router
from nowplaying.api.routes_now_playing import router as now_playing_router

log = logging.getLogger("app")


def build_services(app: FastAPI, settings: Settings, http: httpx.AsyncClient) -> None:
    app.state.settings = settings
    app.state.http = http
    app.state.spotify = SpotifyClient(http, settings)
    app.state.covers = CoverArtCache(http, ttl_ms=settings.cover_cache_ttl_ms)
    app.state.now_playing = NowPlayingService(
        app.state.spotify,
        app.state.covers,
        settings.spotify_refresh_token,
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or get_settings()
        setup_logging(cfg.log_level)
        log.info("app_starting", extra={"env": cfg.app_env})

        missing = cfg.missing_required()
        if missing:
            log.error("config_missing", extra={"missing": missing})
            raise ConfigurationError(missing)

        if not cfg.spotify_refresh_token:
            log.warning("refresh_token_not_set", extra={"hint": f"{cfg.app_base_url}/login"})

        http = httpx.AsyncClient(timeout=cfg.http_timeout_s)
        build_services(app, cfg, http)
        log.info("services_ready")

        try:
            yield
        finally:
            try:
                await http.aclose()
            except Exception:
                log.exception("error_closing_http_client")
            log.info("app_stopped")

    app = FastAPI(
        title=(settings.app_name if settings else "Now Playing Badge"),
        lifespan=lifespan,
    )

    app.include_router(index_router)
    app.include_router(auth_router)
    app.include_router(now_playing_router)
    return app


app = create_app()
