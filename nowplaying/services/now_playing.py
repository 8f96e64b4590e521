from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from nowplaying.models.snapshot import NotPlaying, NowPlayingPayload, PlaybackSnapshot, SetupError
from nowplaying.services.cover_cache import CoverArtCache
from nowplaying.services.playback_clock import correct_progress, now_ms
from nowplaying.services.spotify_client import SpotifyClient

log = logging.getLogger("now_playing")


MISSING_TOKEN_ERROR = "Missing SPOTIFY_REFRESH_TOKEN. Hit /login and set it in .env."


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_image_url(images: Any) -> str:
    if isinstance(images, list) and images:
        return _dict(images[0]).get("url") or ""
    return ""


def _artist_names(artists: Any) -> List[str]:
    if not isinstance(artists, list):
        return []
    return [a["name"] for a in artists if isinstance(a, dict) and a.get("name")]


def normalize_item(
    raw: Optional[Dict[str, Any]], now: int
) -> Union[PlaybackSnapshot, NotPlaying]:
    """
    Converte o corpo do currently-playing no snapshot interno.

    Único lugar onde campos opcionais recebem default; o renderer
    confia que tudo já vem preenchido.
    """
    if not raw or not raw.get("item"):
        return NotPlaying()

    item = _dict(raw["item"])
    album = _dict(item.get("album"))

    album_name = album.get("name") or ""
    artists = _artist_names(item.get("artists"))
    cover_url = _first_image_url(album.get("images"))

    # podcasts: sem album/artists, os dados ficam no show
    if raw.get("currently_playing_type") == "episode":
        show = _dict(item.get("show"))
        album_name = album_name or show.get("name") or ""
        if not artists and show.get("publisher"):
            artists = [show["publisher"]]
        cover_url = cover_url or _first_image_url(item.get("images")) or _first_image_url(show.get("images"))

    duration_ms = item.get("duration_ms") or 0
    progress_ms, remaining_ms = correct_progress(
        raw.get("progress_ms"),
        duration_ms,
        raw.get("timestamp"),
        now,
    )

    return PlaybackSnapshot(
        isPlaying=bool(raw.get("is_playing")),
        title=item.get("name") or "",
        album=album_name,
        artists=artists,
        explicit=bool(item.get("explicit")),
        trackUrl=_dict(item.get("external_urls")).get("spotify") or "",
        coverUrl=cover_url,
        durationMs=max(0, int(duration_ms)),
        progressMs=progress_ms,
        remainingMs=remaining_ms,
    )


class NowPlayingService:
    def __init__(
        self,
        spotify: SpotifyClient,
        covers: CoverArtCache,
        refresh_token: str,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.spotify = spotify
        self.covers = covers
        self.refresh_token = refresh_token
        self._clock = clock

    async def fetch(self, *, resolve_cover: bool = True) -> NowPlayingPayload:
        if not self.refresh_token:
            log.warning("refresh_token_missing")
            return SetupError(error=MISSING_TOKEN_ERROR)

        access_token = await self.spotify.refresh_access_token(self.refresh_token)
        raw = await self.spotify.currently_playing(access_token)

        snapshot = normalize_item(raw, self._clock())
        if isinstance(snapshot, NotPlaying):
            log.info("now_playing_idle")
            return snapshot

        if resolve_cover:
            snapshot.imageUrl = await self.covers.resolve(snapshot.coverUrl)
        else:
            # sem download: o JSON aponta direto para a URL de origem
            snapshot.imageUrl = snapshot.coverUrl

        log.info(
            "now_playing_ok",
            extra={"title": snapshot.title, "isPlaying": snapshot.isPlaying},
        )
        return snapshot
