from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx

from nowplaying.services.playback_clock import now_ms

log = logging.getLogger("cover.cache")


DEFAULT_TTL_MS = 600_000

# placeholder quando a faixa não tem capa
DEFAULT_COVER = (
    "data:image/svg+xml;base64,"
    + base64.b64encode(
        b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64">'
        b'<rect width="64" height="64" fill="#1DB954"/>'
        b'<path d="M18 26c10-3 20-2 28 3M20 33c8-2 16-1 22 2M22 40c6-1 12 0 17 2" '
        b'stroke="#0d1117" stroke-width="3" fill="none" stroke-linecap="round"/>'
        b"</svg>"
    ).decode("ascii")
)

# 1x1 GIF transparente, usado quando o download da capa falha
FALLBACK_PIXEL = (
    "data:image/gif;base64,R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"
)


@dataclass(frozen=True)
class CacheEntry:
    data_uri: str
    stored_at: int


class CoverArtCache:
    """
    Cache em memória: URL da capa -> data URI.

    - TTL fixo, expiração preguiçosa (só na próxima leitura)
    - falha de download nunca é cacheada
    - sem lock: leitura e escrita acontecem entre awaits
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.http = http
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return sum(1 for url in list(self._entries) if self.get(url) is not None)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.get(url) is not None

    def get(self, url: str) -> Optional[str]:
        entry = self._entries.get(url)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_ms:
            del self._entries[url]
            log.debug("cover_cache_expired", extra={"url": url})
            return None
        return entry.data_uri

    async def resolve(self, url: str) -> str:
        if not url:
            return DEFAULT_COVER

        cached = self.get(url)
        if cached is not None:
            return cached

        try:
            r = await self.http.get(url, follow_redirects=True)
            r.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("cover_fetch_failed", extra={"url": url, "error": str(e)})
            return FALLBACK_PIXEL

        content_type = r.headers.get("content-type", "image/jpeg").split(";")[0].strip()
        payload = base64.b64encode(r.content).decode("ascii")
        data_uri = f"data:{content_type or 'image/jpeg'};base64,{payload}"

        self._entries[url] = CacheEntry(data_uri=data_uri, stored_at=self._clock())
        log.info("cover_cached", extra={"url": url, "bytes": len(r.content)})
        return data_uri
