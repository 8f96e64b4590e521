from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from nowplaying.core.config import Settings
from nowplaying.core.errors import SpotifyApiError

log = logging.getLogger("spotify.client")


SCOPES = " ".join(
    [
        "user-read-currently-playing",
        "user-read-playback-state",
    ]
)


def basic_auth(client_id: str, client_secret: str) -> str:
    return base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")


class SpotifyClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self.http = http
        self.settings = settings
        self._token_headers = {
            "Authorization": f"Basic {basic_auth(settings.spotify_client_id, settings.spotify_client_secret)}",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    @property
    def token_url(self) -> str:
        return f"{self.settings.spotify_accounts_url.rstrip('/')}/api/token"

    # =========================
    # OAUTH
    # =========================

    def authorize_url(self) -> str:
        params = {
            "client_id": self.settings.spotify_client_id,
            "response_type": "code",
            "redirect_uri": self.settings.redirect_uri,
            "scope": SCOPES,
        }
        return f"{self.settings.spotify_accounts_url.rstrip('/')}/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        return await self._token_request(
            "Token exchange",
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
            },
        )

    async def refresh_access_token(self, refresh_token: str) -> str:
        data = await self._token_request(
            "Refresh token",
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            },
        )
        token = data.get("access_token")
        if not token:
            raise SpotifyApiError("Refresh token", 200, "no access_token in response")
        log.debug("token_refresh_ok", extra={"expiresIn": data.get("expires_in")})
        return token

    async def _token_request(self, what: str, form: Dict[str, str]) -> Dict[str, Any]:
        r = await self.http.post(self.token_url, headers=self._token_headers, data=form)
        if not r.is_success:
            log.error("spotify_token_error", extra={"status": r.status_code, "grant": form["grant_type"]})
            raise SpotifyApiError(what, r.status_code, r.text)
        return r.json()

    # =========================
    # PLAYER
    # =========================

    async def currently_playing(self, access_token: str) -> Optional[Dict[str, Any]]:
        """
        None quando não tem nada tocando (204 ou corpo vazio).
        """
        r = await self.http.get(
            f"{self.settings.spotify_api_url.rstrip('/')}/me/player/currently-playing",
            params={"additional_types": "track,episode"},
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if r.status_code == 204:
            return None
        if r.status_code == 200:
            if not r.content.strip():
                return None
            return r.json()

        log.error("spotify_api_error", extra={"status": r.status_code})
        raise SpotifyApiError("Spotify API", r.status_code, r.text)
