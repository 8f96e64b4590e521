from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",  # .env may carry variables for other tools
    )

    # app
    app_name: str = "Now Playing Badge"
    log_level: str = "INFO"
    app_env: str = "dev"

    # server
    host: str = "0.0.0.0"
    port: int = 3000

    # public base (para montar o redirect_uri do OAuth)
    app_base_url: str = ""

    # spotify
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_refresh_token: str = ""
    spotify_accounts_url: str = "https://accounts.spotify.com"
    spotify_api_url: str = "https://api.spotify.com/v1"

    # outbound http; None = sem timeout
    http_timeout_s: Optional[float] = None

    # cover art
    cover_cache_ttl_ms: int = 600_000

    @property
    def redirect_uri(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/callback"

    def missing_required(self) -> List[str]:
        required = {
            "SPOTIFY_CLIENT_ID": self.spotify_client_id,
            "SPOTIFY_CLIENT_SECRET": self.spotify_client_secret,
            "APP_BASE_URL": self.app_base_url,
        }
        return [name for name, value in required.items() if not value.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
