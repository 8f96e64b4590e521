from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

Theme = Literal["dark", "light"]
Size = Literal["wide", "compact"]

SPOTIFY_GREEN = "#1DB954"


class PlaybackSnapshot(BaseModel):
    isPlaying: bool = False

    # "" = desconhecido, nunca None
    title: str = ""
    album: str = ""
    artists: List[str] = Field(default_factory=list)
    explicit: bool = False

    trackUrl: str = ""
    coverUrl: str = ""
    # data URI resolvido pelo cache; vazio até a capa ser resolvida
    imageUrl: str = ""

    durationMs: int = 0
    progressMs: int = 0
    remainingMs: int = 0

    accent: str = SPOTIFY_GREEN


class NotPlaying(BaseModel):
    isPlaying: Literal[False] = False


class SetupError(BaseModel):
    error: str


NowPlayingPayload = Union[PlaybackSnapshot, NotPlaying, SetupError]


class RenderOptions(BaseModel):
    theme: Theme = "dark"
    size: Size = "wide"
    statusLabel: Optional[str] = None
