from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from nowplaying.models.snapshot import Theme


@dataclass(frozen=True)
class Palette:
    bg: str
    border: str
    text: str
    muted: str
    track: str
    backdrop_opacity: float


PALETTES: Dict[str, Palette] = {
    "dark": Palette(
        bg="#0d1117",
        border="#30363d",
        text="#c9d1d9",
        muted="#8b949e",
        track="#30363d",
        backdrop_opacity=0.25,
    ),
    # fundo claro "engole" o blur, então a capa entra mais forte
    "light": Palette(
        bg="#ffffff",
        border="#d0d7de",
        text="#1f2328",
        muted="#656d76",
        track="#d0d7de",
        backdrop_opacity=0.4,
    ),
}


def palette_for(theme: Theme) -> Palette:
    return PALETTES.get(theme, PALETTES["dark"])
