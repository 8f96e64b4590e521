from __future__ import annotations

import hashlib
from typing import List, Optional

from nowplaying.models.snapshot import PlaybackSnapshot, RenderOptions
from nowplaying.render.svg import SVG_NS, Node, document, el, fmt_num
from nowplaying.render.themes import Palette, palette_for
from nowplaying.services.cover_cache import DEFAULT_COVER
from nowplaying.services.playback_clock import ms_to_clock

# =========================
# LAYOUT
# =========================

ART_SIZE = {"wide": 200, "compact": 180}
TEXT_WIDTH = 320
PADDING = 20
RADIUS = 14
CONTENT_WIDTH = TEXT_WIDTH - 2 * PADDING

BAR_HEIGHT = 6
MIN_ANIMATED_REMAINING_MS = 500

EQ_BARS = 4
EQ_BAR_WIDTH = 3
EQ_GAP = 2
EQ_HEIGHTS = [3, 12, 5, 10, 3]
EQ_BASE_DUR_S = 0.9
EQ_STEP_S = 0.1

EXPLICIT_SIZE = 14
EXPLICIT_OFFSET = EXPLICIT_SIZE + 6

FONT = "-apple-system,BlinkMacSystemFont,Segoe UI,Helvetica,Arial,sans-serif"
NO_ARTIST_PLACEHOLDER = "*cricket noises*"
DASH = "—"


def filled_width(progress_ms: int, duration_ms: int) -> int:
    if duration_ms <= 0:
        return 0
    progress = max(0, min(int(progress_ms), int(duration_ms)))
    # meio pixel arredonda para cima, em inteiros
    return (2 * CONTENT_WIDTH * progress + duration_ms) // (2 * duration_ms)


def status_label(snapshot: PlaybackSnapshot, options: RenderOptions) -> str:
    if options.statusLabel:
        return options.statusLabel
    return "Now Playing" if snapshot.isPlaying else "Not Playing"


def artist_line(snapshot: PlaybackSnapshot) -> str:
    # o placeholder depende só de isPlaying, mesmo com artistas presentes
    if not snapshot.isPlaying:
        return NO_ARTIST_PLACEHOLDER
    return ", ".join(snapshot.artists) or snapshot.album or DASH


# =========================
# PIECES
# =========================

def _equalizer(x: float, baseline: float, color: str) -> Node:
    group = el("g", id="equalizer")
    for i in range(EQ_BARS):
        dur = f"{fmt_num(EQ_BASE_DUR_S + EQ_STEP_S * i)}s"
        bx = x + i * (EQ_BAR_WIDTH + EQ_GAP)
        group.add(
            el(
                "rect",
                el(
                    "animate",
                    attributeName="height",
                    values=";".join(str(h) for h in EQ_HEIGHTS),
                    dur=dur,
                    repeatCount="indefinite",
                ),
                el(
                    "animate",
                    attributeName="y",
                    values=";".join(fmt_num(baseline - h) for h in EQ_HEIGHTS),
                    dur=dur,
                    repeatCount="indefinite",
                ),
                x=bx,
                y=baseline - EQ_HEIGHTS[0],
                width=EQ_BAR_WIDTH,
                height=EQ_HEIGHTS[0],
                rx=1,
                fill=color,
            )
        )
    return group


def _explicit_badge(x: float, y: float) -> Node:
    return el(
        "g",
        el("rect", x=x, y=y, width=EXPLICIT_SIZE, height=EXPLICIT_SIZE, rx=2, fill="#e5534b"),
        el(
            "text",
            text="E",
            x=x + EXPLICIT_SIZE / 2,
            y=y + EXPLICIT_SIZE - 3,
            fill="#ffffff",
            font_family=FONT,
            font_size=10,
            font_weight=700,
            text_anchor="middle",
        ),
        id="explicit-badge",
    )


def _progress(snapshot: PlaybackSnapshot, x: float, y: float, palette: Palette) -> List[Node]:
    filled = filled_width(snapshot.progressMs, snapshot.durationMs)

    fill = el(
        "rect",
        id="progress-fill",
        x=x,
        y=y,
        width=filled,
        height=BAR_HEIGHT,
        rx=BAR_HEIGHT / 2,
        fill=snapshot.accent,
    )
    if (
        snapshot.isPlaying
        and snapshot.remainingMs > MIN_ANIMATED_REMAINING_MS
        and filled < CONTENT_WIDTH
    ):
        # chega em 100% no instante em que a faixa termina
        fill.add(
            el(
                "animate",
                attributeName="width",
                attributeType="XML",
                begin="0s",
                dur=f"{snapshot.remainingMs}ms",
                from_=filled,
                to=CONTENT_WIDTH,
                calcMode="linear",
                fill="freeze",
            )
        )

    track = el(
        "rect",
        id="progress-track",
        x=x,
        y=y,
        width=CONTENT_WIDTH,
        height=BAR_HEIGHT,
        rx=BAR_HEIGHT / 2,
        fill=palette.track,
    )
    return [track, fill]


# =========================
# CARD
# =========================

def render_card(snapshot: PlaybackSnapshot, options: Optional[RenderOptions] = None) -> str:
    """
    Monta o SVG do badge. Função pura: mesmo snapshot + options, mesmo texto.
    """
    options = options or RenderOptions()
    palette = palette_for(options.theme)

    art = ART_SIZE.get(options.size, ART_SIZE["wide"])
    width = art + TEXT_WIDTH
    height = art
    text_x = art + PADDING

    label = status_label(snapshot, options)
    title = snapshot.title or DASH
    image = snapshot.imageUrl or snapshot.coverUrl or DEFAULT_COVER

    label_y = PADDING + 12
    title_y = PADDING + 50
    artist_y = title_y + 26
    bar_y = height - PADDING - 34
    time_y = height - PADDING - 6

    badge = None
    if snapshot.explicit:
        badge = _explicit_badge(text_x - EXPLICIT_OFFSET, title_y - EXPLICIT_SIZE + 2)

    equalizer = None
    if snapshot.isPlaying:
        eq_width = EQ_BARS * EQ_BAR_WIDTH + (EQ_BARS - 1) * EQ_GAP
        equalizer = _equalizer(width - PADDING - eq_width, label_y, snapshot.accent)

    text_block = el(
        "g",
        el("text", text=label, x=text_x, y=label_y, fill=snapshot.accent, font_size=12, font_weight=600),
        badge,
        el("text", text=title, x=text_x, y=title_y, fill=palette.text, font_size=20 if options.size == "wide" else 18, font_weight=700),
        el("text", text=artist_line(snapshot), x=text_x, y=artist_y, fill=palette.muted, font_size=14, font_weight=500),
        font_family=FONT,
    )

    art_tile = el("image", href=image, x=0, y=0, width=art, height=art, preserveAspectRatio="xMidYMid slice")

    content: List[Node] = [art_tile, text_block]
    if snapshot.trackUrl:
        content = [el("a", *content, href=snapshot.trackUrl, target="_blank", rel="noopener noreferrer")]

    body = el(
        "g",
        el("rect", x=0, y=0, width=width, height=height, fill=palette.bg),
        el(
            "image",
            href=image,
            x=-PADDING,
            y=-PADDING,
            width=width + 2 * PADDING,
            height=height + 2 * PADDING,
            preserveAspectRatio="xMidYMid slice",
            filter="url(#backdrop-blur)",
            opacity=palette.backdrop_opacity,
        ),
        *content,
        equalizer,
        *_progress(snapshot, text_x, bar_y, palette),
        el(
            "text",
            text=f"{ms_to_clock(snapshot.progressMs)} / {ms_to_clock(snapshot.durationMs)}",
            x=text_x,
            y=time_y,
            fill=palette.muted,
            font_family=FONT,
            font_size=12,
        ),
        clip_path="url(#card-clip)",
    )

    root = el(
        "svg",
        el(
            "defs",
            el("clipPath", el("rect", x=0, y=0, width=width, height=height, rx=RADIUS, ry=RADIUS), id="card-clip"),
            el("filter", el("feGaussianBlur", stdDeviation=18), id="backdrop-blur"),
        ),
        body,
        el(
            "rect",
            x=0.5,
            y=0.5,
            width=width - 1,
            height=height - 1,
            rx=RADIUS,
            ry=RADIUS,
            fill="none",
            stroke=palette.border,
            stroke_width=1,
        ),
        xmlns=SVG_NS,
        width=width,
        height=height,
        viewBox=f"0 0 {width} {height}",
        role="img",
        aria_label=f"{label}: {title}",
    )
    return document(root)


def render_error_card(message: str) -> str:
    root = el(
        "svg",
        el("rect", x=0.5, y=0.5, rx=12, ry=12, width=499, height=79, fill="#0d1117", stroke="#30363d"),
        el(
            "text",
            text=f"Error: {message}",
            x=16,
            y=48,
            fill="#e5534b",
            font_family="Segoe UI, Helvetica, Arial, sans-serif",
            font_size=14,
        ),
        xmlns=SVG_NS,
        width=500,
        height=80,
        viewBox="0 0 500 80",
        role="img",
        aria_label="Error",
    )
    return document(root)


def content_etag(markup: str) -> str:
    return '"' + hashlib.sha1(markup.encode("utf-8")).hexdigest() + '"'
