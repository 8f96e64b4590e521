from __future__ import annotations

import time
from typing import Optional, Tuple

# acima disso o timestamp do servidor não é confiável
MAX_TRUSTED_SKEW_MS = 2000


def now_ms() -> int:
    return int(time.time() * 1000)


def correct_progress(
    progress_ms: Optional[int],
    duration_ms: Optional[int],
    server_timestamp_ms: Optional[int],
    now: int,
) -> Tuple[int, int]:
    """
    Adjusts the reported playback position by the time elapsed since the
    server stamped it, so a badge rendered a moment later does not lag.

    The correction is only applied when the server clock and the local clock
    agree within MAX_TRUSTED_SKEW_MS; otherwise the raw value is used.
    Returns (progress_ms, remaining_ms) with progress clamped to the track.
    """
    duration = max(0, int(duration_ms or 0))
    progress = int(progress_ms or 0)

    if server_timestamp_ms is not None:
        delta = now - int(server_timestamp_ms)
        if abs(delta) < MAX_TRUSTED_SKEW_MS:
            progress += delta

    progress = max(0, min(duration, progress))
    return progress, duration - progress


def ms_to_clock(ms: Optional[int] = 0) -> str:
    if not ms or ms < 0:
        ms = 0
    total_s = int(ms) // 1000
    return f"{total_s // 60}:{total_s % 60:02d}"
