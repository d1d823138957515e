"""Privilege score aggregation and the score → colour ramp."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .bands import RING_POINTS
from .control.config import DEFAULTS

RGB = Tuple[float, float, float]

_SCORE = DEFAULTS["score"]
_FALLBACK_RGB = {
    "colorMin": (239, 68, 68),
    "colorMid": (234, 179, 8),
    "colorMax": (34, 197, 94),
}

__all__ = [
    "ScoreSummary",
    "color_for",
    "compute_score",
    "hex_to_rgb",
    "lerp_rgb",
    "normalize",
    "reference_colors",
    "rgb_to_hex",
    "ring_colors",
    "score_bounds",
    "summarize",
]


@dataclass(frozen=True)
class ScoreSummary:
    total: int
    normalized: float
    color: str

    @property
    def percentage(self) -> float:
        return self.normalized * 100.0


def hex_to_rgb(value: str) -> Optional[Tuple[int, int, int]]:
    """Parse ``#rrggbb`` or ``#rgb`` (leading ``#`` optional). Returns ``None`` when malformed."""

    text = (value or "").strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        return None
    try:
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
    except ValueError:
        return None


def rgb_to_hex(r: float, g: float, b: float) -> str:
    # half-up rounding
    channels = (max(0, min(255, int(math.floor(channel + 0.5)))) for channel in (r, g, b))
    return "#" + "".join(f"{channel:02x}" for channel in channels)


def lerp_rgb(rgb_a: RGB, rgb_b: RGB, t: float) -> RGB:
    return (
        rgb_a[0] + (rgb_b[0] - rgb_a[0]) * t,
        rgb_a[1] + (rgb_b[1] - rgb_a[1]) * t,
        rgb_a[2] + (rgb_b[2] - rgb_a[2]) * t,
    )


def reference_colors(score_cfg=None) -> Tuple[RGB, RGB, RGB]:
    """Low/mid/high reference colours, falling back per entry on malformed hex."""

    cfg = score_cfg if score_cfg is not None else _SCORE
    out = []
    for key in ("colorMin", "colorMid", "colorMax"):
        parsed = hex_to_rgb(str(cfg.get(key, "")))
        out.append(parsed if parsed is not None else _FALLBACK_RGB[key])
    return out[0], out[1], out[2]


def compute_score(tokens: Iterable[object]) -> int:
    """Sum of the band points of every token, hidden categories included."""
    return sum(RING_POINTS[token.band] for token in tokens)


def score_bounds(token_count: int) -> Tuple[int, int]:
    return token_count * min(RING_POINTS.values()), token_count * max(RING_POINTS.values())


def normalize(total: float, token_count: int) -> float:
    low, high = score_bounds(token_count)
    if high <= low:
        return 0.0
    return (total - low) / float(high - low)


def color_for(
    normalized: float,
    low: Optional[RGB] = None,
    mid: Optional[RGB] = None,
    high: Optional[RGB] = None,
) -> str:
    """Two-segment ramp: low → mid over ``[0, 0.5]``, mid → high over ``(0.5, 1]``."""

    if low is None or mid is None or high is None:
        ref_low, ref_mid, ref_high = reference_colors()
        low = low if low is not None else ref_low
        mid = mid if mid is not None else ref_mid
        high = high if high is not None else ref_high
    if normalized <= 0.5:
        rgb = lerp_rgb(low, mid, normalized * 2.0)
    else:
        rgb = lerp_rgb(mid, high, (normalized - 0.5) * 2.0)
    return rgb_to_hex(*rgb)


def summarize(tokens: Sequence[object]) -> ScoreSummary:
    total = compute_score(tokens)
    normalized = normalize(total, len(tokens))
    return ScoreSummary(total=total, normalized=normalized, color=color_for(normalized))


def ring_colors() -> dict:
    """Ring stroke colours: the inner ring takes the high end of the ramp."""
    low, mid, high = reference_colors()
    return {"inner": rgb_to_hex(*high), "middle": rgb_to_hex(*mid), "outer": rgb_to_hex(*low)}
