"""Ring bands: radii, point values and the radius → band classifier."""

from __future__ import annotations

from typing import Mapping, Tuple

from .control.config import DEFAULTS

INNER = "inner"
MIDDLE = "middle"
OUTER = "outer"

BANDS: Tuple[str, str, str] = (INNER, MIDDLE, OUTER)

RING_RADII: Mapping[str, float] = dict(DEFAULTS["rings"]["radii"])
RING_POINTS: Mapping[str, int] = dict(DEFAULTS["rings"]["points"])
RING_PADDING: float = float(DEFAULTS["rings"]["padding"])

BAND_TO_CHAR = {INNER: "i", MIDDLE: "m", OUTER: "o"}
CHAR_TO_BAND = {char: band for band, char in BAND_TO_CHAR.items()}

__all__ = [
    "BANDS",
    "BAND_TO_CHAR",
    "CHAR_TO_BAND",
    "INNER",
    "MIDDLE",
    "OUTER",
    "RING_PADDING",
    "RING_POINTS",
    "RING_RADII",
    "band_points",
    "band_radius",
    "classify_band",
    "drag_radius_limits",
    "is_band",
]


def is_band(value: object) -> bool:
    return isinstance(value, str) and value in RING_RADII


def band_radius(band: str, ring_radii: Mapping[str, float] = RING_RADII) -> float:
    return float(ring_radii[band])


def band_points(band: str) -> int:
    return int(RING_POINTS[band])


def drag_radius_limits(
    ring_radii: Mapping[str, float] = RING_RADII, padding: float = RING_PADDING
) -> Tuple[float, float]:
    """Radial range a dragged token may occupy before it is snapped."""
    return float(ring_radii[INNER]) - padding, float(ring_radii[OUTER]) + padding


def classify_band(radius: float, ring_radii: Mapping[str, float] = RING_RADII) -> str:
    """Snap a radial distance to the nearest band.

    The boundaries are the midpoints between neighbouring rings. Comparisons
    are strict, so a radius lying exactly on a midpoint stays in the inner of
    the two bands.
    """

    inner = float(ring_radii[INNER])
    middle = float(ring_radii[MIDDLE])
    outer = float(ring_radii[OUTER])
    if radius > (inner + middle) / 2.0:
        if radius > (middle + outer) / 2.0:
            return OUTER
        return MIDDLE
    return INNER
