"""Identity tokens: the twenty draggable bubbles placed on the wheel."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .bands import BANDS, INNER, RING_POINTS, RING_RADII, band_radius, is_band
from .control.config import DEFAULTS
from .geometry import polar_to_xy

logger = logging.getLogger(__name__)

_VISUALS = DEFAULTS["visuals"]
UNKNOWN_CATEGORY = "Unknown"

__all__ = [
    "Token",
    "UNKNOWN_CATEGORY",
    "build_tokens",
    "category_color",
    "create_token",
    "set_band",
    "set_category_visible",
    "status_text",
    "target_position",
    "tokens_in_category",
]


@dataclass(eq=False)
class Token:
    """Placement state of one identity axis.

    ``name``, ``category`` and ``angle`` never change after creation. ``band``
    is the only persisted field; ``score`` is derived from it. The remaining
    fields are the live sprite state the animator interpolates every tick.
    """

    name: str
    category: str
    angle: float
    slot: int
    color: str
    data: Mapping[str, object] = field(default_factory=dict)
    band: str = INNER
    visible: bool = True
    focused: bool = False
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    scale: float = _VISUALS["defaultScale"]
    opacity: float = _VISUALS["activeOpacity"]
    target_scale: float = _VISUALS["defaultScale"]
    target_opacity: float = _VISUALS["activeOpacity"]

    @property
    def score(self) -> int:
        return RING_POINTS[self.band]

    @property
    def spectrum(self) -> Mapping[str, str]:
        raw = self.data.get("spectrum")
        return raw if isinstance(raw, Mapping) else {}

    @property
    def description(self) -> str:
        return str(self.data.get("description") or "")

    @property
    def law(self) -> Mapping[str, str]:
        raw = self.data.get("ukLaw")
        return raw if isinstance(raw, Mapping) else {}

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def __repr__(self) -> str:
        return f"Token({self.name!r}, band={self.band!r}, slot={self.slot})"


def category_color(category: str, categories: Mapping[str, Mapping[str, object]]) -> str:
    info = categories.get(category)
    if isinstance(info, Mapping):
        color = info.get("color")
        if isinstance(color, str) and color.strip():
            return color.strip()
    return _VISUALS["unknownColor"]


def create_token(
    name: str,
    data: Mapping[str, object],
    slot_index: int,
    total_slots: int,
    categories: Mapping[str, Mapping[str, object]],
) -> Token:
    """Build a token on the inner ring at its equally spaced slot angle."""

    angle = (slot_index / max(1, total_slots)) * math.pi * 2.0
    raw_category = data.get("category") if isinstance(data, Mapping) else None
    category = str(raw_category) if raw_category else UNKNOWN_CATEGORY
    if category not in categories:
        logger.warning("Identity %r references unknown category %r", name, raw_category)
        category = UNKNOWN_CATEGORY
    token = Token(
        name=name,
        category=category,
        angle=angle,
        slot=slot_index,
        color=category_color(category, categories),
        data=data if isinstance(data, Mapping) else {},
    )
    token.x, token.y = target_position(token)
    return token


def build_tokens(
    identity_data: Mapping[str, Mapping[str, object]],
    categories: Mapping[str, Mapping[str, object]],
) -> List[Token]:
    """Create every token, grouped by category order and evenly spread.

    The sort is stable so identities keep their dataset order inside a
    category; unknown categories sort last.
    """

    order: Dict[str, int] = {name: idx for idx, name in enumerate(categories)}
    entries = sorted(
        identity_data.items(),
        key=lambda item: order.get(str(item[1].get("category")), len(order)),
    )
    total = len(entries)
    return [create_token(name, data, idx, total, categories) for idx, (name, data) in enumerate(entries)]


def set_band(token: Token, band: str) -> bool:
    """Move ``token`` to ``band``. Returns whether anything changed."""

    if not is_band(band):
        raise ValueError(f"Unknown band {band!r}; expected one of {', '.join(BANDS)}")
    if token.band == band:
        return False
    token.band = band
    return True


def set_category_visible(token: Token, visible: bool) -> bool:
    visible = bool(visible)
    if token.visible == visible:
        return False
    token.visible = visible
    return True


def target_position(token: Token, ring_radii: Mapping[str, float] = RING_RADII) -> Tuple[float, float]:
    return polar_to_xy(band_radius(token.band, ring_radii), token.angle)


def status_text(token: Token, band: Optional[str] = None) -> str:
    """Spectrum label shown under the bubble for its current (or given) band."""
    return str(token.spectrum.get(band or token.band, ""))


def tokens_in_category(tokens: Sequence[Token], category: str) -> List[Token]:
    return [token for token in tokens if token.category == category]
