"""Per-tick animation: momentum, visual targets and interpolation of live sprites."""

from __future__ import annotations

import enum
import math
from typing import Optional

from .control.config import DEFAULTS
from .gestures import Interaction
from .tokens import Token, target_position

_VISUALS = DEFAULTS["visuals"]
_ANIMATION = DEFAULTS["animation"]

__all__ = ["Cursor", "WheelAnimator"]


class Cursor(enum.Enum):
    POINTER = "pointer"
    GRAB = "grab"
    GRABBING = "grabbing"


def _lerp(current: float, target: float, factor: float) -> float:
    return current + (target - current) * factor


class WheelAnimator:
    """Advance the wheel by one frame.

    Must run after the tick's input handling so that targets reflect the
    latest mutations, and before painting.
    """

    def __init__(self, session, interaction: Interaction, *, lerp: Optional[float] = None):
        self.session = session
        self.interaction = interaction
        self.lerp = _ANIMATION["lerp"] if lerp is None else lerp
        self.float_speed = _ANIMATION["floatSpeed"]
        self.float_amplitude = _ANIMATION["floatAmplitude"]
        self.hovered: Optional[Token] = None

    def _apply_targets(self, token: Token, focused: Optional[Token], dragged: Optional[Token]) -> None:
        if token is focused:
            token.target_scale = _VISUALS["selectedScale"]
            token.target_opacity = _VISUALS["selectedOpacity"]
        elif token is dragged:
            token.target_scale = _VISUALS["dragScale"]
        elif token.visible:
            token.target_scale = _VISUALS["defaultScale"]
            token.target_opacity = _VISUALS["activeOpacity"]
        else:
            token.target_scale = _VISUALS["deselectedScale"]
            token.target_opacity = _VISUALS["deselectedOpacity"]

    def glow_opacity(self, token: Token) -> float:
        if token is self.session.focused or token is self.hovered:
            return _VISUALS["glowHighlightOpacity"]
        return _VISUALS["glowOpacity"]

    def step(self, now_ms: float, hovered: Optional[Token] = None) -> Cursor:
        """Run one tick and return the cursor shape for the pointer position."""

        focused = self.session.focused
        dragged = self.interaction.dragged_token
        self.interaction.momentum.tick(interacting=self.interaction.interacting, focused=focused is not None)

        for token in self.session.tokens:
            self._apply_targets(token, focused, dragged)

        self.hovered = None
        if focused is None and dragged is None and hovered is not None:
            hovered.target_scale = _VISUALS["hoverScale"]
            self.hovered = hovered

        if hovered is not None:
            cursor = Cursor.POINTER
        elif self.interaction.rotating:
            cursor = Cursor.GRABBING
        else:
            cursor = Cursor.GRAB

        phase = now_ms * self.float_speed
        for index, token in enumerate(self.session.tokens):
            token.scale = _lerp(token.scale, token.target_scale, self.lerp)
            token.opacity = _lerp(token.opacity, token.target_opacity, self.lerp)
            if token is not dragged:
                tx, ty = target_position(token)
                token.x = _lerp(token.x, tx, self.lerp)
                token.y = _lerp(token.y, ty, self.lerp)
            token.z = math.sin(phase + index) * self.float_amplitude
        return cursor
