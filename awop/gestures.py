"""Gesture state machines turning raw pointer input into wheel mutations.

One machine exists per input modality:

* :class:`MouseGesture`: press/move/release plus the stateless scroll zoom;
* :class:`TouchGesture`: one finger behaves like the mouse, with an explicit tap
  threshold; two or more fingers pinch-zoom the camera;
* :class:`PanelSwipe` and :class:`GrabBarDrag` classify gestures made on the
  detail/help panels.

The machines never talk to Qt. They receive plain screen coordinates and the
token the renderer hit-tested under the pointer, and call the session for every
state change (band commit, focus toggle, dismissal). This keeps them testable
with synthetic event sequences.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

from .bands import classify_band, drag_radius_limits
from .control.config import DEFAULTS
from .geometry import (
    CameraState,
    clamp,
    normalized_to_world_plane,
    optimal_camera_z,
    polar_to_xy,
    radius_of,
    screen_to_normalized,
)
from .tokens import Token

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

_INTERACTION = DEFAULTS["interaction"]
_TOUCH = DEFAULTS["touch"]
_CAMERA = DEFAULTS["camera"]

__all__ = [
    "GrabBarDrag",
    "Interaction",
    "MouseGesture",
    "PanelAction",
    "PanelMetrics",
    "PanelSwipe",
    "Phase",
    "RotationMomentum",
    "Swipe",
    "TokenDrag",
    "TouchGesture",
    "Viewport",
    "analyze_swipe",
    "is_tap",
    "touch_distance",
]


class Phase(enum.Enum):
    IDLE = "idle"
    ROTATING_SCENE = "rotating-scene"
    DRAGGING_TOKEN = "dragging-token"
    PINCH_ZOOMING = "pinch-zooming"


class SessionLike(Protocol):
    """Subset of :class:`awop.session.WheelSession` the machines depend on."""

    def move_token_to_band(self, token: Token, band: str) -> bool: ...

    def toggle_focus(self, token: Token) -> None: ...

    def clear_focus(self) -> None: ...

    def dismiss_panels(self) -> None: ...


# ---------------------------------------------------------------------------
# Shared helpers


def touch_distance(points: Sequence[Point]) -> float:
    if len(points) < 2:
        return 0.0
    dx = points[0][0] - points[1][0]
    dy = points[0][1] - points[1][1]
    return math.sqrt(dx * dx + dy * dy)


def is_tap(start: Point, end: Point, threshold: float = _TOUCH["tapMaxDistance"]) -> bool:
    """A press/release pair moving less than ``threshold`` pixels on both axes."""
    return abs(end[0] - start[0]) < threshold and abs(end[1] - start[1]) < threshold


@dataclass(frozen=True)
class Swipe:
    delta_x: float
    delta_y: float
    horizontal: bool
    vertical: bool

    @property
    def significant(self) -> bool:
        return self.horizontal or self.vertical


def analyze_swipe(
    delta_x: float,
    delta_y: float,
    min_distance: float = _TOUCH["swipeMinDistance"],
    aspect_ratio: float = _TOUCH["swipeAspectRatio"],
) -> Swipe:
    horizontal = abs(delta_x) > min_distance and abs(delta_x) > abs(delta_y) * aspect_ratio
    vertical = abs(delta_y) > min_distance and abs(delta_y) > abs(delta_x) * aspect_ratio
    return Swipe(delta_x, delta_y, horizontal, vertical)


class Viewport:
    """Mutable view size and camera shared by the machines and the renderer."""

    def __init__(self, width: float = 1024.0, height: float = 768.0, camera: Optional[CameraState] = None):
        self.width = max(1.0, float(width))
        self.height = max(1.0, float(height))
        if camera is None:
            camera = CameraState(z=optimal_camera_z(self.width))
        self.camera = camera.with_viewport(self.width, self.height)

    def resize(self, width: float, height: float) -> None:
        """Adopt a new size; the camera distance is reset for the new width."""
        self.width = max(1.0, float(width))
        self.height = max(1.0, float(height))
        self.camera = CameraState(
            z=optimal_camera_z(self.width),
            fov=self.camera.fov,
            near=self.camera.near,
            far=self.camera.far,
            z_min=self.camera.z_min,
            z_max=self.camera.z_max,
        ).with_viewport(self.width, self.height)

    def zoom(self, delta: float) -> float:
        self.camera = self.camera.zoomed(delta)
        return self.camera.z

    def normalized(self, x: float, y: float) -> Point:
        return screen_to_normalized(x, y, self.width, self.height)

    def to_world(self, x: float, y: float) -> Optional[Point]:
        nx, ny = self.normalized(x, y)
        return normalized_to_world_plane(nx, ny, self.camera, projection_z=_CAMERA["projectionZ"])


# ---------------------------------------------------------------------------
# Momentum and token drag


class RotationMomentum:
    """Scene rotation driven by drag velocity, with damping and idle auto-rotation."""

    def __init__(
        self,
        *,
        damping: float = _INTERACTION["rotationDamping"],
        threshold: float = _INTERACTION["autoRotateThreshold"],
        auto_amount: float = _INTERACTION["autoRotateAmount"],
        rotation_x: float = _CAMERA["initRotX"],
    ):
        self.damping = damping
        self.threshold = threshold
        self.auto_amount = auto_amount
        self.velocity_x = 0.0
        self.velocity_y = 0.0
        self.rotation_x = rotation_x
        self.rotation_z = 0.0

    def set_from_delta(self, dx: float, dy: float, sensitivity: float, *, invert_horizontal: bool = False) -> None:
        self.velocity_x = dy * sensitivity
        self.velocity_y = (-dx if invert_horizontal else dx) * sensitivity

    def stop(self) -> None:
        self.velocity_x = 0.0
        self.velocity_y = 0.0

    def is_settled(self) -> bool:
        return abs(self.velocity_x) < self.threshold and abs(self.velocity_y) < self.threshold

    def tick(self, *, interacting: bool, focused: bool) -> bool:
        """Advance one frame. Returns whether auto-rotation was applied."""

        self.rotation_z -= self.velocity_y
        self.rotation_x += self.velocity_x
        self.velocity_x *= self.damping
        self.velocity_y *= self.damping
        if not interacting and not focused and self.is_settled():
            self.rotation_z += self.auto_amount
            return True
        return False


class TokenDrag:
    """Radial drag of one token, keeping its slot angle fixed.

    The offset between the token radius and the grab point radius is kept for
    the whole drag so the bubble does not jump under the pointer.
    """

    def __init__(self, token: Token, radius_offset: float = 0.0):
        self.token = token
        self.radius_offset = radius_offset
        self.min_radius, self.max_radius = drag_radius_limits()
        self.moved = False

    @classmethod
    def begin(cls, token: Token, click_world: Optional[Point]) -> "TokenDrag":
        if click_world is None:
            return cls(token, 0.0)
        offset = radius_of(token.x, token.y) - radius_of(*click_world)
        return cls(token, offset)

    @property
    def radius(self) -> float:
        return radius_of(self.token.x, self.token.y)

    def update(self, pointer_world: Optional[Point]) -> Optional[float]:
        if pointer_world is None:
            return None
        radius = clamp(radius_of(*pointer_world) + self.radius_offset, self.min_radius, self.max_radius)
        self.token.x, self.token.y = polar_to_xy(radius, self.token.angle)
        self.moved = True
        return radius

    def finish(self) -> str:
        return classify_band(self.radius)


# ---------------------------------------------------------------------------
# Pointer machines


class MouseGesture:
    """Mouse machine: ``idle → dragging-token | rotating-scene → idle``.

    A release without any recorded movement counts as a click: it toggles the
    focus of the pressed token, or clears focus when the press hit nothing.
    """

    def __init__(
        self,
        session: SessionLike,
        viewport: Viewport,
        momentum: RotationMomentum,
        *,
        rotation_sensitivity: float = _INTERACTION["rotationSensitivity"],
        zoom_sensitivity: float = _INTERACTION["zoomSensitivity"],
    ):
        self.session = session
        self.viewport = viewport
        self.momentum = momentum
        self.rotation_sensitivity = rotation_sensitivity
        self.zoom_sensitivity = zoom_sensitivity
        self.phase = Phase.IDLE
        self.drag: Optional[TokenDrag] = None
        self._pressed_token: Optional[Token] = None
        self._previous: Point = (0.0, 0.0)
        self._drag_recorded = False

    @property
    def dragged_token(self) -> Optional[Token]:
        return self.drag.token if self.drag is not None else None

    @property
    def active(self) -> bool:
        return self.phase is not Phase.IDLE

    def press(self, x: float, y: float, hit: Optional[Token] = None) -> None:
        self._previous = (x, y)
        self._drag_recorded = False
        self._pressed_token = hit
        if hit is not None:
            self.drag = TokenDrag.begin(hit, self.viewport.to_world(x, y))
            self.phase = Phase.DRAGGING_TOKEN
        else:
            self.drag = None
            self.phase = Phase.ROTATING_SCENE

    def move(self, x: float, y: float) -> None:
        dx = x - self._previous[0]
        dy = y - self._previous[1]
        if self.phase is Phase.DRAGGING_TOKEN and self.drag is not None:
            if dx or dy:
                if self.drag.update(self.viewport.to_world(x, y)) is not None:
                    self._drag_recorded = True
        elif self.phase is Phase.ROTATING_SCENE:
            if dx or dy:
                self._drag_recorded = True
            self.momentum.set_from_delta(dx, dy, self.rotation_sensitivity)
        else:
            return
        self._previous = (x, y)

    def release(self, x: float, y: float) -> None:
        if self.phase is Phase.IDLE:
            return
        drag = self.drag
        clicked = not self._drag_recorded
        pressed = self._pressed_token
        self._reset()
        if drag is not None and drag.moved:
            self.session.move_token_to_band(drag.token, drag.finish())
        if not clicked:
            return
        if pressed is not None:
            self.session.toggle_focus(pressed)
        else:
            self.session.clear_focus()

    def wheel(self, delta_y: float) -> float:
        return self.viewport.zoom(delta_y * self.zoom_sensitivity)

    def _reset(self) -> None:
        self.phase = Phase.IDLE
        self.drag = None
        self._pressed_token = None
        self._drag_recorded = False


class TouchGesture:
    """Touch machine covering single-finger drags/taps and two-finger pinch.

    Release classification uses the displacement from the initial touch point:
    under the tap threshold a token is focused (its band untouched) and a tap
    on empty space dismisses the panels. A pinch started during the sequence
    suppresses tap handling until every finger is lifted.
    """

    def __init__(
        self,
        session: SessionLike,
        viewport: Viewport,
        momentum: RotationMomentum,
        *,
        rotation_sensitivity: float = _TOUCH["rotationSensitivity"],
        zoom_sensitivity: float = _TOUCH["zoomSensitivity"],
        tap_threshold: float = _TOUCH["tapMaxDistance"],
    ):
        self.session = session
        self.viewport = viewport
        self.momentum = momentum
        self.rotation_sensitivity = rotation_sensitivity
        self.zoom_sensitivity = zoom_sensitivity
        self.tap_threshold = tap_threshold
        self.phase = Phase.IDLE
        self.drag: Optional[TokenDrag] = None
        self._start: Point = (0.0, 0.0)
        self._previous: Point = (0.0, 0.0)
        self._pinch_distance = 0.0
        self._pinched = False
        self._tracking = False

    @property
    def dragged_token(self) -> Optional[Token]:
        return self.drag.token if self.drag is not None else None

    @property
    def active(self) -> bool:
        return self._tracking

    def touch_start(self, points: Sequence[Point], hit: Optional[Token] = None) -> None:
        if not points:
            return
        if len(points) >= 2:
            self._tracking = True
            self._enter_pinch(points)
            return
        if self._tracking:
            return
        self._tracking = True
        self._pinched = False
        point = points[0]
        self._start = point
        self._previous = point
        if hit is not None:
            self.drag = TokenDrag.begin(hit, self.viewport.to_world(*point))
            self.phase = Phase.DRAGGING_TOKEN
        else:
            self.drag = None
            self.phase = Phase.ROTATING_SCENE

    def touch_move(self, points: Sequence[Point]) -> None:
        if not self._tracking or not points:
            return
        if len(points) >= 2:
            if self.phase is not Phase.PINCH_ZOOMING:
                self._enter_pinch(points)
                return
            distance = touch_distance(points)
            if self._pinch_distance > 0:
                # Fingers closing (distance shrinking) move the camera away.
                self.viewport.zoom((self._pinch_distance - distance) * self.zoom_sensitivity)
            self._pinch_distance = distance
            return

        point = points[0]
        if self._pinched:
            self._previous = point
            return
        if self.phase is Phase.DRAGGING_TOKEN and self.drag is not None:
            self.drag.update(self.viewport.to_world(*point))
        elif self.phase is Phase.ROTATING_SCENE:
            dx = point[0] - self._previous[0]
            dy = point[1] - self._previous[1]
            self.momentum.set_from_delta(dx, dy, self.rotation_sensitivity, invert_horizontal=True)
        self._previous = point

    def touch_end(self, remaining: Sequence[Point], released: Optional[Point] = None) -> None:
        if not self._tracking:
            return
        if len(remaining) >= 2:
            self._pinch_distance = touch_distance(remaining)
            return
        if len(remaining) == 1:
            if self.phase is Phase.PINCH_ZOOMING:
                self.phase = Phase.IDLE
                self._pinch_distance = 0.0
                self._previous = remaining[0]
            return

        phase = self.phase
        drag = self.drag
        pinched = self._pinched
        end = released if released is not None else self._previous
        self._reset()
        if pinched:
            return
        tapped = is_tap(self._start, end, self.tap_threshold)
        if phase is Phase.DRAGGING_TOKEN and drag is not None:
            if tapped:
                self.session.toggle_focus(drag.token)
            else:
                self.session.move_token_to_band(drag.token, drag.finish())
        elif phase is Phase.ROTATING_SCENE and tapped:
            self.session.dismiss_panels()

    def touch_cancel(self) -> None:
        self._reset()

    def _enter_pinch(self, points: Sequence[Point]) -> None:
        if self.drag is not None:
            logger.debug("Second touch cancelled drag of %s", self.drag.token.name)
        self.drag = None
        self.phase = Phase.PINCH_ZOOMING
        self._pinched = True
        self._pinch_distance = touch_distance(points)

    def _reset(self) -> None:
        self.phase = Phase.IDLE
        self.drag = None
        self._pinch_distance = 0.0
        self._pinched = False
        self._tracking = False


class Interaction:
    """Bundle of viewport, momentum and per-modality machines for one view."""

    def __init__(self, session: SessionLike, viewport: Optional[Viewport] = None):
        self.viewport = viewport or Viewport()
        self.momentum = RotationMomentum()
        self.mouse = MouseGesture(session, self.viewport, self.momentum)
        self.touch = TouchGesture(session, self.viewport, self.momentum)

    @property
    def dragged_token(self) -> Optional[Token]:
        return self.mouse.dragged_token or self.touch.dragged_token

    @property
    def interacting(self) -> bool:
        return self.mouse.active or self.touch.active

    @property
    def rotating(self) -> bool:
        return Phase.ROTATING_SCENE in (self.mouse.phase, self.touch.phase)


# ---------------------------------------------------------------------------
# Panel gestures


class PanelAction(enum.Enum):
    NONE = "none"
    PREVIOUS = "previous"
    NEXT = "next"
    DISMISS = "dismiss"
    EXPAND = "expand"


@dataclass(frozen=True)
class PanelMetrics:
    """Geometry of a scrollable panel at the moment a swipe ends."""

    height: float
    viewport_height: float
    scroll_top: float = 0.0
    scroll_height: float = 0.0
    client_height: float = 0.0

    @property
    def min_height(self) -> float:
        return self.viewport_height * _TOUCH["minPanelHeightRatio"]

    @property
    def at_min_height(self) -> bool:
        return self.height <= self.min_height + _TOUCH["minHeightTolerance"]

    @property
    def at_top(self) -> bool:
        return self.scroll_top <= 0

    @property
    def at_bottom(self) -> bool:
        return self.scroll_height - self.scroll_top <= self.client_height + _TOUCH["scrollBottomTolerance"]


class PanelSwipe:
    """Swipe classifier for the detail panel (or, with ``help_panel``, the help panel).

    Horizontal swipes navigate (right → previous, left → next). A downward
    swipe dismisses only from the top of the content at minimum height; an
    upward swipe expands only from the bottom of the content. The help panel
    only supports the downward dismissal.
    """

    def __init__(self, *, help_panel: bool = False):
        self.help_panel = help_panel
        self._start: Point = (0.0, 0.0)
        self._on_grab_bar = False
        self._started = False

    def start(self, x: float, y: float, *, on_grab_bar: bool = False) -> None:
        self._start = (x, y)
        self._on_grab_bar = on_grab_bar
        self._started = True

    def end(self, x: float, y: float, metrics: PanelMetrics, *, has_focus: bool = True) -> PanelAction:
        if not self._started:
            return PanelAction.NONE
        self._started = False
        if self._on_grab_bar:
            self._on_grab_bar = False
            return PanelAction.NONE
        dx = x - self._start[0]
        dy = y - self._start[1]

        if self.help_panel:
            if dy > _TOUCH["swipeMinDistance"] and metrics.at_top and metrics.at_min_height:
                return PanelAction.DISMISS
            return PanelAction.NONE

        if not has_focus:
            return PanelAction.NONE
        swipe = analyze_swipe(dx, dy)
        if swipe.horizontal:
            return PanelAction.PREVIOUS if dx > 0 else PanelAction.NEXT
        if swipe.vertical and dy > 0 and metrics.at_top and metrics.at_min_height:
            return PanelAction.DISMISS
        if swipe.vertical and dy < 0 and metrics.at_bottom:
            return PanelAction.EXPAND
        return PanelAction.NONE


class GrabBarDrag:
    """Resize a panel by its grab bar; a near-stationary release dismisses it."""

    def __init__(self, *, tap_threshold: float = _TOUCH["tapMaxDistance"]):
        self.tap_threshold = tap_threshold
        self.dragging = False
        self._start_y = 0.0
        self._start_height = 0.0

    def start(self, y: float, start_height: float) -> None:
        self.dragging = True
        self._start_y = y
        self._start_height = start_height

    def move(self, y: float, viewport_height: float) -> Optional[float]:
        if not self.dragging:
            return None
        delta = self._start_y - y
        min_height = viewport_height * _TOUCH["minPanelHeightRatio"]
        max_height = viewport_height - _TOUCH["categoryBarHeight"]
        return max(min_height, min(max_height, self._start_height + delta))

    def end(self, y: float) -> PanelAction:
        if not self.dragging:
            return PanelAction.NONE
        self.dragging = False
        if abs(y - self._start_y) < self.tap_threshold:
            return PanelAction.DISMISS
        return PanelAction.NONE
