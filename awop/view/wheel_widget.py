"""QPainter renderer for the wheel, with raster and OpenGL backends.

The widget is a thin shell around the engine: it translates Qt mouse, wheel
and touch events into calls on the gesture machines, runs the animator from a
``QTimer`` and paints the rings and tokens from their live state.

This module exposes :func:`WheelViewWidget`, a factory returning either the
OpenGL-backed widget or the plain raster ``QWidget``. Both expose the same API.
"""

from __future__ import annotations

import logging
import math
import os
import time
from typing import Dict, List, Optional, Tuple

from PyQt5 import QtCore, QtGui, QtWidgets

from ..animation import Cursor, WheelAnimator
from ..bands import BANDS, RING_RADII
from ..control.config import DEFAULTS
from ..geometry import normalized_to_screen, project_to_normalized, to_rad
from ..gestures import Interaction, Point
from ..scoring import ring_colors
from ..tokens import Token, status_text

logger = logging.getLogger(__name__)

_VISUALS = DEFAULTS["visuals"]
_ANIMATION = DEFAULTS["animation"]
_RING_SEGMENTS = 120
_BACKGROUND = "#0f1420"

_CURSORS = {
    Cursor.POINTER: QtCore.Qt.PointingHandCursor,
    Cursor.GRAB: QtCore.Qt.OpenHandCursor,
    Cursor.GRABBING: QtCore.Qt.ClosedHandCursor,
}

__all__ = ["WheelViewWidget"]


def _create_opengl_functions() -> Tuple[Optional[object], Optional[BaseException]]:
    """Instantiate ``QOpenGLFunctions``; returns ``(functions, error)``."""

    factory = getattr(QtGui, "QOpenGLFunctions", None)
    if factory is None:
        return None, AttributeError("PyQt5.QtGui has no attribute 'QOpenGLFunctions'")
    try:
        functions = factory()
    except Exception as exc:  # pragma: no cover - depends on bindings
        return None, exc
    try:
        functions.initializeOpenGLFunctions()
    except Exception as exc:  # pragma: no cover - depends on runtime GL state
        return None, exc
    return functions, None


class _WheelWidgetBase:
    """Behaviour shared by the OpenGL and raster backends."""

    def _init_wheel_widget(self, session, interaction: Optional[Interaction] = None) -> None:
        self.setAttribute(QtCore.Qt.WA_AcceptTouchEvents, True)
        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)
        self._gl: Optional[object] = None
        self._transparent = bool(DEFAULTS["system"]["transparent"])
        self.session = session
        self.interaction = interaction or Interaction(session)
        self.animator = WheelAnimator(session, self.interaction)
        self.scene_offset_y = 0.0
        self._hover_pos: Optional[QtCore.QPointF] = None
        self._ring_colors: Dict[str, QtGui.QColor] = {
            band: QtGui.QColor(color) for band, color in ring_colors().items()
        }
        self._clock_origin = time.monotonic()
        self._timer = QtCore.QTimer(self)
        self._frame_interval_ms = int(_ANIMATION["frameIntervalMs"])
        self._timer.timeout.connect(self._tick)
        self._timer.start(self._frame_interval_ms)

    # ------------------------------------------------------------------ API
    @property
    def viewport(self):
        return self.interaction.viewport

    def now_ms(self) -> float:
        return (time.monotonic() - self._clock_origin) * 1000.0

    def set_scene_offset(self, offset_y: float) -> None:
        self.scene_offset_y = float(offset_y)

    def set_transparent(self, enabled: bool) -> None:  # pragma: no cover - simple setter
        self._transparent = bool(enabled)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, enabled)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, enabled)
        self.setAutoFillBackground(not enabled)
        self.update()

    def project(self, x: float, y: float, z: float = 0.0) -> Optional[Tuple[float, float, float]]:
        """Scene point to ``(screen_x, screen_y, depth)``, or ``None`` when behind the camera."""

        momentum = self.interaction.momentum
        projected = project_to_normalized(
            (x, y, z),
            self.viewport.camera,
            rotation_x=momentum.rotation_x,
            rotation_z=momentum.rotation_z,
            offset_y=self.scene_offset_y,
        )
        if projected is None:
            return None
        nx, ny, depth = projected
        sx, sy = normalized_to_screen(nx, ny, self.viewport.width, self.viewport.height)
        return sx, sy, depth

    def pixel_radius(self, world_radius: float, depth: float) -> float:
        half_height = math.tan(to_rad(self.viewport.camera.fov) / 2.0)
        return world_radius / (depth * half_height) * (self.viewport.height / 2.0)

    def token_at(self, x: float, y: float) -> Optional[Token]:
        """Nearest token whose projected disc contains the screen point."""

        best: Optional[Token] = None
        best_depth = math.inf
        for token in self.session.tokens:
            projected = self.project(token.x, token.y, token.z)
            if projected is None:
                continue
            sx, sy, depth = projected
            radius = self.pixel_radius(_VISUALS["bubbleRadius"] * token.scale, depth)
            if (x - sx) ** 2 + (y - sy) ** 2 <= radius * radius and depth < best_depth:
                best = token
                best_depth = depth
        return best

    # ------------------------------------------------------------------ tick
    def _tick(self) -> None:
        hovered = None
        if self._hover_pos is not None:
            hovered = self.token_at(self._hover_pos.x(), self._hover_pos.y())
        cursor = self.animator.step(self.now_ms(), hovered)
        self.setCursor(_CURSORS[cursor])
        self.update()

    # ------------------------------------------------------------------ mouse
    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.source() != QtCore.Qt.MouseEventNotSynthesized or event.button() != QtCore.Qt.LeftButton:
            event.ignore()
            return
        x, y = event.localPos().x(), event.localPos().y()
        self.interaction.mouse.press(x, y, self.token_at(x, y))
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.source() != QtCore.Qt.MouseEventNotSynthesized:
            event.ignore()
            return
        self._hover_pos = QtCore.QPointF(event.localPos())
        self.interaction.mouse.move(event.localPos().x(), event.localPos().y())
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if event.source() != QtCore.Qt.MouseEventNotSynthesized or event.button() != QtCore.Qt.LeftButton:
            event.ignore()
            return
        self.interaction.mouse.release(event.localPos().x(), event.localPos().y())
        event.accept()

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # type: ignore[override]
        steps = event.angleDelta().y()
        if steps == 0:
            event.ignore()
            return
        # One notch (120) scrolling towards the user maps to a +100 pixel delta.
        self.interaction.mouse.wheel(-steps / 120.0 * 100.0)
        event.accept()

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # type: ignore[override]
        self._hover_pos = None
        super().leaveEvent(event)

    # ------------------------------------------------------------------ touch
    def event(self, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        etype = event.type()
        if etype == QtCore.QEvent.TouchBegin:
            self._touch_begin(event)
            return True
        if etype == QtCore.QEvent.TouchUpdate:
            self._touch_update(event)
            return True
        if etype == QtCore.QEvent.TouchEnd:
            self._touch_end(event)
            return True
        if etype == QtCore.QEvent.TouchCancel:
            self.interaction.touch.touch_cancel()
            return True
        return super().event(event)

    @staticmethod
    def _points(event: QtGui.QTouchEvent, *, include_released: bool = False) -> List[Point]:
        points = []
        for touch_point in event.touchPoints():
            if not include_released and touch_point.state() == QtCore.Qt.TouchPointReleased:
                continue
            points.append((touch_point.pos().x(), touch_point.pos().y()))
        return points

    @staticmethod
    def _released_point(event: QtGui.QTouchEvent) -> Optional[Point]:
        for touch_point in event.touchPoints():
            if touch_point.state() == QtCore.Qt.TouchPointReleased:
                return touch_point.pos().x(), touch_point.pos().y()
        return None

    def _touch_begin(self, event: QtGui.QTouchEvent) -> None:
        self._hover_pos = None
        points = self._points(event)
        hit = self.token_at(*points[0]) if len(points) == 1 else None
        self.interaction.touch.touch_start(points, hit)
        event.accept()

    def _touch_update(self, event: QtGui.QTouchEvent) -> None:
        states = event.touchPointStates()
        active = self._points(event)
        if states & QtCore.Qt.TouchPointReleased:
            self.interaction.touch.touch_end(active, self._released_point(event))
        elif states & QtCore.Qt.TouchPointPressed and len(active) >= 2:
            self.interaction.touch.touch_start(active)
        else:
            self.interaction.touch.touch_move(active)
        event.accept()

    def _touch_end(self, event: QtGui.QTouchEvent) -> None:
        self.interaction.touch.touch_end([], self._released_point(event))
        event.accept()

    # ------------------------------------------------------------------ geometry
    def _handle_resize(self) -> None:
        self.interaction.viewport.resize(max(1, self.width()), max(1, self.height()))
        self.update()

    # ------------------------------------------------------------------ rendering
    def _ring_path(self, radius: float) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath()
        started = False
        for idx in range(_RING_SEGMENTS + 1):
            angle = idx / _RING_SEGMENTS * math.pi * 2.0
            projected = self.project(math.cos(angle) * radius, math.sin(angle) * radius)
            if projected is None:
                started = False
                continue
            sx, sy, _depth = projected
            if started:
                path.lineTo(sx, sy)
            else:
                path.moveTo(sx, sy)
                started = True
        return path

    def _draw_rings(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(QtCore.Qt.NoBrush)
        for band in BANDS:
            color = QtGui.QColor(self._ring_colors[band])
            color.setAlphaF(0.55)
            painter.setPen(QtGui.QPen(color, 2.0))
            painter.drawPath(self._ring_path(RING_RADII[band]))

    def _draw_token(self, painter: QtGui.QPainter, token: Token, sx: float, sy: float, depth: float) -> None:
        radius = self.pixel_radius(_VISUALS["bubbleRadius"] * token.scale, depth)
        if radius <= 0.5:
            return
        opacity = max(0.0, min(1.0, token.opacity))
        base = QtGui.QColor(token.color)

        glow = QtGui.QColor(base)
        glow.setAlphaF(self.animator.glow_opacity(token) * opacity)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(glow)
        painter.drawEllipse(QtCore.QPointF(sx, sy), radius * 1.6, radius * 1.6)

        gradient = QtGui.QRadialGradient(QtCore.QPointF(sx - radius * 0.3, sy - radius * 0.3), radius * 1.3)
        light = base.lighter(135)
        light.setAlphaF(opacity)
        dark = QtGui.QColor(base)
        dark.setAlphaF(opacity)
        gradient.setColorAt(0.0, light)
        gradient.setColorAt(1.0, dark)
        painter.setBrush(QtGui.QBrush(gradient))
        if token.focused:
            painter.setPen(QtGui.QPen(QtGui.QColor(255, 255, 255, int(220 * opacity)), 2.0))
        painter.drawEllipse(QtCore.QPointF(sx, sy), radius, radius)

        label_color = QtGui.QColor(240, 240, 240)
        label_color.setAlphaF(opacity)
        painter.setPen(label_color)
        font = painter.font()
        font.setPointSizeF(max(7.0, radius * 0.45))
        font.setBold(True)
        painter.setFont(font)
        painter.drawText(
            QtCore.QRectF(sx - radius * 4, sy - radius * 2.6, radius * 8, radius * 1.4),
            QtCore.Qt.AlignHCenter | QtCore.Qt.AlignBottom,
            token.name,
        )
        font.setBold(False)
        font.setPointSizeF(max(6.0, radius * 0.32))
        painter.setFont(font)
        painter.drawText(
            QtCore.QRectF(sx - radius * 4, sy + radius * 1.1, radius * 8, radius * 2.0),
            QtCore.Qt.AlignHCenter | QtCore.Qt.AlignTop | QtCore.Qt.TextWordWrap,
            status_text(token),
        )

    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        if self._transparent:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
            painter.fillRect(self.rect(), QtCore.Qt.transparent)
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)
        else:
            painter.fillRect(self.rect(), QtGui.QColor(_BACKGROUND))
        self._draw_rings(painter)

        items: List[Tuple[float, Token, float, float]] = []
        for token in self.session.tokens:
            projected = self.project(token.x, token.y, token.z)
            if projected is None:
                continue
            sx, sy, depth = projected
            items.append((depth, token, sx, sy))
        # far to near
        items.sort(key=lambda item: item[0], reverse=True)
        for depth, token, sx, sy in items:
            self._draw_token(painter, token, sx, sy, depth)


class _OpenGLWheelWidget(_WheelWidgetBase, QtWidgets.QOpenGLWidget):
    """OpenGL-backed renderer when the system can create a GL context."""

    def __init__(self, session, parent: Optional[QtWidgets.QWidget] = None, interaction: Optional[Interaction] = None):
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._init_wheel_widget(session, interaction)

    def initializeGL(self) -> None:  # pragma: no cover - requires GUI context
        self._gl, error = _create_opengl_functions()
        if error is not None:  # pragma: no cover - depends on bindings/runtime
            logger.warning("OpenGL initialisation failed: %s. Falling back to raster clear handling.", error)
        self._apply_clear_color()

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - requires GUI context
        del width, height
        self._handle_resize()

    def _apply_clear_color(self) -> None:
        if self._gl is None:
            return
        alpha = 0.0 if self._transparent else 1.0
        self._gl.glClearColor(0.0, 0.0, 0.0, alpha)

    def set_transparent(self, enabled: bool) -> None:  # pragma: no cover - trivial wrapper
        super().set_transparent(enabled)
        self._apply_clear_color()

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        if self._gl is not None:
            # GL_COLOR_BUFFER_BIT
            self._gl.glClear(0x00004000)
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


class _RasterWheelWidget(_WheelWidgetBase, QtWidgets.QWidget):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    def __init__(self, session, parent: Optional[QtWidgets.QWidget] = None, interaction: Optional[Interaction] = None):
        QtWidgets.QWidget.__init__(self, parent)
        self._init_wheel_widget(session, interaction)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._handle_resize()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("AWOP_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    return hasattr(QtWidgets, "QOpenGLWidget")


def WheelViewWidget(
    session,
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    interaction: Optional[Interaction] = None,
    force_backend: Optional[str] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available wheel widget.

    Parameters
    ----------
    session:
        The :class:`~awop.session.WheelSession` to render and mutate.
    parent:
        Parent widget used by Qt for ownership.
    interaction:
        Optional pre-built :class:`~awop.gestures.Interaction`; one is created
        for ``session`` otherwise.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        pure QWidget implementation. ``AWOP_FORCE_BACKEND`` is consulted when
        omitted.
    """

    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLWheelWidget(session, parent, interaction)
            setattr(widget, "backend_name", "opengl")
            setattr(widget, "uses_opengl", True)
            return widget
        except Exception as exc:
            logger.warning("Unable to initialise OpenGL backend (%r). Using raster widget instead.", exc)
    widget = _RasterWheelWidget(session, parent, interaction)
    setattr(widget, "backend_name", "raster")
    setattr(widget, "uses_opengl", False)
    return widget
