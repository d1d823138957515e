"""Coordinate helpers shared by the gesture machines and the wheel renderer.

Three spaces are involved:

* screen pixels, origin at the top-left corner of the view, y pointing down;
* normalized device coordinates ``(nx, ny)`` in ``[-1, 1]²`` with y pointing up;
* the world plane ``z = 0`` on which the rings and tokens live.

The camera always sits on the positive z axis and looks at the origin, so the
unprojection reduces to a ray/plane intersection without a full matrix stack.
All functions are pure and cheap enough to run on every pointer-move event.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .control.config import DEFAULTS

__all__ = [
    "CameraState",
    "clamp",
    "normalized_to_screen",
    "normalized_to_world_plane",
    "optimal_camera_z",
    "polar_to_xy",
    "project_to_normalized",
    "radius_of",
    "screen_to_normalized",
]

_CAMERA = DEFAULTS["camera"]
_TOUCH = DEFAULTS["touch"]
_EPSILON = 1e-9


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def to_rad(deg: float) -> float:
    return deg * math.pi / 180.0


@dataclass(frozen=True)
class CameraState:
    """Perspective camera placed at ``(0, 0, z)`` looking towards the origin."""

    z: float = _CAMERA["zLarge"]
    fov: float = _CAMERA["fov"]
    aspect: float = 1.0
    near: float = _CAMERA["near"]
    far: float = _CAMERA["far"]
    z_min: float = _CAMERA["zMin"]
    z_max: float = _CAMERA["zMax"]

    def zoomed(self, delta: float) -> "CameraState":
        """Return a copy moved ``delta`` units along z, clamped to the zoom range."""
        return replace(self, z=clamp(self.z + delta, self.z_min, self.z_max))

    def with_viewport(self, width: float, height: float) -> "CameraState":
        aspect = float(width) / float(height) if height > 0 else 1.0
        return replace(self, aspect=aspect)


def optimal_camera_z(viewport_width: float) -> float:
    """Camera distance that fits the wheel for the given viewport width."""

    if viewport_width <= _TOUCH["smallBreakpoint"]:
        return _CAMERA["zSmall"]
    if viewport_width <= _TOUCH["mobileBreakpoint"]:
        return _CAMERA["zMedium"]
    return _CAMERA["zLarge"]


def screen_to_normalized(
    pointer_x: float, pointer_y: float, viewport_width: float, viewport_height: float
) -> Tuple[float, float]:
    width = max(1.0, float(viewport_width))
    height = max(1.0, float(viewport_height))
    nx = (pointer_x / width) * 2.0 - 1.0
    ny = -(pointer_y / height) * 2.0 + 1.0
    return nx, ny


def normalized_to_screen(
    nx: float, ny: float, viewport_width: float, viewport_height: float
) -> Tuple[float, float]:
    sx = (nx + 1.0) * 0.5 * viewport_width
    sy = (1.0 - ny) * 0.5 * viewport_height
    return sx, sy


def _view_depth_for_ndc(ndc_z: float, camera: CameraState) -> float:
    # Inverse of the OpenGL-style perspective depth mapping; negative in front of the camera.
    near, far = camera.near, camera.far
    a = -(far + near) / (far - near)
    b = -2.0 * far * near / (far - near)
    return -b / (a + ndc_z)


def normalized_to_world_plane(
    nx: float,
    ny: float,
    camera: CameraState,
    *,
    projection_z: float = _CAMERA["projectionZ"],
) -> Optional[Tuple[float, float]]:
    """Intersect the pointer ray with the world plane ``z = 0``.

    The point ``(nx, ny, projection_z)`` is unprojected to view space, turned
    into a ray from the camera, and the ray is extended until it meets the
    plane. ``None`` is returned when the ray runs parallel to the plane so the
    caller can skip the frame instead of propagating NaN coordinates.
    """

    try:
        depth = _view_depth_for_ndc(projection_z, camera)
    except ZeroDivisionError:
        return None
    half_height = math.tan(to_rad(camera.fov) / 2.0)
    vx = nx * (-depth) * half_height * camera.aspect
    vy = ny * (-depth) * half_height
    vz = depth
    length = math.sqrt(vx * vx + vy * vy + vz * vz)
    if length < _EPSILON:
        return None
    dx, dy, dz = vx / length, vy / length, vz / length
    if abs(dz) < _EPSILON:
        return None
    distance = -camera.z / dz
    x = dx * distance
    y = dy * distance
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def radius_of(x: float, y: float) -> float:
    return math.sqrt(x * x + y * y)


def polar_to_xy(radius: float, angle: float) -> Tuple[float, float]:
    return math.cos(angle) * radius, math.sin(angle) * radius


def project_to_normalized(
    point: Tuple[float, float, float],
    camera: CameraState,
    *,
    rotation_x: float = 0.0,
    rotation_z: float = 0.0,
    offset_y: float = 0.0,
) -> Optional[Tuple[float, float, float]]:
    """Project a scene-local point to normalized device coordinates.

    The scene is rotated around z first and then around x (the same order a
    renderer applies an ``XYZ`` Euler rotation to a child), translated by
    ``offset_y``, and projected through the camera. Returns ``(nx, ny, depth)``
    with ``depth`` the distance in front of the camera, or ``None`` for points
    behind it.
    """

    x, y, z = point
    cos_z, sin_z = math.cos(rotation_z), math.sin(rotation_z)
    x, y = x * cos_z - y * sin_z, x * sin_z + y * cos_z
    cos_x, sin_x = math.cos(rotation_x), math.sin(rotation_x)
    y, z = y * cos_x - z * sin_x, y * sin_x + z * cos_x
    y += offset_y

    depth = camera.z - z
    if depth <= camera.near:
        return None
    half_height = math.tan(to_rad(camera.fov) / 2.0)
    nx = x / (depth * half_height * camera.aspect)
    ny = y / (depth * half_height)
    return nx, ny, depth
