"""Screen/world conversions and the camera value object."""

import math

import pytest

from awop.geometry import (
    CameraState,
    clamp,
    normalized_to_screen,
    normalized_to_world_plane,
    optimal_camera_z,
    polar_to_xy,
    project_to_normalized,
    radius_of,
    screen_to_normalized,
)


class TestScreenConversions:
    def test_corners_and_center(self):
        assert screen_to_normalized(0, 0, 800, 600) == (-1.0, 1.0)
        assert screen_to_normalized(800, 600, 800, 600) == (1.0, -1.0)
        assert screen_to_normalized(400, 300, 800, 600) == (0.0, 0.0)

    def test_normalized_to_screen_inverts(self):
        nx, ny = screen_to_normalized(123, 456, 800, 600)
        sx, sy = normalized_to_screen(nx, ny, 800, 600)
        assert sx == pytest.approx(123)
        assert sy == pytest.approx(456)


class TestWorldPlane:
    """Pointer rays intersected with the z = 0 plane."""

    def test_center_maps_to_origin(self):
        camera = CameraState(z=18.0, aspect=4 / 3)
        x, y = normalized_to_world_plane(0.0, 0.0, camera)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(0.0, abs=1e-9)

    def test_offset_scales_with_distance_and_fov(self):
        camera = CameraState(z=18.0, aspect=4 / 3)
        x, y = normalized_to_world_plane(0.5, -0.25, camera)
        half = math.tan(math.radians(30.0))
        assert x == pytest.approx(0.5 * half * (4 / 3) * 18.0)
        assert y == pytest.approx(-0.25 * half * 18.0)

    def test_degenerate_depth_returns_none(self):
        camera = CameraState(z=18.0)
        a = -(camera.far + camera.near) / (camera.far - camera.near)
        assert normalized_to_world_plane(0.2, 0.2, camera, projection_z=-a) is None

    def test_projection_round_trip_without_rotation(self):
        camera = CameraState(z=24.0, aspect=1.5)
        nx, ny, depth = project_to_normalized((3.0, -2.0, 0.0), camera)
        assert depth == pytest.approx(24.0)
        x, y = normalized_to_world_plane(nx, ny, camera)
        assert x == pytest.approx(3.0)
        assert y == pytest.approx(-2.0)

    def test_point_behind_camera_is_not_projected(self):
        camera = CameraState(z=10.0)
        assert project_to_normalized((0.0, 0.0, 20.0), camera) is None

    def test_vertical_offset_moves_point_up(self):
        camera = CameraState(z=18.0)
        _, ny_plain, _ = project_to_normalized((0.0, 0.0, 0.0), camera)
        _, ny_offset, _ = project_to_normalized((0.0, 0.0, 0.0), camera, offset_y=5.0)
        assert ny_offset > ny_plain


class TestCamera:
    @pytest.mark.parametrize(
        "width, expected",
        [(320, 28.0), (480, 28.0), (481, 24.0), (768, 24.0), (769, 18.0), (1920, 18.0)],
    )
    def test_optimal_camera_z(self, width, expected):
        assert optimal_camera_z(width) == expected

    def test_zoom_is_clamped(self):
        camera = CameraState(z=18.0)
        assert camera.zoomed(1.0).z == pytest.approx(19.0)
        assert camera.zoomed(100.0).z == 30.0
        assert camera.zoomed(-100.0).z == 8.0

    def test_with_viewport_sets_aspect(self):
        assert CameraState().with_viewport(1600, 800).aspect == pytest.approx(2.0)


class TestPolarHelpers:
    def test_polar_round_trip(self):
        x, y = polar_to_xy(5.5, math.pi / 3)
        assert radius_of(x, y) == pytest.approx(5.5)

    def test_clamp(self):
        assert clamp(10, 3, 8) == 8
        assert clamp(1, 3, 8) == 3
        assert clamp(5, 3, 8) == 5
