"""Score aggregation and the three-stop colour ramp."""

import pytest

from awop.bands import INNER, MIDDLE, OUTER
from awop.control.dataset import CATEGORIES, IDENTITY_DATA
from awop.scoring import (
    color_for,
    compute_score,
    hex_to_rgb,
    normalize,
    reference_colors,
    rgb_to_hex,
    ring_colors,
    score_bounds,
    summarize,
)
from awop.tokens import build_tokens, set_band, set_category_visible


@pytest.fixture
def tokens():
    return build_tokens(IDENTITY_DATA, CATEGORIES)


class TestScore:
    def test_bounds_for_twenty_tokens(self):
        assert score_bounds(20) == (20, 60)

    def test_all_inner(self, tokens):
        summary = summarize(tokens)
        assert summary.total == 60
        assert summary.normalized == pytest.approx(1.0)
        assert summary.color == "#22c55e"

    def test_all_outer(self, tokens):
        for token in tokens:
            set_band(token, OUTER)
        summary = summarize(tokens)
        assert summary.total == 20
        assert summary.normalized == pytest.approx(0.0)
        assert summary.color == "#ef4444"

    def test_mixed_assignment_stays_in_bounds(self, tokens):
        for idx, token in enumerate(tokens):
            set_band(token, (INNER, MIDDLE, OUTER)[idx % 3])
        total = compute_score(tokens)
        assert 20 <= total <= 60

    def test_visibility_does_not_affect_score(self, tokens):
        before = compute_score(tokens)
        for token in tokens:
            set_category_visible(token, False)
        assert compute_score(tokens) == before

    def test_single_outer_move(self, tokens):
        set_band(tokens[0], OUTER)
        summary = summarize(tokens)
        assert summary.total == 58
        assert summary.normalized == pytest.approx(0.95)
        assert summary.percentage == pytest.approx(95.0)

    def test_normalize_zero_tokens(self):
        assert normalize(0, 0) == 0.0


class TestColorRamp:
    def test_reference_stops(self):
        assert color_for(0.0) == "#ef4444"
        assert color_for(0.5) == "#eab308"
        assert color_for(1.0) == "#22c55e"

    def test_upper_segment_rounding(self):
        # mid (234,179,8) to high (34,197,94) at t = 0.9
        assert color_for(0.95) == "#36c355"

    def test_lower_segment(self):
        # low (239,68,68) to mid (234,179,8) at t = 0.5
        assert color_for(0.25) == rgb_to_hex(236.5, 123.5, 38.0)

    def test_explicit_stops(self):
        assert color_for(0.5, (0, 0, 0), (100, 100, 100), (200, 200, 200)) == "#646464"

    def test_ring_colors(self):
        assert ring_colors() == {"inner": "#22c55e", "middle": "#eab308", "outer": "#ef4444"}


class TestHexHelpers:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#ef4444") == (239, 68, 68)
        assert hex_to_rgb("abc") == (170, 187, 204)
        assert hex_to_rgb("#zzzzzz") is None
        assert hex_to_rgb("") is None

    def test_rgb_to_hex_rounds_half_up_and_clamps(self):
        assert rgb_to_hex(0.5, 1.49, 254.5) == "#0101ff"
        assert rgb_to_hex(-3, 300, 16) == "#00ff10"

    def test_reference_colors_fall_back_per_entry(self):
        low, mid, high = reference_colors({"colorMin": "garbage", "colorMid": "#000000", "colorMax": "#ffffff"})
        assert low == (239, 68, 68)
        assert mid == (0, 0, 0)
        assert high == (255, 255, 255)
