"""Token creation, band mutation and render-facing helpers."""

import logging
import math

import pytest

from awop.bands import INNER, MIDDLE, OUTER
from awop.control.dataset import CATEGORIES, IDENTITY_DATA
from awop.geometry import radius_of
from awop.tokens import (
    UNKNOWN_CATEGORY,
    build_tokens,
    create_token,
    set_band,
    set_category_visible,
    status_text,
    target_position,
    tokens_in_category,
)


@pytest.fixture
def tokens():
    return build_tokens(IDENTITY_DATA, CATEGORIES)


class TestBuildTokens:
    def test_one_token_per_identity(self, tokens):
        assert len(tokens) == 20
        assert {token.name for token in tokens} == set(IDENTITY_DATA)

    def test_grouped_by_category_order(self, tokens):
        order = list(CATEGORIES)
        positions = [order.index(token.category) for token in tokens]
        assert positions == sorted(positions)

    def test_stable_inside_category(self, tokens):
        dataset_order = [name for name in IDENTITY_DATA if IDENTITY_DATA[name]["category"] == "Education and Career"]
        built = [token.name for token in tokens_in_category(tokens, "Education and Career")]
        assert built == dataset_order

    def test_equal_angular_spacing(self, tokens):
        for idx, token in enumerate(tokens):
            assert token.slot == idx
            assert token.angle == pytest.approx(2 * math.pi * idx / 20)

    def test_defaults(self, tokens):
        for token in tokens:
            assert token.band == INNER
            assert token.visible
            assert not token.focused
            assert token.score == 3
            assert radius_of(token.x, token.y) == pytest.approx(4.0)


class TestCreateToken:
    def test_unknown_category_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="awop.tokens"):
            token = create_token("Mystery", {"category": "Nope"}, 0, 1, CATEGORIES)
        assert token.category == UNKNOWN_CATEGORY
        assert token.color == "#999999"
        assert "Nope" in caplog.text

    def test_missing_record_fields_are_tolerated(self):
        token = create_token("Bare", {"category": "Caregiving"}, 3, 4, CATEGORIES)
        assert token.spectrum == {}
        assert token.description == ""
        assert token.law == {}
        assert status_text(token) == ""


class TestMutations:
    def test_set_band_reports_change(self, tokens):
        token = tokens[0]
        assert set_band(token, OUTER) is True
        assert token.score == 1
        assert set_band(token, OUTER) is False

    def test_set_band_rejects_unknown(self, tokens):
        with pytest.raises(ValueError):
            set_band(tokens[0], "centre")
        assert tokens[0].band == INNER

    def test_set_category_visible(self, tokens):
        token = tokens[0]
        assert set_category_visible(token, False) is True
        assert set_category_visible(token, False) is False
        assert not token.visible

    def test_target_position_follows_band(self, tokens):
        token = tokens[5]
        set_band(token, MIDDLE)
        x, y = target_position(token)
        assert radius_of(x, y) == pytest.approx(5.5)
        assert math.atan2(y, x) % (2 * math.pi) == pytest.approx(token.angle % (2 * math.pi))

    def test_status_text_tracks_band(self, tokens):
        token = tokens[0]
        assert status_text(token) == token.spectrum["inner"]
        set_band(token, OUTER)
        assert status_text(token) == token.spectrum["outer"]
        assert status_text(token, MIDDLE) == token.spectrum["middle"]
