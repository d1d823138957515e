"""Session mutations, persistence round trips and signal fan-out."""

import json

import pytest

from awop.bands import INNER, MIDDLE, OUTER
from awop.persistence import SelectionStore, ShareLink
from awop.session import WheelSession

DEFAULT_HASH = "i" * 20 + "/" + "i" * 7


class SpyStore(SelectionStore):
    def __init__(self, path):
        super().__init__(path)
        self.writes = []

    def write(self, value):
        self.writes.append(dict(value))
        return super().write(value)


class FailingStore(SelectionStore):
    def write(self, value):
        return False


def _record(signal):
    received = []
    signal.connect(lambda *args: received.append(args))
    return received


class TestLoading:
    def test_defaults_when_nothing_is_persisted(self, session):
        assert session.load() == "default"
        assert session.hash == DEFAULT_HASH
        assert session.summary.total == 60
        assert session.summary.normalized == pytest.approx(1.0)
        assert session.link.fragment() == DEFAULT_HASH

    def test_tokens_are_grouped_by_category(self, session):
        assert len(session.tokens) == 20
        assert session.tokens[0].name == "Skin Color"
        assert session.tokens[0].category == "Living and Culture"
        assert session.category_names[0] == "Living and Culture"
        assert session.category_names[-1] == "Childhood and Development"

    def test_hash_takes_precedence_over_store(self, store):
        store.write({"Skin Color": MIDDLE})
        link = ShareLink("https://awop.local/#" + "o" + "i" * 19 + "/" + "o" + "i" * 6)
        session = WheelSession(store=store, link=link)
        assert session.load() == "hash"
        assert session.tokens[0].band == OUTER
        assert not session.is_category_visible("Living and Culture")
        assert all(not token.visible for token in session.tokens[:4])
        assert session.tokens[4].visible

    def test_hash_is_applied_atomically(self, store):
        store.write({"Gender": OUTER})
        link = ShareLink("https://awop.local/#" + "o" + "i" * 18 + "x/" + "i" * 7)
        session = WheelSession(store=store, link=link)
        assert session.load() == "store"
        assert session.tokens[0].band == INNER
        assert session.token_by_name("Gender").band == OUTER

    def test_store_with_unknown_names_and_bands(self, store):
        store.write({"Gender": "middle", "Nope": "outer", "Housing": "sideways"})
        session = WheelSession(store=store, link=ShareLink())
        assert session.load() == "store"
        assert session.token_by_name("Gender").band == MIDDLE
        assert session.token_by_name("Housing").band == INNER

    def test_corrupt_store_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        session = WheelSession(store=SelectionStore(path), link=ShareLink())
        assert session.load() == "default"
        assert session.summary.total == 60

    def test_loading_a_link_leaves_saved_selections_alone(self, store):
        store.write({"Gender": MIDDLE})
        session = WheelSession(store=store, link=ShareLink("https://awop.local/#" + "o" * 20 + "/" + "i" * 7))
        assert session.load() == "hash"
        assert session.summary.total == 20
        assert store.read() == {"Gender": MIDDLE}

    def test_startup_never_writes_the_store(self, tmp_path):
        store = SpyStore(tmp_path / "spy.json")
        session = WheelSession(store=store, link=ShareLink())
        session.load()
        assert store.writes == []
        assert not store.path.exists()
        assert session.link.fragment() == DEFAULT_HASH

    def test_positions_snap_to_target_bands(self, store):
        store.write({"Skin Color": OUTER})
        session = WheelSession(store=store, link=ShareLink())
        session.load()
        token = session.tokens[0]
        assert token.x == pytest.approx(7.0)
        assert token.y == pytest.approx(0.0)


class TestBands:
    def test_moving_a_token_updates_score_store_and_link(self, loaded_session, store):
        skin = loaded_session.tokens[0]
        assert loaded_session.move_token_to_band(skin, OUTER)
        assert loaded_session.summary.total == 58
        assert loaded_session.summary.normalized == pytest.approx(0.95)
        assert loaded_session.hash == "o" + "i" * 19 + "/" + "i" * 7
        assert loaded_session.link.fragment() == loaded_session.hash
        assert store.read()["Skin Color"] == OUTER
        saved = json.loads(store.path.read_text(encoding="utf-8"))
        assert "wheelOfPrivilege_selections" in saved

    def test_same_band_is_a_no_op(self, tmp_path):
        store = SpyStore(tmp_path / "spy.json")
        session = WheelSession(store=store, link=ShareLink())
        session.load()
        store.writes.clear()
        assert not session.move_token_to_band(session.tokens[3], INNER)
        assert store.writes == []

    def test_unknown_band_is_rejected(self, loaded_session):
        with pytest.raises(ValueError):
            loaded_session.move_token_to_band(loaded_session.tokens[0], "sideways")

    def test_panel_selection_targets_focused_token(self, loaded_session):
        assert not loaded_session.select_band_from_panel(MIDDLE)
        gender = loaded_session.token_by_name("Gender")
        loaded_session.set_focus(gender)
        assert loaded_session.select_band_from_panel(MIDDLE)
        assert gender.band == MIDDLE
        assert loaded_session.focused is gender

    def test_write_failure_keeps_session_running(self, tmp_path):
        session = WheelSession(store=FailingStore(tmp_path / "x.json"), link=ShareLink())
        session.load()
        session.move_token_to_band(session.tokens[1], OUTER)
        assert session.summary.total == 58
        assert session.link.fragment().startswith("io")


class TestFocus:
    def test_focus_is_exclusive(self, loaded_session):
        first, second = loaded_session.tokens[:2]
        loaded_session.set_focus(first)
        loaded_session.set_focus(second)
        assert loaded_session.focused is second
        assert [token for token in loaded_session.tokens if token.focused] == [second]

    def test_toggle_focus(self, loaded_session):
        token = loaded_session.tokens[5]
        loaded_session.toggle_focus(token)
        assert loaded_session.focused is token
        loaded_session.toggle_focus(token)
        assert loaded_session.focused is None
        assert not token.focused

    def test_navigate_wraps_both_ways(self, loaded_session):
        tokens = loaded_session.tokens
        assert loaded_session.navigate(1) is None
        loaded_session.set_focus(tokens[-1])
        assert loaded_session.navigate(1) is tokens[0]
        assert loaded_session.navigate(-1) is tokens[-1]

    def test_navigate_includes_hidden_tokens(self, loaded_session):
        tokens = loaded_session.tokens
        loaded_session.set_category_visible("Caregiving", False)
        loaded_session.set_focus(tokens[3])
        assert loaded_session.navigate(1) is tokens[4]
        assert not tokens[4].visible

    def test_dismiss_panels_clears_focus(self, loaded_session):
        dismissed = _record(loaded_session.panelsDismissed)
        loaded_session.set_focus(loaded_session.tokens[0])
        loaded_session.dismiss_panels()
        assert loaded_session.focused is None
        assert dismissed == [()]


class TestCategories:
    def test_hiding_focused_category_clears_focus(self, loaded_session):
        gender = loaded_session.token_by_name("Gender")
        loaded_session.set_focus(gender)
        assert loaded_session.set_category_visible("Gender and Sexuality", False)
        assert loaded_session.focused is None
        assert not gender.visible
        assert loaded_session.hash.endswith("/iiioiii")

    def test_hiding_other_category_keeps_focus(self, loaded_session):
        gender = loaded_session.token_by_name("Gender")
        loaded_session.set_focus(gender)
        loaded_session.set_category_visible("Caregiving", False)
        assert loaded_session.focused is gender

    def test_hidden_tokens_still_score(self, loaded_session):
        loaded_session.set_category_visible("Living and Culture", False)
        assert loaded_session.summary.total == 60

    def test_unknown_category_is_ignored(self, loaded_session):
        assert not loaded_session.set_category_visible("Astrology", False)
        assert loaded_session.hash == DEFAULT_HASH

    def test_toggle_category(self, loaded_session):
        assert loaded_session.toggle_category("Socioeconomic")
        assert not loaded_session.is_category_visible("Socioeconomic")
        assert loaded_session.toggle_category("Socioeconomic")
        assert loaded_session.is_category_visible("Socioeconomic")


class TestReset:
    def test_reset_restores_defaults_with_a_single_write(self, tmp_path):
        store = SpyStore(tmp_path / "spy.json")
        session = WheelSession(store=store, link=ShareLink())
        session.load()
        for token in session.tokens[:5]:
            session.move_token_to_band(token, OUTER)
        session.set_category_visible("Caregiving", False)
        session.set_focus(session.tokens[0])
        store.writes.clear()
        resets = _record(session.stateReset)

        session.reset()

        assert len(store.writes) == 1
        assert set(store.writes[0].values()) == {INNER}
        assert session.hash == DEFAULT_HASH
        assert session.focused is None
        assert session.summary.total == 60
        assert resets == [()]


class TestSignals:
    def test_band_change_emits_band_and_score(self, loaded_session):
        bands = _record(loaded_session.bandChanged)
        scores = _record(loaded_session.scoreChanged)
        token = loaded_session.tokens[2]
        loaded_session.move_token_to_band(token, MIDDLE)
        assert bands == [(token, MIDDLE)]
        assert scores[-1][0].total == 59

    def test_focus_change_emits_once(self, loaded_session):
        focus = _record(loaded_session.focusChanged)
        token = loaded_session.tokens[0]
        loaded_session.set_focus(token)
        loaded_session.set_focus(token)
        loaded_session.clear_focus()
        assert focus == [(token,), (None,)]

    def test_visibility_change_emits(self, loaded_session):
        changes = _record(loaded_session.visibilityChanged)
        loaded_session.set_category_visible("Caregiving", False)
        loaded_session.set_category_visible("Caregiving", False)
        assert changes == [("Caregiving", False)]

    def test_link_change_emits_full_url(self, loaded_session):
        links = _record(loaded_session.linkChanged)
        loaded_session.move_token_to_band(loaded_session.tokens[0], OUTER)
        assert links[-1][0].endswith("#o" + "i" * 19 + "/" + "i" * 7)
