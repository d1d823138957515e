"""Hash codec, JSON selection store and the share link."""

import json

import pytest

from awop.bands import INNER, MIDDLE, OUTER
from awop.persistence import (
    HashSnapshot,
    SelectionStore,
    ShareLink,
    decode_hash,
    decode_store,
    encode_hash,
    encode_store,
)

ALL_INNER = "iiiiiiiiiiiiiiiiiiii/iiiiiii"


class TestHashCodec:
    def test_encode_default_state(self):
        assert encode_hash([INNER] * 20, [True] * 7) == ALL_INNER

    def test_encode_mixed_state(self):
        bands = [OUTER, MIDDLE, INNER]
        assert encode_hash(bands, [True, False]) == "omi/io"

    def test_decode(self):
        snapshot = decode_hash("omi/io", 3, 2)
        assert snapshot == HashSnapshot(bands=(OUTER, MIDDLE, INNER), visibility=(True, False))

    def test_leading_hash_mark_is_tolerated(self):
        assert decode_hash("#" + ALL_INNER, 20, 7) is not None

    def test_round_trip_of_well_formed_hash(self):
        text = "immioommiiimmiioomim/iiooiio"
        snapshot = decode_hash(text, 20, 7)
        assert encode_hash(snapshot.bands, snapshot.visibility) == text

    @pytest.mark.parametrize(
        "text",
        [
            "",
            None,
            "iiiiiiiiiiiiiiiiiiii",
            "iiiiiiiiiiiiiiiiiiii/iiiiiii/",
            "iiiiiiiiiiiiiiiiiiii//iiiiiii",
            "/iiiiiii",
            "iiiiiiiiiiiiiiiiiiii/",
            "iiiiiiiiiiiiiiiiiii/iiiiiii",
            "iiiiiiiiiiiiiiiiiiiii/iiiiiii",
            "iiiiiiiiiiiiiiiiiiii/iiiiii",
            "iiiiiiiiixiiiiiiiiii/iiiiiii",
            "iiiiiiiiiiiiiiiiiiii/iiimiii",
            "IIIIIIIIIIIIIIIIIIII/IIIIIII",
        ],
    )
    def test_malformed_hash_is_rejected_whole(self, text):
        assert decode_hash(text, 20, 7) is None


class TestStoreCodec:
    def test_encode(self):
        assert encode_store([("Gender", OUTER), ("Housing", INNER)]) == {"Gender": "outer", "Housing": "inner"}

    def test_decode_is_best_effort(self):
        payload = {"Gender": "outer", "Housing": "sideways", "Unknown": "middle", "Language": 3}
        assert decode_store(payload, ["Gender", "Housing", "Language"]) == {"Gender": "outer"}

    def test_decode_non_mapping(self):
        assert decode_store(["Gender", "outer"], ["Gender"]) == {}
        assert decode_store(None, ["Gender"]) == {}


class TestSelectionStore:
    def test_missing_file_reads_none(self, tmp_path):
        assert SelectionStore(tmp_path / "absent.json").read() is None

    def test_write_then_read(self, tmp_path):
        store = SelectionStore(tmp_path / "nested" / "storage.json")
        assert store.write({"Gender": "middle"}) is True
        assert store.read() == {"Gender": "middle"}

    def test_file_keeps_a_json_string_per_key(self, tmp_path):
        path = tmp_path / "storage.json"
        SelectionStore(path).write({"Gender": "middle"})
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert json.loads(raw["wheelOfPrivilege_selections"]) == {"Gender": "middle"}

    def test_other_keys_are_preserved(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"theme": "\"dark\""}), encoding="utf-8")
        SelectionStore(path).write({"Gender": "outer"})
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["theme"] == "\"dark\""

    def test_corrupt_file_reads_none(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")
        assert SelectionStore(path).read() is None

    def test_corrupt_entry_reads_none(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"wheelOfPrivilege_selections": "{oops"}), encoding="utf-8")
        assert SelectionStore(path).read() is None

    def test_write_failure_is_reported(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = SelectionStore(blocker / "storage.json")
        assert store.write({"Gender": "outer"}) is False
        assert "Could not save" in caplog.text

    def test_failed_replace_removes_temp_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.mkdir()
        store = SelectionStore(path)
        assert store.write({"Gender": "outer"}) is False
        assert not (tmp_path / "storage.json.tmp").exists()
        assert path.is_dir()

    def test_default_location_honours_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AWOP_STORAGE_DIR", str(tmp_path / "custom"))
        assert SelectionStore().path == tmp_path / "custom" / "storage.json"


class TestShareLink:
    def test_replace_fragment_notifies_with_full_url(self):
        link = ShareLink("https://example.org/wheel")
        seen = []
        link.subscribe(seen.append)
        link.replace_fragment(ALL_INNER)
        assert link.fragment() == ALL_INNER
        assert seen == ["https://example.org/wheel#" + ALL_INNER]

    def test_unchanged_fragment_is_not_renotified(self):
        link = ShareLink()
        seen = []
        link.subscribe(seen.append)
        link.replace_fragment(ALL_INNER)
        link.replace_fragment(ALL_INNER)
        assert len(seen) == 1

    def test_fragment_parsed_from_url(self):
        link = ShareLink("https://example.org/#" + ALL_INNER)
        assert link.fragment() == ALL_INNER
