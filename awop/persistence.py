"""Selection persistence: the JSON selection store and the share-link fragment.

Both representations describe the same logical state (one band per token and
one visibility flag per category) and are rewritten together after every
mutation:

* the *store* is a JSON file mimicking a browser ``localStorage`` slot: a
  single key holding a ``{token name: band}`` mapping. Category visibility is
  not part of it.
* the *hash* is the compact fragment ``<T chars of i/m/o>/<C chars of i/o>``
  kept in the session's share link.

The hash wins on load. It is validated as a whole before anything is applied;
the store is applied best-effort, token by token.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from PyQt5 import QtCore

from .bands import BAND_TO_CHAR, CHAR_TO_BAND, is_band
from .control.config import DEFAULTS, storage_dir

logger = logging.getLogger(__name__)

HASH_SEPARATOR = "/"
VISIBLE_CHAR = "i"
HIDDEN_CHAR = "o"
_VISIBILITY_CHARS = {VISIBLE_CHAR: True, HIDDEN_CHAR: False}

__all__ = [
    "HASH_SEPARATOR",
    "HashSnapshot",
    "SelectionStore",
    "ShareLink",
    "decode_hash",
    "decode_store",
    "encode_hash",
    "encode_store",
]


@dataclass(frozen=True)
class HashSnapshot:
    bands: Tuple[str, ...]
    visibility: Tuple[bool, ...]


def encode_hash(bands: Sequence[str], visibility: Sequence[bool]) -> str:
    token_part = "".join(BAND_TO_CHAR[band] for band in bands)
    category_part = "".join(VISIBLE_CHAR if flag else HIDDEN_CHAR for flag in visibility)
    return f"{token_part}{HASH_SEPARATOR}{category_part}"


def _is_valid_segment(segment: str, alphabet: Mapping[str, object], expected_length: int) -> bool:
    return len(segment) == expected_length and all(char in alphabet for char in segment)


def decode_hash(text: Optional[str], token_count: int, category_count: int) -> Optional[HashSnapshot]:
    """Parse a fragment, or return ``None`` if any part of it is malformed.

    A leading ``#`` is tolerated. Nothing is partially decoded: one bad
    character anywhere rejects the whole fragment.
    """

    if not text:
        return None
    raw = text[1:] if text.startswith("#") else text
    parts = raw.split(HASH_SEPARATOR)
    if len(parts) != 2:
        return None
    token_part, category_part = parts
    if not token_part or not category_part:
        return None
    if not _is_valid_segment(token_part, CHAR_TO_BAND, token_count):
        return None
    if not _is_valid_segment(category_part, _VISIBILITY_CHARS, category_count):
        return None
    return HashSnapshot(
        bands=tuple(CHAR_TO_BAND[char] for char in token_part),
        visibility=tuple(_VISIBILITY_CHARS[char] for char in category_part),
    )


def encode_store(assignments: Sequence[Tuple[str, str]]) -> Dict[str, str]:
    return {str(name): band for name, band in assignments}


def decode_store(payload: object, known_names: Sequence[str]) -> Dict[str, str]:
    """Keep only entries naming a known token with a valid band."""

    if not isinstance(payload, Mapping):
        return {}
    known = set(known_names)
    decoded: Dict[str, str] = {}
    for name, band in payload.items():
        if name in known and is_band(band):
            decoded[name] = band
    return decoded


class SelectionStore:
    """Persist the band selections in a small JSON key/value file.

    The file holds a mapping of storage keys to JSON-encoded strings, the same
    shape a browser keeps in ``localStorage``. Read failures behave as if the
    key were absent; write failures are logged and reported through the return
    value so the session keeps running on its in-memory state.
    """

    def __init__(self, path: Optional[Path] = None, key: Optional[str] = None):
        storage = DEFAULTS["storage"]
        self.path = Path(path) if path is not None else storage_dir() / storage["fileName"]
        self.key = key or storage["key"]

    # ------------------------------------------------------------------ utils
    def _read_slots(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read selection store %s: %s", self.path, exc)
            return {}
        return raw if isinstance(raw, dict) else {}

    # ------------------------------------------------------------------ API
    def read(self) -> Optional[object]:
        """Return the decoded value for :attr:`key`, or ``None`` when absent or corrupt."""

        slot = self._read_slots().get(self.key)
        if slot is None:
            return None
        try:
            return json.loads(slot) if isinstance(slot, str) else slot
        except ValueError as exc:
            logger.warning("Ignoring corrupt selection entry %r: %s", self.key, exc)
            return None

    def write(self, value: Mapping[str, str]) -> bool:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            slots = self._read_slots()
            slots[self.key] = json.dumps(dict(value))
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(slots, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save selections to %s: %s", self.path, exc)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", tmp)
            return False
        return True


class ShareLink:
    """Shareable URL whose fragment mirrors the session state.

    :meth:`replace_fragment` rewrites the fragment in place, like
    ``history.replaceState``: the URL changes but no history entry is created
    and listeners are notified with the full URL string.
    """

    DEFAULT_BASE = "https://awop.local/"

    def __init__(self, url: Optional[str] = None):
        self._url = QtCore.QUrl(url or self.DEFAULT_BASE)
        self._listeners: List[Callable[[str], None]] = []

    @property
    def url(self) -> QtCore.QUrl:
        return QtCore.QUrl(self._url)

    def fragment(self) -> str:
        return self._url.fragment(QtCore.QUrl.FullyDecoded)

    def to_string(self) -> str:
        return self._url.toString()

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def replace_fragment(self, fragment: str) -> None:
        if fragment == self.fragment() and self._url.hasFragment():
            return
        self._url.setFragment(fragment)
        text = self._url.toString()
        for listener in list(self._listeners):
            listener(text)
