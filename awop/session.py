"""Explicit session state for one wheel: tokens, focus, visibility and persistence.

Every mutation helper applies its in-memory change and reports whether
anything changed; a single :meth:`WheelSession._commit` then recomputes the
score and rewrites both persisted representations before the Qt signals fan
the new state out to the panel and the renderer.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from PyQt5 import QtCore

from .bands import INNER
from .control.dataset import CATEGORIES, IDENTITY_DATA
from .persistence import SelectionStore, ShareLink, decode_hash, decode_store, encode_hash, encode_store
from .scoring import ScoreSummary, summarize
from .tokens import Token, build_tokens, set_band, set_category_visible, target_position

logger = logging.getLogger(__name__)

__all__ = ["WheelSession"]


class WheelSession(QtCore.QObject):
    scoreChanged = QtCore.pyqtSignal(object)
    bandChanged = QtCore.pyqtSignal(object, str)
    focusChanged = QtCore.pyqtSignal(object)
    visibilityChanged = QtCore.pyqtSignal(str, bool)
    panelsDismissed = QtCore.pyqtSignal()
    stateReset = QtCore.pyqtSignal()
    linkChanged = QtCore.pyqtSignal(str)

    def __init__(
        self,
        identity_data: Optional[Mapping[str, Mapping[str, object]]] = None,
        categories: Optional[Mapping[str, Mapping[str, object]]] = None,
        *,
        store: Optional[SelectionStore] = None,
        link: Optional[ShareLink] = None,
        parent: Optional[QtCore.QObject] = None,
    ):
        super().__init__(parent)
        self.categories: Mapping[str, Mapping[str, object]] = CATEGORIES if categories is None else categories
        identities = IDENTITY_DATA if identity_data is None else identity_data
        self.tokens: List[Token] = build_tokens(identities, self.categories)
        self.category_names: List[str] = list(self.categories)
        self._visibility: Dict[str, bool] = {name: True for name in self.category_names}
        self._focused: Optional[Token] = None
        self.store = store if store is not None else SelectionStore()
        self.link = link if link is not None else ShareLink()
        self.link.subscribe(self.linkChanged.emit)
        self._summary: ScoreSummary = summarize(self.tokens)

    # ----- read access
    @property
    def summary(self) -> ScoreSummary:
        return self._summary

    @property
    def focused(self) -> Optional[Token]:
        return self._focused

    @property
    def hash(self) -> str:
        return encode_hash(
            [token.band for token in self.tokens],
            [self._visibility[name] for name in self.category_names],
        )

    @property
    def visibility(self) -> Dict[str, bool]:
        return dict(self._visibility)

    def is_category_visible(self, category: str) -> bool:
        return self._visibility.get(category, True)

    def token_by_name(self, name: str) -> Optional[Token]:
        for token in self.tokens:
            if token.name == name:
                return token
        return None

    def index_of(self, token: Token) -> int:
        return self.tokens.index(token)

    # ----- loading
    def load(self) -> str:
        """Apply persisted state (link fragment first, then store) and sync the link.

        The store is only read here; it is written by later mutations.

        Returns the source that was used: ``"hash"``, ``"store"`` or ``"default"``.
        """

        snapshot = decode_hash(self.link.fragment(), len(self.tokens), len(self.category_names))
        if snapshot is not None:
            for token, band in zip(self.tokens, snapshot.bands):
                set_band(token, band)
            for name, visible in zip(self.category_names, snapshot.visibility):
                self._apply_visibility(name, visible)
            source = "hash"
        else:
            if self.link.fragment():
                logger.info("Ignoring malformed link fragment %r", self.link.fragment())
            stored = decode_store(self.store.read(), [token.name for token in self.tokens])
            for token in self.tokens:
                if token.name in stored:
                    set_band(token, stored[token.name])
            source = "store" if stored else "default"

        for token in self.tokens:
            token.x, token.y = target_position(token)
        self._summary = summarize(self.tokens)
        self.link.replace_fragment(self.hash)
        self.scoreChanged.emit(self._summary)
        logger.debug("Session loaded from %s: %s", source, self.hash)
        return source

    # ----- bands
    def move_token_to_band(self, token: Token, band: str) -> bool:
        """Persisting band setter used by drags and the panel."""

        if not set_band(token, band):
            return False
        self.bandChanged.emit(token, band)
        self._commit()
        return True

    def select_band_from_panel(self, band: str) -> bool:
        if self._focused is None:
            return False
        return self.move_token_to_band(self._focused, band)

    # ----- focus
    def set_focus(self, token: Optional[Token]) -> bool:
        if token is self._focused:
            return False
        if self._focused is not None:
            self._focused.focused = False
        self._focused = token
        if token is not None:
            token.focused = True
        self.focusChanged.emit(token)
        return True

    def toggle_focus(self, token: Token) -> None:
        self.set_focus(None if token is self._focused else token)

    def clear_focus(self) -> bool:
        return self.set_focus(None)

    def dismiss_panels(self) -> None:
        self.clear_focus()
        self.panelsDismissed.emit()

    def navigate(self, direction: int) -> Optional[Token]:
        """Focus the previous/next token in creation order, wrapping around."""

        if self._focused is None or not self.tokens:
            return None
        index = (self.index_of(self._focused) + direction) % len(self.tokens)
        target = self.tokens[index]
        self.set_focus(target)
        return target

    # ----- categories
    def set_category_visible(self, category: str, visible: bool) -> bool:
        if category not in self._visibility:
            logger.warning("Unknown category %r", category)
            return False
        if not self._apply_visibility(category, visible):
            return False
        if not visible and self._focused is not None and self._focused.category == category:
            self.clear_focus()
        self.visibilityChanged.emit(category, bool(visible))
        self._commit()
        return True

    def toggle_category(self, category: str) -> bool:
        return self.set_category_visible(category, not self.is_category_visible(category))

    def reset(self) -> None:
        """All tokens back to the inner band, every category visible, no focus."""

        for token in self.tokens:
            set_band(token, INNER)
        for name in self.category_names:
            self._apply_visibility(name, True)
        self.clear_focus()
        self._commit()
        self.stateReset.emit()

    # ----- internals
    def _apply_visibility(self, category: str, visible: bool) -> bool:
        visible = bool(visible)
        changed = self._visibility.get(category) != visible
        self._visibility[category] = visible
        for token in self.tokens:
            if token.category == category and set_category_visible(token, visible):
                changed = True
        return changed

    def _commit(self) -> None:
        self._summary = summarize(self.tokens)
        self.store.write(encode_store([(token.name, token.band) for token in self.tokens]))
        self.link.replace_fragment(self.hash)
        self.scoreChanged.emit(self._summary)
