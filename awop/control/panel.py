"""Panel and category-filter orchestration.

The orchestrator turns the session state (focused token, category visibility,
score) into a plain :class:`PanelState` and pushes it to a sink, normally the
Qt :class:`~awop.control.panel_widget.PanelWidget`. It owns the only state the
session does not: whether the help panel is open and how wide the viewport is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from ..bands import BANDS, RING_POINTS
from ..scoring import ScoreSummary
from ..tokens import Token, category_color
from .config import DEFAULTS, HELP_TEXT
from .dataset import LAW_ICONS

_TOUCH = DEFAULTS["touch"]

MODE_DETAIL = "detail"
MODE_HELP = "help"
MODE_NONE = "none"

__all__ = [
    "CategoryButton",
    "LawBlock",
    "MODE_DETAIL",
    "MODE_HELP",
    "MODE_NONE",
    "PanelOrchestrator",
    "PanelState",
    "SpectrumItem",
]


@dataclass(frozen=True)
class SpectrumItem:
    band: str
    points: int
    text: str
    selected: bool

    @property
    def points_label(self) -> str:
        return f"{self.points} point" if self.points == 1 else f"{self.points} points"


@dataclass(frozen=True)
class LawBlock:
    status: str
    icon: str
    title: str
    text: str


@dataclass(frozen=True)
class CategoryButton:
    name: str
    active: bool
    color: str
    description: str
    tooltip: str


@dataclass(frozen=True)
class PanelState:
    mode: str
    title: str = ""
    category: str = ""
    category_color: str = ""
    description: str = ""
    law: Optional[LawBlock] = None
    spectrum: Tuple[SpectrumItem, ...] = ()
    nav_counter: str = ""
    nav_enabled: bool = False
    categories: Tuple[CategoryButton, ...] = ()
    score: Optional[ScoreSummary] = None
    help_text: str = HELP_TEXT
    scene_offset_y: float = 0.0


def law_block(token: Token) -> LawBlock:
    law = token.law
    status = str(law.get("status", ""))
    return LawBlock(
        status=status,
        icon=LAW_ICONS.get(status, ""),
        title=str(law.get("title", "")),
        text=str(law.get("text", "")),
    )


def spectrum_items(token: Token) -> Tuple[SpectrumItem, ...]:
    """Band descriptions ordered from the outer (1 point) to the inner ring."""

    spectrum = token.spectrum
    return tuple(
        SpectrumItem(band=band, points=RING_POINTS[band], text=str(spectrum.get(band, "")), selected=token.band == band)
        for band in reversed(BANDS)
    )


def category_tooltip(name: str, tokens: Sequence[Token]) -> str:
    members = [token.name for token in tokens if token.category == name]
    return "Includes: " + ", ".join(members)


class PanelOrchestrator:
    """Compute what the side panel shows and push it to ``sink``.

    Hooks are called by the session signals (see :meth:`attach`) or directly in
    tests; every hook ends with :meth:`refresh`.
    """

    def __init__(self, session, sink: Optional[Callable[[PanelState], None]] = None, *, viewport_width: float = 1024.0):
        self.session = session
        self.sink = sink
        self.viewport_width = float(viewport_width)
        self.help_visible = not self.is_mobile
        self.state: PanelState = self.compute()

    @property
    def is_mobile(self) -> bool:
        return self.viewport_width <= _TOUCH["mobileBreakpoint"]

    def attach(self) -> None:
        self.session.focusChanged.connect(self.on_focus_changed)
        self.session.visibilityChanged.connect(self.on_visibility_changed)
        self.session.stateReset.connect(self.on_reset)
        self.session.scoreChanged.connect(lambda summary: self.refresh())
        self.session.panelsDismissed.connect(self.dismiss_help)

    # ----- hooks
    def on_focus_changed(self, token: Optional[Token]) -> None:
        if token is not None:
            self.help_visible = False
        elif not self.is_mobile:
            self.help_visible = True
        self.refresh()

    def on_visibility_changed(self, category: str, visible: bool) -> None:
        self.refresh()

    def on_reset(self) -> None:
        self.refresh()

    def toggle_help(self) -> None:
        self.help_visible = not self.help_visible
        if self.help_visible and self.session.focused is not None:
            self.session.clear_focus()
            self.help_visible = True
        self.refresh()

    def dismiss_help(self) -> None:
        if not self.help_visible:
            return
        self.help_visible = False
        self.refresh()

    def set_viewport_width(self, width: float) -> None:
        was_mobile = self.is_mobile
        self.viewport_width = float(width)
        if was_mobile != self.is_mobile and self.session.focused is None:
            self.help_visible = not self.is_mobile
        self.refresh()

    # ----- state
    def category_buttons(self) -> Tuple[CategoryButton, ...]:
        buttons: List[CategoryButton] = []
        categories: Mapping[str, Mapping[str, object]] = self.session.categories
        for name in self.session.category_names:
            info = categories.get(name) or {}
            buttons.append(
                CategoryButton(
                    name=name,
                    active=self.session.is_category_visible(name),
                    color=category_color(name, categories),
                    description=str(info.get("description", "")),
                    tooltip=category_tooltip(name, self.session.tokens),
                )
            )
        return tuple(buttons)

    def compute(self) -> PanelState:
        tokens = self.session.tokens
        focused = self.session.focused
        common = dict(
            categories=self.category_buttons(),
            score=self.session.summary,
            nav_enabled=bool(tokens),
        )
        if focused is not None:
            return PanelState(
                mode=MODE_DETAIL,
                title=focused.name,
                category=focused.category,
                category_color=focused.color,
                description=focused.description,
                law=law_block(focused),
                spectrum=spectrum_items(focused),
                nav_counter=f"{self.session.index_of(focused) + 1} / {len(tokens)}",
                scene_offset_y=_TOUCH["mobilePanelOffsetY"] if self.is_mobile else 0.0,
                **common,
            )
        mode = MODE_HELP if self.help_visible else MODE_NONE
        return PanelState(mode=mode, **common)

    def render(self, state: PanelState) -> None:
        if self.sink is not None:
            self.sink(state)

    def refresh(self) -> PanelState:
        self.state = self.compute()
        self.render(self.state)
        return self.state
