from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from ..gestures import GrabBarDrag, PanelAction, PanelMetrics, PanelSwipe
from .config import DEFAULTS, TOOLTIPS
from .panel import MODE_DETAIL, MODE_HELP, PanelState

_TOUCH = DEFAULTS["touch"]

__all__ = ["CategoryBar", "PanelWidget"]


def _clear_layout(layout: QtWidgets.QLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()


class CategoryBar(QtWidgets.QFrame):
    """Top bar: score, one filter button per category, reset and help toggles."""

    categoryToggled = QtCore.pyqtSignal(str)
    resetRequested = QtCore.pyqtSignal()
    helpToggled = QtCore.pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("CategoryBar")
        self.setFixedHeight(int(_TOUCH["categoryBarHeight"]))
        self._buttons = {}

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(6)

        self.btn_help = QtWidgets.QToolButton()
        self.btn_help.setObjectName("BurgerButton")
        self.btn_help.setText("☰")
        self.btn_help.setCheckable(True)
        self.btn_help.setCursor(QtCore.Qt.PointingHandCursor)
        self.btn_help.setToolTip(TOOLTIPS["help"])
        self.btn_help.clicked.connect(lambda _checked: self.helpToggled.emit())
        layout.addWidget(self.btn_help)

        self.score_label = QtWidgets.QLabel()
        self.score_label.setObjectName("ScoreLabel")
        self.score_label.setToolTip(TOOLTIPS["score"])
        layout.addWidget(self.score_label)

        self._filters = QtWidgets.QHBoxLayout()
        self._filters.setSpacing(4)
        layout.addLayout(self._filters, 1)

        self.btn_reset = QtWidgets.QPushButton("Reset All")
        self.btn_reset.setObjectName("ResetButton")
        self.btn_reset.setCursor(QtCore.Qt.PointingHandCursor)
        self.btn_reset.setToolTip(TOOLTIPS["reset"])
        self.btn_reset.clicked.connect(self.resetRequested)
        layout.addWidget(self.btn_reset)

        self.setStyleSheet("""
            QFrame#CategoryBar {
                background: rgba(15, 20, 32, 230);
                border-bottom: 1px solid #2c3548;
            }
            QLabel#ScoreLabel {
                font-weight: 700;
                padding: 0 10px;
            }
            QPushButton[category="true"] {
                color: #101010;
                border-radius: 12px;
                padding: 4px 10px;
                font-weight: 600;
            }
            QPushButton[category="true"][active="false"] {
                color: #606060;
            }
            QPushButton#ResetButton, QToolButton#BurgerButton {
                border-radius: 12px;
                border: 1px solid #7aa7c7;
                background: #e6f2fb;
                color: #0f0f0f;
                padding: 4px 10px;
            }
        """)

    def render(self, state: PanelState) -> None:
        if state.score is not None:
            self.score_label.setText(f"Score: {state.score.total} ({state.score.percentage:.0f}%)")
            self.score_label.setStyleSheet(f"color: {state.score.color};")
        self.btn_help.blockSignals(True)
        self.btn_help.setChecked(state.mode == MODE_HELP)
        self.btn_help.blockSignals(False)

        names = [button.name for button in state.categories]
        if names != list(self._buttons):
            _clear_layout(self._filters)
            self._buttons = {}
            for name in names:
                btn = QtWidgets.QPushButton(name)
                btn.setProperty("category", True)
                btn.setCursor(QtCore.Qt.PointingHandCursor)
                btn.clicked.connect(lambda _checked=False, n=name: self.categoryToggled.emit(n))
                self._filters.addWidget(btn)
                self._buttons[name] = btn

        for button in state.categories:
            btn = self._buttons[button.name]
            color = QtGui.QColor(button.color)
            if not button.active:
                color.setAlphaF(0.35)
            btn.setProperty("active", button.active)
            btn.setStyleSheet(f"background: {color.name(QtGui.QColor.HexArgb)};")
            btn.setToolTip(f"<b>{button.name}</b><br>{button.description}<br><i>{button.tooltip}</i>")
            btn.style().unpolish(btn)
            btn.style().polish(btn)


class PanelWidget(QtWidgets.QFrame):
    """Side/bottom sheet showing the focused identity or the help text.

    :meth:`render` is the sink of :class:`~awop.control.panel.PanelOrchestrator`.
    Touch swipes and grab-bar drags are classified by the gesture helpers and
    re-emitted as signals for the window to apply to the session.
    """

    bandSelected = QtCore.pyqtSignal(str)
    navigateRequested = QtCore.pyqtSignal(int)
    dismissRequested = QtCore.pyqtSignal()
    helpDismissed = QtCore.pyqtSignal()
    heightRequested = QtCore.pyqtSignal(float)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("PanelWidget")
        self.setAttribute(QtCore.Qt.WA_AcceptTouchEvents, True)
        self.state: Optional[PanelState] = None
        self._detail_swipe = PanelSwipe()
        self._help_swipe = PanelSwipe(help_panel=True)
        self._active_swipe = self._detail_swipe
        self._grab = GrabBarDrag()

        outer = QtWidgets.QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.setSpacing(0)

        self.grab_bar = QtWidgets.QFrame()
        self.grab_bar.setObjectName("GrabBar")
        self.grab_bar.setFixedHeight(18)
        outer.addWidget(self.grab_bar)

        self.stack = QtWidgets.QStackedWidget()
        outer.addWidget(self.stack, 1)

        # ----- detail page
        self.scroll = QtWidgets.QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setFrameShape(QtWidgets.QFrame.NoFrame)
        body = QtWidgets.QWidget()
        detail = QtWidgets.QVBoxLayout(body)
        detail.setContentsMargins(16, 8, 16, 16)
        detail.setSpacing(10)

        nav = QtWidgets.QHBoxLayout()
        self.btn_prev = QtWidgets.QToolButton()
        self.btn_prev.setText("‹")
        self.btn_prev.setToolTip(TOOLTIPS["prev"])
        self.btn_prev.clicked.connect(lambda: self.navigateRequested.emit(-1))
        self.nav_counter = QtWidgets.QLabel()
        self.nav_counter.setAlignment(QtCore.Qt.AlignCenter)
        self.btn_next = QtWidgets.QToolButton()
        self.btn_next.setText("›")
        self.btn_next.setToolTip(TOOLTIPS["next"])
        self.btn_next.clicked.connect(lambda: self.navigateRequested.emit(1))
        self.btn_close = QtWidgets.QToolButton()
        self.btn_close.setText("✕")
        self.btn_close.clicked.connect(self.dismissRequested)
        nav.addWidget(self.btn_prev)
        nav.addWidget(self.nav_counter, 1)
        nav.addWidget(self.btn_next)
        nav.addWidget(self.btn_close)
        detail.addLayout(nav)

        self.title = QtWidgets.QLabel()
        self.title.setObjectName("PanelTitle")
        self.title.setWordWrap(True)
        detail.addWidget(self.title)

        self.category = QtWidgets.QLabel()
        self.category.setObjectName("PanelCategory")
        detail.addWidget(self.category, 0, QtCore.Qt.AlignLeft)

        self.description = QtWidgets.QLabel()
        self.description.setWordWrap(True)
        detail.addWidget(self.description)

        self.law = QtWidgets.QFrame()
        self.law.setObjectName("UkLaw")
        law_layout = QtWidgets.QGridLayout(self.law)
        self.law_icon = QtWidgets.QLabel()
        self.law_icon.setObjectName("UkLawIcon")
        self.law_title = QtWidgets.QLabel()
        self.law_title.setObjectName("UkLawTitle")
        self.law_title.setWordWrap(True)
        self.law_text = QtWidgets.QLabel()
        self.law_text.setWordWrap(True)
        law_layout.addWidget(self.law_icon, 0, 0)
        law_layout.addWidget(self.law_title, 0, 1)
        law_layout.addWidget(self.law_text, 1, 0, 1, 2)
        detail.addWidget(self.law)

        self._spectrum = QtWidgets.QVBoxLayout()
        self._spectrum.setSpacing(6)
        detail.addLayout(self._spectrum)
        detail.addStretch(1)
        self.scroll.setWidget(body)
        self.stack.addWidget(self.scroll)

        # ----- help page
        self.help_scroll = QtWidgets.QScrollArea()
        self.help_scroll.setWidgetResizable(True)
        self.help_scroll.setFrameShape(QtWidgets.QFrame.NoFrame)
        self.help_label = QtWidgets.QLabel()
        self.help_label.setWordWrap(True)
        self.help_label.setAlignment(QtCore.Qt.AlignTop | QtCore.Qt.AlignLeft)
        self.help_label.setContentsMargins(16, 8, 16, 16)
        self.help_scroll.setWidget(self.help_label)
        self.stack.addWidget(self.help_scroll)

        self.setStyleSheet("""
            QFrame#PanelWidget {
                background: rgba(20, 26, 40, 240);
                border: 1px solid #2c3548;
                border-radius: 10px;
                color: #e8ecf4;
            }
            QFrame#GrabBar {
                margin: 6px 45%;
                border-radius: 3px;
                background: #5a6478;
            }
            QLabel#PanelTitle { font-size: 18px; font-weight: 700; }
            QLabel#PanelCategory {
                color: #101010;
                border-radius: 8px;
                padding: 2px 8px;
                font-weight: 600;
            }
            QFrame#UkLaw { border-radius: 6px; background: rgba(255, 255, 255, 18); }
            QFrame#UkLaw[status="protected"] { border-left: 4px solid #22c55e; }
            QFrame#UkLaw[status="partial"] { border-left: 4px solid #eab308; }
            QFrame#UkLaw[status="not-protected"] { border-left: 4px solid #ef4444; }
            QLabel#UkLawIcon { font-size: 18px; }
            QLabel#UkLawTitle { font-weight: 700; }
            QPushButton#SpectrumItem {
                text-align: left;
                padding: 8px;
                border-radius: 6px;
                border: 1px solid #3a4458;
                background: rgba(255, 255, 255, 10);
                color: #e8ecf4;
            }
            QPushButton#SpectrumItem[selected="true"] {
                border: 2px solid #eab308;
                background: rgba(234, 179, 8, 40);
            }
        """)

    # ------------------------------------------------------------------ sink
    def render(self, state: PanelState) -> None:
        self.state = state
        if state.mode == MODE_DETAIL:
            self._render_detail(state)
            self.stack.setCurrentWidget(self.scroll)
            self.show()
        elif state.mode == MODE_HELP:
            self.help_label.setText(state.help_text)
            self.stack.setCurrentWidget(self.help_scroll)
            self.show()
        else:
            self.hide()

    def _render_detail(self, state: PanelState) -> None:
        self.title.setText(state.title)
        self.category.setText(state.category)
        self.category.setStyleSheet(f"background: {state.category_color};")
        self.description.setText(state.description)
        self.nav_counter.setText(state.nav_counter)
        self.btn_prev.setEnabled(state.nav_enabled)
        self.btn_next.setEnabled(state.nav_enabled)
        if state.law is not None:
            self.law.setProperty("status", state.law.status)
            self.law_icon.setText(state.law.icon)
            self.law_title.setText(state.law.title)
            self.law_text.setText(state.law.text)
            self.law.style().unpolish(self.law)
            self.law.style().polish(self.law)
        self.law.setVisible(state.law is not None)

        _clear_layout(self._spectrum)
        for item in state.spectrum:
            btn = QtWidgets.QPushButton(f"{item.points_label}\n{item.text}")
            btn.setObjectName("SpectrumItem")
            btn.setProperty("selected", item.selected)
            btn.setCursor(QtCore.Qt.PointingHandCursor)
            btn.clicked.connect(lambda _checked=False, band=item.band: self.bandSelected.emit(band))
            self._spectrum.addWidget(btn)

    # ------------------------------------------------------------------ touch
    def _viewport_height(self) -> float:
        parent = self.parentWidget()
        return float(parent.height() if parent is not None else self.height())

    def _metrics(self) -> PanelMetrics:
        scroll = self.help_scroll if self._active_swipe is self._help_swipe else self.scroll
        bar = scroll.verticalScrollBar()
        return PanelMetrics(
            height=float(self.height()),
            viewport_height=self._viewport_height(),
            scroll_top=float(bar.value()),
            scroll_height=float(bar.maximum() + bar.pageStep()),
            client_height=float(bar.pageStep()),
        )

    def event(self, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        etype = event.type()
        if etype in (QtCore.QEvent.TouchBegin, QtCore.QEvent.TouchUpdate, QtCore.QEvent.TouchEnd):
            points = event.touchPoints()
            if points:
                self._handle_touch(etype, points[0])
            event.accept()
            return True
        if etype == QtCore.QEvent.TouchCancel:
            self._grab.dragging = False
            return True
        return super().event(event)

    def _handle_touch(self, etype: int, point: QtGui.QTouchEvent.TouchPoint) -> None:
        pos = point.screenPos()
        if etype == QtCore.QEvent.TouchBegin:
            on_grab_bar = self.grab_bar.geometry().contains(point.pos().toPoint())
            is_help = self.state is not None and self.state.mode == MODE_HELP
            self._active_swipe = self._help_swipe if is_help else self._detail_swipe
            self._active_swipe.start(pos.x(), pos.y(), on_grab_bar=on_grab_bar)
            if on_grab_bar:
                self._grab.start(pos.y(), float(self.height()))
        elif etype == QtCore.QEvent.TouchUpdate:
            height = self._grab.move(pos.y(), self._viewport_height())
            if height is not None:
                self.heightRequested.emit(height)
        else:
            action = self._grab.end(pos.y())
            has_focus = self.state is not None and self.state.mode == MODE_DETAIL
            swipe_action = self._active_swipe.end(pos.x(), pos.y(), self._metrics(), has_focus=has_focus)
            if action is PanelAction.NONE:
                action = swipe_action
            self._apply(action)

    def _apply(self, action: PanelAction) -> None:
        if action is PanelAction.PREVIOUS:
            self.navigateRequested.emit(-1)
        elif action is PanelAction.NEXT:
            self.navigateRequested.emit(1)
        elif action is PanelAction.EXPAND:
            self.heightRequested.emit(self._viewport_height() - _TOUCH["categoryBarHeight"])
        elif action is PanelAction.DISMISS:
            self.heightRequested.emit(-1.0)
            if self._active_swipe is self._help_swipe:
                self.helpDismissed.emit()
            else:
                self.dismissRequested.emit()
