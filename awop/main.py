# -*- coding: utf-8 -*-
import argparse
import logging
import sys
from typing import List, NoReturn, Optional


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Unable to start AWOP: importing PyQt5 failed.",
        "Check that PyQt5 is installed and that the required OpenGL libraries are available.",
    ]
    if "libGL.so.1" in details:
        message_lines.append(
            "Hint: the system library libGL.so.1 is missing. Install the Mesa/OpenGL packages for your platform."
        )
    message_lines.append(f"Original error: {details}")
    raise SystemExit("\n".join(message_lines)) from exc


try:
    from PyQt5 import QtCore, QtGui, QtWidgets
    from PyQt5.QtCore import Qt
    from PyQt5.QtGui import QSurfaceFormat
except ImportError as exc:  # pragma: no cover - environment dependent
    _handle_qt_import_error(exc)

from .control.config import DEFAULTS, debug_enabled
from .control.panel import PanelOrchestrator, PanelState
from .control.panel_widget import CategoryBar, PanelWidget
from .persistence import SelectionStore, ShareLink
from .session import WheelSession
from .view import WheelViewWidget

logger = logging.getLogger(__name__)

_TOUCH = DEFAULTS["touch"]
_SIDE_PANEL_WIDTH = 380


def configure_logging(level: Optional[int] = None) -> None:
    """Install the console handler used by every ``awop`` logger."""

    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO
    root = logging.getLogger("awop")
    root.setLevel(level)
    if not any(getattr(handler, "_awop_console", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[AWOP][%(levelname)s] %(message)s"))
        handler._awop_console = True  # type: ignore[attr-defined]
        root.addHandler(handler)


class ViewWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        session: WheelSession,
        screen: Optional[QtGui.QScreen] = None,
        *,
        force_backend: Optional[str] = None,
    ):
        super().__init__(None)
        self.session = session
        self._sheet_height: Optional[float] = None

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        self.view = WheelViewWidget(session, central, force_backend=force_backend)
        self.category_bar = CategoryBar(central)
        self.panel = PanelWidget(central)

        self.orchestrator = PanelOrchestrator(session, self._render_panel, viewport_width=float(self.width()))
        self.orchestrator.attach()

        self.category_bar.categoryToggled.connect(session.toggle_category)
        self.category_bar.resetRequested.connect(session.reset)
        self.category_bar.helpToggled.connect(self.orchestrator.toggle_help)
        self.panel.bandSelected.connect(session.select_band_from_panel)
        self.panel.navigateRequested.connect(session.navigate)
        self.panel.dismissRequested.connect(session.clear_focus)
        self.panel.helpDismissed.connect(self.orchestrator.dismiss_help)
        self.panel.heightRequested.connect(self._set_sheet_height)
        session.linkChanged.connect(self._show_link)
        session.focusChanged.connect(lambda token: self._reset_sheet_height())

        self.statusBar().setSizeGripEnabled(False)
        self._link_label = QtWidgets.QLabel()
        self._link_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.statusBar().addPermanentWidget(self._link_label, 1)
        self._show_link(session.link.to_string())

        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        QtWidgets.QShortcut(QtGui.QKeySequence("Ctrl+L"), self, activated=self.copy_link)
        QtWidgets.QShortcut(Qt.Key_Left, self, activated=lambda: session.navigate(-1))
        QtWidgets.QShortcut(Qt.Key_Right, self, activated=lambda: session.navigate(1))

        self.setWindowTitle("Academic Wheel of Privilege")
        if screen is not None:
            self._apply_screen_geometry(screen)
        self.orchestrator.refresh()

    def _apply_screen_geometry(self, screen: QtGui.QScreen):
        geometry = screen.availableGeometry()
        width = int(geometry.width() * 0.8)
        height = int(geometry.height() * 0.8)
        left = geometry.left() + (geometry.width() - width) // 2
        top = geometry.top() + (geometry.height() - height) // 2
        self.setGeometry(left, top, width, height)

    # ------------------------------------------------------------------ panel
    def _render_panel(self, state: PanelState) -> None:
        self.category_bar.render(state)
        self.panel.render(state)
        self.view.set_scene_offset(state.scene_offset_y)
        self._layout_overlays()

    def _set_sheet_height(self, height: float) -> None:
        self._sheet_height = None if height < 0 else float(height)
        self._layout_overlays()

    def _reset_sheet_height(self) -> None:
        self._sheet_height = None
        self._layout_overlays()

    def _show_link(self, url: str) -> None:
        self._link_label.setText(url)
        self._link_label.setToolTip("Ctrl+L copies the shareable link")

    def copy_link(self) -> None:
        QtWidgets.QApplication.clipboard().setText(self.session.link.to_string())
        self.statusBar().showMessage("Link copied", 2000)

    # ------------------------------------------------------------------ layout
    def _layout_overlays(self) -> None:
        central = self.centralWidget()
        if central is None:
            return
        width = central.width()
        height = central.height()
        bar_height = int(_TOUCH["categoryBarHeight"])
        self.view.setGeometry(0, 0, width, height)
        self.category_bar.setGeometry(0, 0, width, bar_height)
        if self.orchestrator.is_mobile:
            min_height = height * _TOUCH["minPanelHeightRatio"]
            sheet = self._sheet_height if self._sheet_height is not None else min_height
            sheet = int(max(min_height, min(height - bar_height, sheet)))
            self.panel.setGeometry(0, height - sheet, width, sheet)
        else:
            panel_width = min(_SIDE_PANEL_WIDTH, width // 2)
            self.panel.setGeometry(width - panel_width - 12, bar_height + 12, panel_width, height - bar_height - 24)
        self.category_bar.raise_()
        self.panel.raise_()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.orchestrator.set_viewport_width(float(self.width()))
        self._layout_overlays()


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="awop", description="Academic Wheel of Privilege")
    parser.add_argument("--link", help="shareable link (or bare fragment) to restore")
    parser.add_argument("--storage", help="JSON file used for the local selection store")
    parser.add_argument("--backend", choices=("raster", "opengl"), help="force the rendering backend")
    return parser.parse_args(argv)


def _link_from_arg(raw: Optional[str]) -> ShareLink:
    if not raw:
        return ShareLink()
    if "://" in raw:
        return ShareLink(raw)
    link = ShareLink()
    link.replace_fragment(raw.lstrip("#"))
    return link


def main(argv: Optional[List[str]] = None, headless: bool = False) -> int:
    """Start the application and return the exit code.

    When ``headless`` is True the session is loaded and persisted but no Qt
    widgets are created; the current link is logged instead.
    """

    configure_logging()
    args = _parse_args(argv)
    store = SelectionStore(args.storage) if args.storage else SelectionStore()
    if headless:
        session = WheelSession(store=store, link=_link_from_arg(args.link))
        source = session.load()
        logger.info("Loaded state from %s, score %d: %s", source, session.summary.total, session.link.to_string())
        return 0

    fmt = QSurfaceFormat()
    fmt.setAlphaBufferSize(8)
    QSurfaceFormat.setDefaultFormat(fmt)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv[:1])

    session = WheelSession(store=store, link=_link_from_arg(args.link))
    source = session.load()
    logger.info("Loaded selections from %s", source)

    window = ViewWindow(session, QtGui.QGuiApplication.primaryScreen(), force_backend=args.backend)
    window.show()
    return app.exec_()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
