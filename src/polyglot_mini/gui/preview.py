"""Preview window rendering the active translations (GUI-only)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QLabel, QMainWindow, QPlainTextEdit, QVBoxLayout, QWidget

from polyglot_mini.config import DEFAULT_CONFIG, load_config, settings_from_config
from polyglot_mini.engine import Polyglot
from polyglot_mini.gui.surface import QtSurface
from polyglot_mini.storage import FileStorage, Storage
from polyglot_mini.ui import BubbleLocation, BubbleOptions
from polyglot_mini.utils import logger

SCREEN_SIZE = 480


class PreviewWindow(QMainWindow):
    """Square preview screen with the language bubble in one corner.

    A switch with ``restart`` rebuilds the whole page from scratch, the same
    way an app would re-enter its first page.
    """

    def __init__(
        self,
        cfg: Mapping[str, Any] | None = None,
        storage: Storage | None = None,
        *,
        restart: bool = False,
        location: BubbleLocation = "top-right",
        system_language: Callable[[], int | None] | None = None,
    ) -> None:
        """Build the first page from ``cfg`` or the saved application config."""
        super().__init__()
        self.system_language = system_language
        self.cfg: dict[str, Any] = dict(cfg if cfg is not None else load_config())
        assets_dir = self.cfg.get("assets_dir") or DEFAULT_CONFIG["assets_dir"]
        data_dir = self.cfg.get("data_dir") or DEFAULT_CONFIG["data_dir"]
        self.assets_dir = Path(assets_dir)
        self.storage = storage or FileStorage(data_dir, self.assets_dir)
        self.settings = settings_from_config(self.cfg)
        self.bubble_options = BubbleOptions(location=location, restart=restart)
        self.rebuild_count = 0
        self.poly: Polyglot | None = None

        self.setWindowTitle("polyglot-mini preview")
        self.setFixedSize(SCREEN_SIZE, SCREEN_SIZE)
        self.rebuild()

    def rebuild(self) -> None:
        """Discard the current page and build a new one from persisted state."""
        if self.poly is not None:
            self.poly.hide_poly_bubble()

        host = QWidget()
        host.resize(SCREEN_SIZE, SCREEN_SIZE)
        layout = QVBoxLayout(host)
        self.header = QLabel()
        self.texts = QPlainTextEdit()
        self.texts.setReadOnly(True)
        layout.addWidget(self.header)
        layout.addWidget(self.texts)
        self.setCentralWidget(host)

        self.surface = QtSurface(host, self.assets_dir)
        poly = Polyglot(
            self.storage,
            self.settings,
            system_language=self.system_language,
            surface=self.surface,
        )
        poly.on_language_change(self.on_language_change)
        poly.on_restart_required(self.on_restart_required)
        self.poly = poly
        self.render_texts(poly.get_language(), poly.get_all_texts())
        poly.show_poly_bubble(self.bubble_options)
        self.rebuild_count += 1
        logger.debug("preview page built for %s", poly.get_language())

    def render_texts(self, language: str, texts: Mapping[str, str]) -> None:
        """Show the language header and the sorted key and text lines."""
        poly = self.poly
        name = poly.catalog.display_name(language) if poly else None
        self.header.setText(f"{name or language} ({language})")
        lines = [f"{key}: {value}" for key, value in sorted(texts.items())]
        self.texts.setPlainText("\n".join(lines))

    def on_language_change(self, language: str, texts: Mapping[str, str]) -> None:
        """Re-render after a switch without restart."""
        self.render_texts(language, texts)

    def on_restart_required(self, language: str) -> None:
        """Schedule a page rebuild once the picker callback returns."""
        logger.info("restarting preview for %s", language)
        # the picker that triggered the switch is still on the call stack
        QTimer.singleShot(0, self.rebuild)


__all__ = ["SCREEN_SIZE", "PreviewWindow"]
