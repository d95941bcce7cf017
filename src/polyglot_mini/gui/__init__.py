"""Qt preview host: ``polyglot-mini-preview`` and the Qt widgets behind it.

Importing this package never requires PySide6. When Qt cannot be loaded
``QT_AVAILABLE`` is false, ``QT_IMPORT_ERROR`` keeps the reason and
``PreviewWindow`` is a placeholder class.
"""

from __future__ import annotations

import importlib
import sys
from typing import Any

import polyglot_mini.config as _config
from polyglot_mini.utils import configure_logging, logger

ERR_NO_QT = "Qt libraries not available"


class _StubPreviewWindow:
    """Stand-in for the preview window on hosts without Qt."""


def _import_preview() -> tuple[type[Any], type[Any] | None, Exception | None]:
    """Return the preview window and ``QApplication`` classes, or the import error."""
    try:
        qt_widgets = importlib.import_module("PySide6.QtWidgets")
        preview = importlib.import_module("polyglot_mini.gui.preview")
    except (ImportError, OSError, RuntimeError) as exc:
        logger.warning("Qt preview unavailable: %s", exc)
        return _StubPreviewWindow, None, exc
    return preview.PreviewWindow, qt_widgets.QApplication, None


PreviewWindow, QApplication, QT_IMPORT_ERROR = _import_preview()
QT_AVAILABLE = QT_IMPORT_ERROR is None


def main() -> None:
    """Open the preview window over the configured data and asset roots."""
    if QApplication is None:
        raise QT_IMPORT_ERROR or RuntimeError(ERR_NO_QT)

    cfg = _config.load_config()
    configure_logging(str(cfg.get("log_level") or "WARNING"))
    app = QApplication(sys.argv)
    win = PreviewWindow(cfg)
    win.show()
    sys.exit(app.exec())


__all__ = ["QT_AVAILABLE", "QT_IMPORT_ERROR", "PreviewWindow", "main"]
