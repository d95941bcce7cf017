"""Qt implementation of the UI surface contract (GUI-only)."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QEvent, QObject, QSize, Qt
from PySide6.QtGui import QColor, QFont, QIcon, QKeyEvent
from PySide6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QListWidget,
    QListWidgetItem,
    QToolButton,
    QWidget,
)

from polyglot_mini.ui import (
    ButtonSpec,
    Gesture,
    GestureCallback,
    PickerSpec,
    ScreenInfo,
    ScreenShape,
)
from polyglot_mini.utils import logger

KEY_GESTURES: dict[int, Gesture] = {
    Qt.Key.Key_Up: "up",
    Qt.Key.Key_Down: "down",
    Qt.Key.Key_Left: "left",
    Qt.Key.Key_Right: "right",
}

BUBBLE_FALLBACK_TEXT = "A"


def _css_color(value: int) -> str:
    return f"#{value & 0xFFFFFF:06x}"


class QtWidgetHandle:
    """Handle that hides and schedules deletion of a created widget."""

    def __init__(self, widget: QWidget) -> None:
        """Wrap ``widget`` created by the surface."""
        self.widget: QWidget | None = widget

    def remove(self) -> None:
        """Hide and delete the widget; later calls do nothing."""
        widget, self.widget = self.widget, None
        if widget is None:
            return
        widget.hide()
        widget.setParent(None)
        widget.deleteLater()


class GestureFilter(QObject):
    """Application event filter translating arrow keys into gestures."""

    def __init__(self, callback: GestureCallback, parent: QObject | None = None) -> None:
        """Forward arrow-key gestures to ``callback``."""
        super().__init__(parent)
        self.callback = callback

    def eventFilter(  # noqa: N802  # polyglot-mini: Qt requires camelCase method name | issue:-
        self, watched: QObject, event: QEvent
    ) -> bool:
        """Return whether a key press was consumed as a gesture."""
        if not isinstance(event, QKeyEvent) or not isinstance(watched, QWidget):
            return False
        if event.type() != QEvent.Type.KeyPress:
            return False
        gesture = KEY_GESTURES.get(event.key())
        if gesture is None:
            return False
        return bool(self.callback(gesture))


class QtSurface:
    """Render picker lists and bubble buttons as children of ``host``.

    Asset paths in :class:`~polyglot_mini.ui.ButtonSpec` are resolved against
    ``assets_dir``; a missing icon shows a text label instead.
    """

    def __init__(
        self,
        host: QWidget,
        assets_dir: str | Path,
        shape: ScreenShape = "square",
    ) -> None:
        """Attach to ``host``, reporting its size as a ``shape`` screen."""
        self.host = host
        self.assets_dir = Path(assets_dir)
        self.shape: ScreenShape = shape
        self.gesture_filter: GestureFilter | None = None

    @property
    def screen(self) -> ScreenInfo:
        """Current host geometry."""
        return ScreenInfo(self.host.width(), self.host.height(), self.shape)

    def create_picker(self, spec: PickerSpec) -> QtWidgetHandle:
        """Show ``spec`` as a full-screen list with the selected row current."""
        view = QListWidget(self.host)
        view.setObjectName("polyglot-picker")
        view.setGeometry(0, 0, self.host.width(), self.host.height())
        view.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        view.setStyleSheet(
            f"QListWidget {{ background: {_css_color(spec.bg_color)};"
            f" color: {_css_color(spec.text_color)}; }}"
        )
        font = QFont(view.font())
        font.setPointSizeF(font.pointSizeF() * spec.zoom)
        for row, name in enumerate(spec.items):
            item = QListWidgetItem(name)
            item.setFont(font)
            item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
            color = (
                spec.selected_item_color
                if row == spec.selected_index
                else spec.normal_item_color
            )
            item.setBackground(QColor(_css_color(color)))
            view.addItem(item)
        view.setCurrentRow(spec.selected_index)

        on_press = spec.on_press
        view.itemClicked.connect(lambda item: on_press(view.row(item)))
        if spec.on_focus_change is not None:
            view.currentRowChanged.connect(spec.on_focus_change)

        view.show()
        view.setFocus()
        return QtWidgetHandle(view)

    def create_button(self, spec: ButtonSpec) -> QtWidgetHandle:
        """Show the bubble button, falling back to a letter without an icon."""
        button = QToolButton(self.host)
        button.setObjectName("polyglot-bubble")
        button.setGeometry(spec.x, spec.y, spec.w, spec.h)
        button.setIconSize(QSize(spec.w, spec.h))
        normal_path = self.assets_dir / spec.normal_src
        if not normal_path.is_file():
            logger.debug("bubble icon %s not found, using text", spec.normal_src)
            button.setText(BUBBLE_FALLBACK_TEXT)
        else:
            normal = QIcon(str(normal_path))
            button.setIcon(normal)
            button.setAutoRaise(True)
            pressed_path = self.assets_dir / spec.press_src
            if pressed_path.is_file():
                pressed = QIcon(str(pressed_path))
                button.pressed.connect(lambda: button.setIcon(pressed))
                button.released.connect(lambda: button.setIcon(normal))
        button.clicked.connect(lambda _checked=False: spec.on_click())
        button.show()
        button.raise_()
        return QtWidgetHandle(button)

    def on_gesture(self, callback: GestureCallback) -> None:
        """Install an application-wide arrow-key filter calling ``callback``."""
        self.off_gesture()
        self.gesture_filter = GestureFilter(callback, self.host)
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self.gesture_filter)

    def off_gesture(self) -> None:
        """Remove the gesture filter if one is installed."""
        gesture_filter, self.gesture_filter = self.gesture_filter, None
        if gesture_filter is None:
            return
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(gesture_filter)
        gesture_filter.deleteLater()


__all__ = ["KEY_GESTURES", "GestureFilter", "QtSurface", "QtWidgetHandle"]
