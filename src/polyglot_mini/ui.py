"""Declarative UI surface contract consumed by the picker and the poly bubble.

The surface renders what it is given and reports press, focus-change and
gesture events back through the callbacks; it never calls into the engine.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

ScreenShape = Literal["round", "square"]
Gesture = Literal["up", "down", "left", "right"]
BubbleLocation = Literal["top-left", "top-right", "bot-left", "bot-right"]

GestureCallback = Callable[[Gesture], bool]

DEFAULT_ICON_SIZE = 64


@dataclass(frozen=True)
class ScreenInfo:
    """Logical screen size and shape."""

    width: int
    height: int
    shape: ScreenShape = "round"


@dataclass(frozen=True)
class PickerSpec:
    """Scroll list description handed to :meth:`UiSurface.create_picker`.

    ``selected_index`` is the highlighted row of ``items`` as displayed; the
    callbacks receive displayed row indices.
    """

    items: tuple[str, ...]
    selected_index: int
    on_press: Callable[[int], None]
    on_focus_change: Callable[[int], None] | None = None
    bg_color: int = 0x000000
    normal_item_color: int = 0x333333
    selected_item_color: int = 0xFF0000
    text_color: int = 0xFFFFFF
    zoom: float = 1.25


@dataclass(frozen=True)
class ButtonSpec:
    """Image button description handed to :meth:`UiSurface.create_button`."""

    x: int
    y: int
    w: int
    h: int
    normal_src: str
    press_src: str
    on_click: Callable[[], None]


class WidgetHandle(Protocol):
    """Opaque handle returned by the surface for a created widget."""

    def remove(self) -> None:
        """Dispose the widget."""
        ...


class UiSurface(Protocol):
    """Rendering capability used for the language picker and the bubble."""

    @property
    def screen(self) -> ScreenInfo:
        """Return the screen geometry."""
        ...

    def create_picker(self, spec: PickerSpec) -> WidgetHandle:
        """Create a full-screen picker list."""
        ...

    def create_button(self, spec: ButtonSpec) -> WidgetHandle:
        """Create an image button."""
        ...

    def on_gesture(self, callback: GestureCallback) -> None:
        """Register the gesture listener; returning ``True`` consumes the event."""
        ...

    def off_gesture(self) -> None:
        """Deregister the gesture listener."""
        ...


@dataclass(frozen=True)
class BubbleOptions:
    """Placement options for the language switcher bubble.

    ``x`` and ``y`` override ``location`` when both are given. ``padding``
    defaults to 5% of the smaller screen side and ``icon_size`` to the icon
    resolution.
    """

    location: BubbleLocation = "top-left"
    padding_mult: int = 2
    icon_size: int | None = None
    padding: int | None = None
    x: int | None = None
    y: int | None = None
    offset_x: int = 0
    offset_y: int = 0
    restart: bool = False


def bubble_position(
    screen: ScreenInfo, options: BubbleOptions, icon_size: int
) -> tuple[int, int]:
    """Return the top-left corner of the bubble icon."""
    if options.x is not None and options.y is not None:
        return options.x + options.offset_x, options.y + options.offset_y

    padding = options.padding
    if padding is None:
        padding = round(min(screen.width, screen.height) * 0.05)
    inset = padding * options.padding_mult
    # round screens clip their corners, push the icon towards the centre
    nudge = 0 if screen.shape == "square" else icon_size / 2

    left = inset + nudge
    right = screen.width - icon_size - inset - nudge
    top = inset
    bottom = screen.height - icon_size - inset

    positions = {
        "top-left": (left, top),
        "top-right": (right, top),
        "bot-left": (left, bottom),
        "bot-right": (right, bottom),
    }
    x, y = positions.get(options.location, positions["top-left"])
    return int(x + options.offset_x), int(y + options.offset_y)


__all__ = [
    "DEFAULT_ICON_SIZE",
    "BubbleLocation",
    "BubbleOptions",
    "ButtonSpec",
    "Gesture",
    "GestureCallback",
    "PickerSpec",
    "ScreenInfo",
    "ScreenShape",
    "UiSurface",
    "WidgetHandle",
    "bubble_position",
]
