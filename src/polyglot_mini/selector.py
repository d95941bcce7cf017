"""Rotation-indexed language picker.

The picker shows the supported languages sorted by display name but rotated
so the active language sits in the centre slot of a five row window. All
events coming back from the surface are translated to positions in the
sorted list before they reach the caller.
"""

from __future__ import annotations

import locale
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from polyglot_mini.catalog import LanguageCatalog
from polyglot_mini.ui import Gesture, PickerSpec, UiSurface, WidgetHandle
from polyglot_mini.utils import logger

T = TypeVar("T")

VISIBLE_SLOTS = 5
FOCUS_SLOT = 2

ERR_EMPTY_PICKER = "cannot open a language picker without languages"
ERR_INDEX_RANGE = "rotated index {index} out of range 0..{size}"


@dataclass(frozen=True)
class PickerEntry:
    """A language row in display order."""

    code: str
    name: str


@dataclass(frozen=True)
class RotationMap:
    """Mapping from displayed (rotated) positions to original positions."""

    offset: int
    index_map: tuple[int, ...]

    @classmethod
    def build(cls, size: int, selected_index: int) -> RotationMap:
        """Rotate ``size`` items so ``selected_index`` lands on :data:`FOCUS_SLOT`."""
        if size <= 0:
            return cls(0, ())
        offset = (selected_index + size - FOCUS_SLOT) % size
        return cls(offset, tuple((i + offset) % size for i in range(size)))

    def __len__(self) -> int:
        """Number of picker slots."""
        return len(self.index_map)

    def to_original(self, rotated_index: int) -> int:
        """Return the original position of displayed row ``rotated_index``."""
        if not 0 <= rotated_index < len(self.index_map):
            raise IndexError(
                ERR_INDEX_RANGE.format(index=rotated_index, size=len(self.index_map))
            )
        return self.index_map[rotated_index]

    def to_rotated(self, original_index: int) -> int:
        """Return the displayed row of original position ``original_index``."""
        return (original_index - self.offset) % len(self.index_map)

    def rotate(self, items: Sequence[T]) -> list[T]:
        """Return ``items`` in displayed order."""
        return [items[original] for original in self.index_map]


def sort_languages(codes: Iterable[str], catalog: LanguageCatalog) -> list[PickerEntry]:
    """Return picker entries sorted by locale-aware display name."""
    entries = [
        PickerEntry(code, catalog.display_name(code) or code) for code in codes
    ]
    return sorted(entries, key=lambda entry: (locale.strxfrm(entry.name), entry.code))


class LanguagePicker:
    """One open/close cycle of the language picker.

    ``close`` may be called from any exit path; the widget is removed and the
    gesture listener released only once.
    """

    def __init__(
        self,
        surface: UiSurface,
        entries: Sequence[PickerEntry],
        selected_code: str | None,
        on_select: Callable[[str], None],
        on_focus: Callable[[int, str], None] | None = None,
    ) -> None:
        """Prepare a picker session over ``entries``."""
        if not entries:
            raise ValueError(ERR_EMPTY_PICKER)
        self.surface = surface
        self.entries = list(entries)
        codes = [entry.code for entry in self.entries]
        self.selected_index = codes.index(selected_code) if selected_code in codes else 0
        self.rotation = RotationMap.build(len(self.entries), self.selected_index)
        self._on_select = on_select
        self._on_focus = on_focus
        self._handle: WidgetHandle | None = None
        self._opened = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        """Whether the picker is currently shown."""
        return self._opened and not self._closed

    def spec(self) -> PickerSpec:
        """Return the declarative description of the rotated list."""
        names = self.rotation.rotate([entry.name for entry in self.entries])
        return PickerSpec(
            items=tuple(names),
            selected_index=self.rotation.to_rotated(self.selected_index),
            on_press=self._handle_press,
            on_focus_change=self._handle_focus if self._on_focus else None,
        )

    def open(self) -> None:
        """Show the picker and start listening for the dismiss gesture."""
        if self._opened:
            return
        self._opened = True
        self._handle = self.surface.create_picker(self.spec())
        self.surface.on_gesture(self._handle_gesture)

    def close(self) -> None:
        """Remove the picker widget and the gesture listener."""
        if not self._opened or self._closed:
            return
        self._closed = True
        self.surface.off_gesture()
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.remove()
        except Exception as exc:  # noqa: BLE001  # polyglot-mini: widget disposal is best effort | issue:-
            logger.debug("picker widget removal failed: %s", exc)

    def _handle_press(self, rotated_index: int) -> None:
        if not self.is_open:
            return
        entry = self.entries[self.rotation.to_original(rotated_index)]
        self.close()
        self._on_select(entry.code)

    def _handle_focus(self, rotated_index: int) -> None:
        if not self.is_open or self._on_focus is None:
            return
        original = self.rotation.to_original(rotated_index)
        self._on_focus(original, self.entries[original].code)

    def _handle_gesture(self, gesture: Gesture) -> bool:
        if gesture == "right":
            self.close()
            return True
        return False


__all__ = [
    "FOCUS_SLOT",
    "VISIBLE_SLOTS",
    "LanguagePicker",
    "PickerEntry",
    "RotationMap",
    "sort_languages",
]
