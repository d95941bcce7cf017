from __future__ import annotations

import copy
import io
import json
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

import pytest
from PIL import Image

from polyglot_mini import utils
from polyglot_mini.config import PolyglotSettings
from polyglot_mini.engine import Polyglot
from polyglot_mini.ui import ButtonSpec, GestureCallback, PickerSpec, ScreenInfo

TRANSLATIONS_DIR = "polyglot/translations"
ASSET_TRANSLATIONS_DIR = "raw/polyglot/translations"

EN = {"header": "Hello from", "polyglot": "Polyglot", "btn_left": "Left"}
DE = {"header": "Hallo von", "polyglot": "Polyglot", "btn_left": "Links"}
ES = {"header": "Hola desde", "polyglot": "Políglota"}


class MemoryStorage:
    """Dict-backed storage double that records every write."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.assets: dict[str, bytes] = {}
        self.writes: list[tuple[str, Any]] = []
        self.listed: list[str] = []

    def add_translation(self, code: str, table: Any) -> None:
        self.data[f"{TRANSLATIONS_DIR}/{code}.json"] = table

    def add_asset_translation(self, code: str, table: Any) -> None:
        raw = table if isinstance(table, bytes) else json.dumps(table).encode("utf-8")
        self.assets[f"{ASSET_TRANSLATIONS_DIR}/{code}.json"] = raw

    def read_json(self, path: str) -> Any | None:
        return copy.deepcopy(self.data.get(path))

    def write_json(self, path: str, data: Any) -> None:
        self.writes.append((path, copy.deepcopy(data)))
        self.data[path] = copy.deepcopy(data)

    def list_dir(self, path: str) -> list[str]:
        self.listed.append(path)
        prefix = path.rstrip("/") + "/"
        return sorted(
            {key[len(prefix) :].split("/", 1)[0] for key in self.data if key.startswith(prefix)}
        )

    def asset_exists(self, path: str) -> bool:
        return path in self.assets

    def read_asset_bytes(self, path: str, max_bytes: int) -> bytes | None:
        data = self.assets.get(path)
        if not data:
            return None
        return data[:max_bytes]

    def read_asset_bounded(self, path: str, max_bytes: int) -> str | None:
        data = self.read_asset_bytes(path, max_bytes)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace")


@dataclass
class RecordedHandle:
    kind: str
    spec: Any
    removed: int = 0

    def remove(self) -> None:
        self.removed += 1


class RecordingSurface:
    """UI surface double keeping every created widget and gesture change."""

    def __init__(self, screen: ScreenInfo | None = None) -> None:
        self._screen = screen or ScreenInfo(480, 480, "round")
        self.pickers: list[RecordedHandle] = []
        self.buttons: list[RecordedHandle] = []
        self.gesture_callback: GestureCallback | None = None
        self.gesture_registrations = 0
        self.gesture_releases = 0

    @property
    def screen(self) -> ScreenInfo:
        return self._screen

    def create_picker(self, spec: PickerSpec) -> RecordedHandle:
        handle = RecordedHandle("picker", spec)
        self.pickers.append(handle)
        return handle

    def create_button(self, spec: ButtonSpec) -> RecordedHandle:
        handle = RecordedHandle("button", spec)
        self.buttons.append(handle)
        return handle

    def on_gesture(self, callback: GestureCallback) -> None:
        self.gesture_callback = callback
        self.gesture_registrations += 1

    def off_gesture(self) -> None:
        self.gesture_callback = None
        self.gesture_releases += 1


def png_bytes(width: int, height: int | None = None) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height or width), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def tables() -> dict[str, dict[str, str]]:
    return {"en-US": dict(EN), "de-DE": dict(DE), "es-ES": dict(ES)}


@pytest.fixture
def seeded_storage(storage: MemoryStorage, tables: dict[str, dict[str, str]]) -> MemoryStorage:
    """Storage with en-US, de-DE and es-ES translations in the writable root."""
    for code, table in tables.items():
        storage.add_translation(code, table)
    return storage


@pytest.fixture
def make_surface() -> Callable[..., RecordingSurface]:
    return RecordingSurface


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return png_bytes


@pytest.fixture
def settings() -> PolyglotSettings:
    return PolyglotSettings(app_version="1.0.0", default_language="en-US")


@pytest.fixture
def make_poly(
    storage: MemoryStorage, settings: PolyglotSettings, surface: RecordingSurface
) -> Callable[..., Polyglot]:
    """Return a factory building a :class:`Polyglot` over the test doubles."""

    def factory(system_id: int | None = 2, **kwargs: Any) -> Polyglot:
        kwargs.setdefault("surface", surface)
        return Polyglot(
            kwargs.pop("storage", storage),
            kwargs.pop("settings", settings),
            system_language=lambda: system_id,
            **kwargs,
        )

    return factory


@pytest.fixture
def poly_caplog(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Capture records of the non-propagating package logger."""
    previous = utils.logger.level
    utils.logger.addHandler(caplog.handler)
    utils.logger.setLevel(logging.DEBUG)
    try:
        yield caplog
    finally:
        utils.logger.removeHandler(caplog.handler)
        utils.logger.setLevel(previous)


@pytest.fixture(autouse=True)
def _restore_logger() -> Iterator[None]:
    handlers = list(utils.logger.handlers)
    level = utils.logger.level
    yield
    utils.logger.handlers[:] = handlers
    utils.logger.setLevel(level)
