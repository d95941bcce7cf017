"""Configuration helpers.

Engine settings, the persisted poly config and the application config file.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from polyglot_mini import utils
from polyglot_mini.storage import DEFAULT_MAX_ASSET_BYTES, Storage

POLY_VERSION = "1.0.2"

CONFIG_PATH = utils.CONFIG_FILE
# bundled assets ship inside the package
ASSETS_DIR = Path(__file__).resolve().parent / "assets"

DEFAULT_CONFIG = {
    "data_dir": str(utils.DATA_DIR),
    "assets_dir": str(ASSETS_DIR),
    "app_version": "1.0.0",
    "default_language": "en-US",
    "log_level": "WARNING",
}

_KEY_POLY_VERSION = "polyVersion"
_KEY_APP_VERSION = "appVersion"
_KEY_FILES = "files"
_KEY_FALLBACK = "isUsingFallback"
_KEY_SYS_LANG = "sysLangCode"
_KEY_LANGUAGE = "language"


@dataclass(frozen=True)
class PolyglotSettings:
    """Static settings handed to :class:`polyglot_mini.engine.Polyglot`.

    Paths are logical storage paths: ``config_path`` and ``translations_path``
    live in the writable data root, the ``asset_*`` and icon paths in the
    bundled asset root.
    """

    app_version: str
    default_language: str = "en-US"
    poly_version: str = POLY_VERSION
    config_path: str = "poly_config.json"
    translations_path: str = "polyglot/translations"
    asset_translations_path: str = "raw/polyglot/translations"
    max_asset_bytes: int = DEFAULT_MAX_ASSET_BYTES
    icon_normal_path: str = "raw/polyglot/poly-selector.png"
    icon_pressed_path: str = "raw/polyglot/poly-selector-press.png"


@dataclass
class PolyConfig:
    """Persisted language decision and translation file cache.

    Mutated in place by the engine and written back with :func:`save_poly_config`.
    """

    poly_version: str | None = None
    app_version: str | None = None
    files: list[str] | None = None
    is_using_fallback: bool = False
    sys_lang_code: str | None = None
    language: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> PolyConfig:
        """Return a config from decoded JSON, treating bad fields as absent."""
        if not isinstance(data, Mapping):
            return cls()
        files = data.get(_KEY_FILES)
        if isinstance(files, list) and all(isinstance(f, str) for f in files):
            files = list(files)
        else:
            files = None
        known = {
            _KEY_POLY_VERSION,
            _KEY_APP_VERSION,
            _KEY_FILES,
            _KEY_FALLBACK,
            _KEY_SYS_LANG,
            _KEY_LANGUAGE,
        }
        return cls(
            poly_version=_str_or_none(data.get(_KEY_POLY_VERSION)),
            app_version=_str_or_none(data.get(_KEY_APP_VERSION)),
            files=files,
            is_using_fallback=data.get(_KEY_FALLBACK) is True,
            sys_lang_code=_str_or_none(data.get(_KEY_SYS_LANG)),
            language=_str_or_none(data.get(_KEY_LANGUAGE)),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation written to storage."""
        data: dict[str, Any] = dict(self.extra)
        data.update(
            {
                _KEY_POLY_VERSION: self.poly_version,
                _KEY_APP_VERSION: self.app_version,
                _KEY_FILES: list(self.files) if self.files is not None else None,
                _KEY_FALLBACK: self.is_using_fallback,
                _KEY_SYS_LANG: self.sys_lang_code,
                _KEY_LANGUAGE: self.language,
            }
        )
        return {key: value for key, value in data.items() if value is not None}

    def is_stale(self, poly_version: str, app_version: str) -> bool:
        """Return ``True`` when the record was written by another build."""
        return (
            not self.poly_version
            or self.poly_version != poly_version
            or self.app_version != app_version
        )


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def load_poly_config(storage: Storage, path: str) -> PolyConfig:
    """Read the persisted poly config; missing or corrupt files yield defaults."""
    return PolyConfig.from_mapping(storage.read_json(path))


def save_poly_config(storage: Storage, path: str, cfg: PolyConfig) -> None:
    """Persist ``cfg`` at ``path``."""
    storage.write_json(path, cfg.to_dict())


def load_config_at(path: Path) -> dict:
    """Load application configuration from a specific path."""
    cfg = DEFAULT_CONFIG.copy()
    if path.exists():
        with suppress(Exception):
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                cfg.update(data)
    return cfg


def save_config_at(path: Path, cfg: dict) -> None:
    """Persist application configuration to a specific path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(cfg), indent=2), encoding="utf-8")


def load_config() -> dict:
    """Load configuration using :data:`CONFIG_PATH`."""
    return load_config_at(CONFIG_PATH)


def save_config(cfg: dict) -> None:
    """Persist configuration using :data:`CONFIG_PATH`."""
    save_config_at(CONFIG_PATH, cfg)


def settings_from_config(cfg: Mapping[str, Any]) -> PolyglotSettings:
    """Return engine settings for an application config mapping."""
    return PolyglotSettings(
        app_version=str(cfg.get("app_version") or DEFAULT_CONFIG["app_version"]),
        default_language=str(
            cfg.get("default_language") or DEFAULT_CONFIG["default_language"]
        ),
    )


__all__ = [
    "ASSETS_DIR",
    "CONFIG_PATH",
    "DEFAULT_CONFIG",
    "POLY_VERSION",
    "PolyConfig",
    "PolyglotSettings",
    "load_config",
    "load_config_at",
    "load_poly_config",
    "save_config",
    "save_config_at",
    "save_poly_config",
    "settings_from_config",
]
