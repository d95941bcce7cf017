"""Language resolution engine.

:class:`Polyglot` decides which language the user sees, keeps that language's
translation table in memory and persists the decision so the next start can
skip the translation file scan.

Bootstrap order:

1. read the persisted :class:`~polyglot_mini.config.PolyConfig`;
2. rescan translation files when the config was written by another build (or
   has no file list). An empty primary listing switches to fallback mode,
   where the bundled asset copies are probed per catalog language instead;
3. pick the language: a changed system language wins, then the saved choice,
   then the related or default language of the system language;
4. load the table (falling back to the default language with an empty table)
   and persist the decision.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from polyglot_mini.cache import TranslationCache, coerce_table
from polyglot_mini.catalog import LanguageCatalog, detect_system_language_id
from polyglot_mini.config import (
    PolyglotSettings,
    load_poly_config,
    save_poly_config,
)
from polyglot_mini.events import LanguageChangeBus, LanguageSubscriber, RestartHandler
from polyglot_mini.icons import MAX_ICON_BYTES, icon_resolution
from polyglot_mini.selector import LanguagePicker, sort_languages
from polyglot_mini.storage import Storage
from polyglot_mini.ui import (
    BubbleOptions,
    ButtonSpec,
    UiSurface,
    WidgetHandle,
    bubble_position,
)
from polyglot_mini.utils import logger

_JSON_SUFFIX = ".json"

ERR_NO_TRANSLATIONS = "no translation data for {code}"
ERR_NOT_A_TABLE = "translation data for {code} is not a JSON object"
ERR_NO_SURFACE = "no UI surface configured"


class TranslationLoadError(RuntimeError):
    """Raised when a language's translation table cannot be loaded."""


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of :meth:`Polyglot.set_language`.

    ``requires_restart`` asks the host to rebuild its UI from the first page;
    subscribers were not notified in that case.
    """

    language: str
    changed: bool
    requires_restart: bool = False


@dataclass(frozen=True)
class TranslationEntry:
    """A key's text in one supported language."""

    lang_code: str
    text: str


class Polyglot:
    """Manage the active language and its translations."""

    def __init__(
        self,
        storage: Storage,
        settings: PolyglotSettings,
        *,
        catalog: LanguageCatalog | None = None,
        system_language: Callable[[], int | None] | None = None,
        surface: UiSurface | None = None,
    ) -> None:
        """Bootstrap the active language from storage and the system language.

        Args:
            storage: Storage adapter over the data and asset roots.
            settings: Versions, default language and storage paths.
            catalog: Language catalog; the built-in table when omitted.
            system_language: Returns the system's numeric language id.
                Defaults to detection from the OS locale.
            surface: UI surface for the picker and the bubble.
        """
        self.storage = storage
        self.settings = settings
        self.catalog = catalog or LanguageCatalog()
        self.surface = surface
        self._system_language = system_language or (
            lambda: detect_system_language_id(self.catalog)
        )
        self._bus = LanguageChangeBus()
        self._bubble: WidgetHandle | None = None
        self._picker: LanguagePicker | None = None
        self._icon_normal_path = settings.icon_normal_path
        self._icon_pressed_path = settings.icon_pressed_path

        self._config = load_poly_config(storage, settings.config_path)
        self._scan_translations()

        sys_code = self.get_sys_lang_code()
        logger.debug("system language code: %s", sys_code)
        language = self._decide_language(sys_code)

        self._cache = TranslationCache(language)
        try:
            self._cache.replace(language, self._load_table(language))
            logger.debug("loaded texts for %s", language)
        except TranslationLoadError as exc:
            logger.warning(
                "could not load translations for %s, using %s: %s",
                language,
                settings.default_language,
                exc,
            )
            self._cache.replace(settings.default_language, {})

        self._config.sys_lang_code = sys_code
        self._config.language = self._cache.language
        self._save_config()

        self._icon_resolution = self._read_icon_resolution()

    # -- bootstrap -------------------------------------------------------

    def _scan_translations(self) -> None:
        cfg = self._config
        should_recache = cfg.is_stale(self.settings.poly_version, self.settings.app_version)
        if should_recache:
            logger.debug("version mismatch or no saved config, rescanning translations")
            cfg.poly_version = self.settings.poly_version
            cfg.app_version = self.settings.app_version

        if not should_recache and cfg.files is not None:
            logger.debug("reusing cached translation list: %s", cfg.files)
            return

        files = [
            name[: -len(_JSON_SUFFIX)]
            for name in self.storage.list_dir(self.settings.translations_path)
            if name.endswith(_JSON_SUFFIX)
        ]
        if files:
            cfg.is_using_fallback = False
            logger.debug("translations found: %s", ", ".join(files))
        else:
            cfg.is_using_fallback = True
            files = [
                code
                for code in self.catalog.codes()
                if self.storage.asset_exists(self._asset_file(code))
            ]
            logger.info(
                "translations path unusable, using bundled assets: %s",
                ", ".join(files) or "none",
            )
        cfg.files = files
        self._save_config()

    def _decide_language(self, sys_code: str | None) -> str:
        cfg = self._config
        if cfg.sys_lang_code and sys_code != cfg.sys_lang_code:
            if sys_code and self.is_language_supported(sys_code):
                logger.debug("system language changed to supported %s", sys_code)
                return sys_code
            related = self.get_related_lang_code(sys_code)
            logger.debug("system language changed to %s, using %s", sys_code, related)
            return related
        if cfg.language and self.is_language_supported(cfg.language):
            logger.debug("using saved language %s", cfg.language)
            return cfg.language
        related = self.get_related_lang_code(sys_code)
        logger.debug("no usable saved language, using %s", related)
        return related

    def _read_icon_resolution(self) -> int:
        data = self.storage.read_asset_bytes(self._icon_normal_path, MAX_ICON_BYTES)
        return icon_resolution(data)

    # -- storage ---------------------------------------------------------

    def _primary_file(self, code: str) -> str:
        return f"{self.settings.translations_path}/{code}{_JSON_SUFFIX}"

    def _asset_file(self, code: str) -> str:
        return f"{self.settings.asset_translations_path}/{code}{_JSON_SUFFIX}"

    def _read_json_with_fallback(self, code: str) -> Any | None:
        """Read the translation document for ``code`` from the active root.

        In fallback mode the bundled asset is read with a bounded read and a
        JSON parse failure yields the raw text.
        """
        if not self._config.is_using_fallback:
            return self.storage.read_json(self._primary_file(code))
        path = self._asset_file(code)
        text = self.storage.read_asset_bounded(path, self.settings.max_asset_bytes)
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning("failed to parse JSON from asset file %s: %s", path, exc)
            return text

    def _load_table(self, code: str) -> dict[str, str]:
        data = self._read_json_with_fallback(code)
        if data is None:
            raise TranslationLoadError(ERR_NO_TRANSLATIONS.format(code=code))
        if not isinstance(data, Mapping):
            raise TranslationLoadError(ERR_NOT_A_TABLE.format(code=code))
        return coerce_table(data)

    def _save_config(self) -> None:
        save_poly_config(self.storage, self.settings.config_path, self._config)

    # -- language --------------------------------------------------------

    def get_language(self) -> str:
        """Return the active language code."""
        return self._cache.language

    def set_language(self, language: str, restart: bool = False) -> SwitchResult:
        """Switch to ``language`` and load its translations.

        Unknown codes resolve through the relatability table, then to the
        default language. With ``restart`` subscribers are skipped and the
        restart handlers are asked to rebuild the UI instead.
        """
        current = self._cache.language
        if language == current:
            return SwitchResult(current, changed=False)

        if self.catalog.by_code(language) is not None:
            target = language
        else:
            target = self.get_related_lang_code(language)
        if target == current:
            return SwitchResult(current, changed=False)

        try:
            table = self._load_table(target)
        except TranslationLoadError as exc:
            logger.error("error setting language %s: %s", target, exc)
            return SwitchResult(current, changed=False)

        self._cache.replace(target, table)
        self._config.language = target
        self._config.sys_lang_code = self.get_sys_lang_code()
        self._save_config()
        logger.info("language switched to %s", target)

        if restart:
            self._bus.request_restart(target)
            return SwitchResult(target, changed=True, requires_restart=True)
        self._bus.notify(target, self._cache.get_all_texts())
        return SwitchResult(target, changed=True)

    def get_related_lang_code(self, language: str | None) -> str:
        """Return ``language`` if supported, else its related or the default code."""
        if language and self.is_language_supported(language):
            return language
        related = self.catalog.related_code(language)
        result = related or self.settings.default_language
        logger.debug("related language for %s: %s", language, result)
        return result

    def get_supported_languages(self) -> tuple[str, ...]:
        """Return the language codes that have translation files."""
        return tuple(self._config.files or ())

    def is_language_supported(self, language: str | None) -> bool:
        """Return whether ``language`` has a translation file."""
        return language in (self._config.files or ())

    def is_using_fallback(self) -> bool:
        """Return whether translations are read from the bundled assets."""
        return self._config.is_using_fallback

    def get_lang_display_name(self) -> str | None:
        """Return the display name of the active language."""
        return self.catalog.display_name(self._cache.language)

    def get_sys_lang_code(self) -> str | None:
        """Return the catalog code of the system language."""
        entry = self.catalog.by_id(self._system_language())
        return entry.code if entry else None

    def get_sys_lang_name(self) -> str | None:
        """Return the display name of the system language."""
        entry = self.catalog.by_id(self._system_language())
        return entry.display_name if entry else None

    # -- texts -----------------------------------------------------------

    def get_text(self, key: str) -> str:
        """Return the text for ``key`` in the active language."""
        return self._cache.get_text(key)

    def get_all_texts(self) -> Mapping[str, str]:
        """Return the active translation table (read-only)."""
        return self._cache.get_all_texts()

    def get_available_translations_for_key(self, key: str) -> list[TranslationEntry]:
        """Return ``key``'s text in every supported language that defines it."""
        found: list[TranslationEntry] = []
        for code in self.get_supported_languages():
            try:
                table = self._load_table(code)
            except TranslationLoadError as exc:
                logger.debug("skipping %s: %s", code, exc)
                continue
            if key in table:
                found.append(TranslationEntry(code, table[key]))
        return found

    # -- subscriptions ---------------------------------------------------

    def on_language_change(self, subscriber: LanguageSubscriber) -> LanguageSubscriber:
        """Call ``subscriber(language, texts)`` after every applied switch."""
        return self._bus.subscribe(subscriber)

    def on_restart_required(self, handler: RestartHandler) -> RestartHandler:
        """Call ``handler(language)`` when a switch asks for a UI rebuild."""
        return self._bus.on_restart_required(handler)

    # -- UI glue ---------------------------------------------------------

    def _require_surface(self) -> UiSurface:
        if self.surface is None:
            raise RuntimeError(ERR_NO_SURFACE)
        return self.surface

    def set_icon_path(self, normal: str, pressed: str) -> None:
        """Use the given asset paths for the bubble's normal and pressed states."""
        self._icon_normal_path = normal
        self._icon_pressed_path = pressed

    def get_icon_resolution(self) -> int:
        """Return the bubble icon size in pixels."""
        return self._icon_resolution

    def show_lang_picker(self, restart: bool = False) -> LanguagePicker | None:
        """Open the language picker; a selection calls :meth:`set_language`.

        Returns ``None`` without touching the surface when no language is
        supported.
        """
        surface = self._require_surface()
        if self._picker is not None:
            self._picker.close()
        entries = sort_languages(self.get_supported_languages(), self.catalog)
        if not entries:
            logger.warning("no supported languages, language picker not shown")
            return None
        picker = LanguagePicker(
            surface,
            entries,
            self._cache.language,
            on_select=lambda code: self.set_language(code, restart),
        )
        self._picker = picker
        picker.open()
        return picker

    def show_poly_bubble(self, options: BubbleOptions | None = None) -> WidgetHandle:
        """Show the button that opens the language picker."""
        surface = self._require_surface()
        options = options or BubbleOptions()
        if options.icon_size is None:
            options = replace(options, icon_size=self._icon_resolution)
        size = options.icon_size or self._icon_resolution
        x, y = bubble_position(surface.screen, options, size)
        self.hide_poly_bubble()
        self._bubble = surface.create_button(
            ButtonSpec(
                x=x,
                y=y,
                w=size,
                h=size,
                normal_src=self._icon_normal_path,
                press_src=self._icon_pressed_path,
                on_click=lambda: self.show_lang_picker(restart=options.restart),
            )
        )
        return self._bubble

    def hide_poly_bubble(self) -> None:
        """Remove the language switcher button if shown."""
        bubble, self._bubble = self._bubble, None
        if bubble is None:
            return
        try:
            bubble.remove()
        except Exception as exc:  # noqa: BLE001  # polyglot-mini: widget disposal is best effort | issue:-
            logger.debug("bubble removal failed: %s", exc)


__all__ = ["Polyglot", "SwitchResult", "TranslationEntry", "TranslationLoadError"]
