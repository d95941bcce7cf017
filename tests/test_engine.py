from __future__ import annotations

import logging

import pytest

from polyglot_mini.config import POLY_VERSION, PolyglotSettings
from polyglot_mini.engine import ERR_NO_SURFACE, SwitchResult, TranslationEntry

EN_US, ZH_TW, KO_KR, DE_DE = 2, 1, 5, 7


def _config(storage):
    return storage.data["poly_config.json"]


def test_fresh_bootstrap_scans_and_persists(seeded_storage, make_poly):
    poly = make_poly(EN_US)

    assert poly.get_language() == "en-US"
    assert poly.get_text("header") == "Hello from"
    assert poly.get_supported_languages() == ("de-DE", "en-US", "es-ES")
    assert not poly.is_using_fallback()
    assert _config(seeded_storage) == {
        "polyVersion": POLY_VERSION,
        "appVersion": "1.0.0",
        "files": ["de-DE", "en-US", "es-ES"],
        "isUsingFallback": False,
        "sysLangCode": "en-US",
        "language": "en-US",
    }


def test_listing_ignores_non_json_entries(seeded_storage, make_poly):
    seeded_storage.data["polyglot/translations/README.txt"] = "notes"

    poly = make_poly(EN_US)

    assert "README" not in poly.get_supported_languages()
    assert "README.txt" not in poly.get_supported_languages()


def test_version_mismatch_rescans_translations(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {
        "polyVersion": POLY_VERSION,
        "appVersion": "0.9.0",
        "files": ["de-DE"],
        "sysLangCode": "en-US",
        "language": "de-DE",
    }

    poly = make_poly(EN_US)

    assert poly.get_supported_languages() == ("de-DE", "en-US", "es-ES")
    assert poly.get_language() == "de-DE"
    assert _config(seeded_storage)["appVersion"] == "1.0.0"
    assert seeded_storage.listed == ["polyglot/translations"]


def test_stale_poly_version_discards_cached_file_list(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {
        "polyVersion": "1.0.0",
        "appVersion": "1.0.0",
        "files": ["de-DE"],
        "isUsingFallback": True,
        "sysLangCode": "en-US",
        "language": "de-DE",
    }

    poly = make_poly(EN_US)

    assert seeded_storage.listed == ["polyglot/translations"]
    assert poly.get_supported_languages() == ("de-DE", "en-US", "es-ES")
    assert not poly.is_using_fallback()
    assert poly.get_language() == "de-DE"
    saved = _config(seeded_storage)
    assert saved["polyVersion"] == POLY_VERSION == "1.0.2"
    assert saved["files"] == ["de-DE", "en-US", "es-ES"]


def test_matching_versions_reuse_cached_file_list(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {
        "polyVersion": POLY_VERSION,
        "appVersion": "1.0.0",
        "files": ["en-US", "de-DE"],
        "sysLangCode": "en-US",
        "language": "de-DE",
    }

    poly = make_poly(EN_US)

    assert seeded_storage.listed == []
    assert poly.get_supported_languages() == ("en-US", "de-DE")
    assert not poly.is_language_supported("es-ES")
    assert poly.get_language() == "de-DE"


def test_empty_listing_switches_to_bundled_assets(storage, tables, make_poly):
    storage.add_asset_translation("de-DE", tables["de-DE"])
    storage.add_asset_translation("en-US", tables["en-US"])

    poly = make_poly(EN_US)

    assert poly.is_using_fallback()
    # catalog order, not alphabetical
    assert poly.get_supported_languages() == ("en-US", "de-DE")
    assert poly.get_language() == "en-US"
    assert poly.get_text("btn_left") == "Left"
    assert _config(storage)["isUsingFallback"] is True


def test_fallback_language_switch_reads_asset(storage, tables, make_poly):
    storage.add_asset_translation("de-DE", tables["de-DE"])
    storage.add_asset_translation("en-US", tables["en-US"])
    poly = make_poly(EN_US)

    result = poly.set_language("de-DE")

    assert result == SwitchResult("de-DE", changed=True)
    assert poly.get_text("btn_left") == "Links"


def test_unparsable_asset_falls_back_to_default_with_empty_table(
    storage, make_poly, poly_caplog
):
    storage.add_asset_translation("en-US", b"{not json")
    storage.add_asset_translation("de-DE", b"[1, 2, 3]")

    poly = make_poly(DE_DE)

    assert poly.get_language() == "en-US"
    assert dict(poly.get_all_texts()) == {}
    assert poly.get_text("header") == '"header"\nnot found'
    assert "could not load translations for de-DE" in poly_caplog.text


def test_no_translations_anywhere_uses_default(storage, make_poly, poly_caplog):
    poly = make_poly(DE_DE)

    assert poly.get_supported_languages() == ()
    assert poly.is_using_fallback()
    assert poly.get_language() == "en-US"
    assert dict(poly.get_all_texts()) == {}
    assert _config(storage)["files"] == []


def test_changed_system_language_wins_over_saved_choice(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {
        "polyVersion": POLY_VERSION,
        "appVersion": "1.0.0",
        "files": ["de-DE", "en-US", "es-ES"],
        "sysLangCode": "de-DE",
        "language": "es-ES",
    }

    poly = make_poly(EN_US)

    assert poly.get_language() == "en-US"
    assert _config(seeded_storage)["sysLangCode"] == "en-US"


def test_changed_system_language_uses_related_code(storage, make_poly):
    storage.add_translation("zh-CN", {"header": "来自"})
    storage.add_translation("en-US", {"header": "Hello from"})
    storage.data["poly_config.json"] = {"sysLangCode": "en-US", "language": "en-US"}

    poly = make_poly(ZH_TW)

    assert poly.get_language() == "zh-CN"
    assert poly.get_text("header") == "来自"


def test_changed_system_language_without_relation_uses_default(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {"sysLangCode": "de-DE", "language": "de-DE"}

    poly = make_poly(KO_KR)

    assert poly.get_language() == "en-US"


def test_saved_language_kept_when_system_unchanged(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {"sysLangCode": "en-US", "language": "es-ES"}

    poly = make_poly(EN_US)

    assert poly.get_language() == "es-ES"


def test_unknown_system_language_uses_default(seeded_storage, make_poly):
    poly = make_poly(None)

    assert poly.get_sys_lang_code() is None
    assert poly.get_sys_lang_name() is None
    assert poly.get_language() == "en-US"


def test_system_language_names(seeded_storage, make_poly):
    poly = make_poly(DE_DE)

    assert poly.get_sys_lang_code() == "de-DE"
    assert poly.get_sys_lang_name() == "German"
    assert poly.get_lang_display_name() == "German"


def test_get_related_lang_code(storage, make_poly):
    storage.add_translation("zh-CN", {"header": "来自"})
    storage.add_translation("en-US", {"header": "Hello from"})
    poly = make_poly(EN_US)

    assert poly.get_related_lang_code("zh-CN") == "zh-CN"
    assert poly.get_related_lang_code("zh-TW") == "zh-CN"
    assert poly.get_related_lang_code("ko-KR") == "en-US"
    assert poly.get_related_lang_code("xx-XX") == "en-US"
    assert poly.get_related_lang_code(None) == "en-US"


def test_set_language_notifies_subscribers_in_order(seeded_storage, make_poly, tables):
    poly = make_poly(EN_US)
    calls: list[tuple[str, str, dict[str, str]]] = []
    poly.on_language_change(lambda code, texts: calls.append(("first", code, dict(texts))))
    poly.on_language_change(lambda code, texts: calls.append(("second", code, dict(texts))))

    result = poly.set_language("de-DE")

    assert result == SwitchResult("de-DE", changed=True, requires_restart=False)
    assert calls == [
        ("first", "de-DE", tables["de-DE"]),
        ("second", "de-DE", tables["de-DE"]),
    ]
    assert poly.get_language() == "de-DE"
    assert poly.get_text("header") == "Hallo von"
    assert _config(seeded_storage)["language"] == "de-DE"
    assert _config(seeded_storage)["sysLangCode"] == "en-US"
    # the rest of the record survives the switch
    assert _config(seeded_storage)["files"] == ["de-DE", "en-US", "es-ES"]


def test_set_language_to_current_is_a_noop(seeded_storage, make_poly):
    poly = make_poly(EN_US)
    calls: list[str] = []
    poly.on_language_change(lambda code, texts: calls.append(code))
    writes = len(seeded_storage.writes)

    result = poly.set_language("en-US")

    assert result == SwitchResult("en-US", changed=False)
    assert calls == []
    assert len(seeded_storage.writes) == writes


def test_set_language_unknown_code_resolves_to_default(seeded_storage, make_poly):
    seeded_storage.data["poly_config.json"] = {"sysLangCode": "en-US", "language": "de-DE"}
    poly = make_poly(EN_US)

    result = poly.set_language("xx-XX")

    assert result.language == "en-US"
    assert result.changed
    assert poly.get_text("header") == "Hello from"


def test_set_language_unknown_code_resolving_to_current_is_a_noop(seeded_storage, make_poly):
    poly = make_poly(EN_US)
    writes = len(seeded_storage.writes)

    result = poly.set_language("xx-XX")

    assert result == SwitchResult("en-US", changed=False)
    assert len(seeded_storage.writes) == writes


def test_set_language_load_failure_leaves_state_unchanged(
    seeded_storage, make_poly, poly_caplog
):
    seeded_storage.add_translation("fr-FR", ["not", "a", "table"])
    poly = make_poly(EN_US)
    calls: list[str] = []
    poly.on_language_change(lambda code, texts: calls.append(code))
    writes = len(seeded_storage.writes)

    result = poly.set_language("fr-FR")

    assert result == SwitchResult("en-US", changed=False)
    assert poly.get_language() == "en-US"
    assert poly.get_text("header") == "Hello from"
    assert calls == []
    assert len(seeded_storage.writes) == writes
    errors = [r for r in poly_caplog.records if r.levelno == logging.ERROR]
    assert errors
    assert "fr-FR" in errors[0].getMessage()


def test_set_language_catalog_code_without_file_fails(seeded_storage, make_poly):
    poly = make_poly(EN_US)

    result = poly.set_language("ja-JP")

    assert not result.changed
    assert poly.get_language() == "en-US"


def test_restart_switch_skips_subscribers(seeded_storage, make_poly):
    poly = make_poly(EN_US)
    notified: list[str] = []
    restarts: list[str] = []
    poly.on_language_change(lambda code, texts: notified.append(code))
    poly.on_restart_required(restarts.append)

    result = poly.set_language("es-ES", restart=True)

    assert result == SwitchResult("es-ES", changed=True, requires_restart=True)
    assert notified == []
    assert restarts == ["es-ES"]
    assert _config(seeded_storage)["language"] == "es-ES"


def test_failing_subscriber_does_not_block_others(seeded_storage, make_poly, poly_caplog):
    poly = make_poly(EN_US)
    seen: list[str] = []

    def broken(code, texts):
        raise RuntimeError("boom")

    poly.on_language_change(broken)
    poly.on_language_change(lambda code, texts: seen.append(code))

    poly.set_language("de-DE")

    assert seen == ["de-DE"]
    assert "subscriber" in poly_caplog.text


def test_get_text_missing_key_marker(seeded_storage, make_poly):
    poly = make_poly(EN_US)

    text = poly.get_text("no_such_key")

    assert "no_such_key" in text
    assert "not found" in text


def test_get_all_texts_is_read_only(seeded_storage, make_poly):
    poly = make_poly(EN_US)
    texts = poly.get_all_texts()

    with pytest.raises(TypeError):
        texts["header"] = "changed"  # type: ignore[index]


def test_available_translations_for_key(seeded_storage, make_poly):
    seeded_storage.add_translation("fr-FR", "broken")
    seeded_storage.data["poly_config.json"] = {}
    poly = make_poly(EN_US)

    assert poly.get_available_translations_for_key("btn_left") == [
        TranslationEntry("de-DE", "Links"),
        TranslationEntry("en-US", "Left"),
    ]
    assert poly.get_available_translations_for_key("missing") == []


def test_picker_requires_surface(seeded_storage, make_poly):
    poly = make_poly(EN_US, surface=None)

    with pytest.raises(RuntimeError, match=ERR_NO_SURFACE):
        poly.show_lang_picker()
    with pytest.raises(RuntimeError, match=ERR_NO_SURFACE):
        poly.show_poly_bubble()


def test_bubble_click_without_languages_shows_nothing(storage, make_poly, surface, poly_caplog):
    poly = make_poly(DE_DE)
    poly.show_poly_bubble()

    assert poly.show_lang_picker() is None
    surface.buttons[0].spec.on_click()

    assert surface.pickers == []
    assert surface.gesture_registrations == 0
    assert "no supported languages" in poly_caplog.text


def test_picker_selection_switches_language(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)
    notified: list[str] = []
    poly.on_language_change(lambda code, texts: notified.append(code))

    picker = poly.show_lang_picker()
    spec = surface.pickers[0].spec

    assert spec.items == ("German", "Spanish", "English")
    assert spec.selected_index == 2
    spec.on_press(0)

    assert notified == ["de-DE"]
    assert not picker.is_open
    assert surface.pickers[0].removed == 1
    assert surface.gesture_releases == 1


def test_picker_with_restart_requests_restart(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)
    restarts: list[str] = []
    poly.on_restart_required(restarts.append)

    poly.show_lang_picker(restart=True)
    surface.pickers[0].spec.on_press(1)

    assert restarts == ["es-ES"]


def test_reopening_picker_closes_previous(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)

    first = poly.show_lang_picker()
    second = poly.show_lang_picker()

    assert not first.is_open
    assert second.is_open
    assert surface.pickers[0].removed == 1
    assert surface.gesture_registrations == 2
    assert surface.gesture_releases == 1


def test_bubble_opens_picker_and_hides_once(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)

    handle = poly.show_poly_bubble()
    button = surface.buttons[0].spec

    assert (button.w, button.h) == (64, 64)
    assert button.normal_src == "raw/polyglot/poly-selector.png"
    button.on_click()
    assert len(surface.pickers) == 1

    poly.hide_poly_bubble()
    poly.hide_poly_bubble()
    assert handle.removed == 1


def test_show_bubble_replaces_previous_bubble(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)

    poly.show_poly_bubble()
    poly.show_poly_bubble()

    assert [b.removed for b in surface.buttons] == [1, 0]


def test_icon_resolution_from_bundled_image(seeded_storage, make_poly, make_png, surface):
    seeded_storage.assets["raw/polyglot/poly-selector.png"] = make_png(48)

    poly = make_poly(EN_US)
    poly.show_poly_bubble()

    assert poly.get_icon_resolution() == 48
    assert surface.buttons[0].spec.w == 48


def test_set_icon_path_changes_bubble_sources(seeded_storage, make_poly, surface):
    poly = make_poly(EN_US)

    poly.set_icon_path("icons/a.png", "icons/a-press.png")
    poly.show_poly_bubble()

    spec = surface.buttons[0].spec
    assert (spec.normal_src, spec.press_src) == ("icons/a.png", "icons/a-press.png")


def test_custom_default_language(seeded_storage, make_poly):
    settings = PolyglotSettings(app_version="1.0.0", default_language="es-ES")

    poly = make_poly(KO_KR, settings=settings)

    assert poly.get_language() == "es-ES"
    assert poly.get_related_lang_code("ja-JP") == "es-ES"
