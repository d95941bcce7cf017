#!/usr/bin/env python3
"""Validate translation JSON files for structure and completeness.

Checks:
- JSON parses and is a flat object mapping string keys to string texts
- file names are language codes known to the catalog
- all translation files share identical key sets
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from polyglot_mini.catalog import LanguageCatalog

ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS = ROOT / "src" / "polyglot_mini" / "assets" / "raw" / "polyglot" / "translations"

ERR_PARSE = "{path} is not valid JSON: {error}"
ERR_OBJECT = "{path} must be an object"
ERR_KEY = "{path} key {key!r} must be a non-empty string"
ERR_STRING = "{path} key '{key}' must map to string"


class TranslationFileError(ValueError):
    """Raised when a translation file is malformed."""


def load_translation(path: Path) -> dict[str, str]:
    """Load and validate a single translation file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TranslationFileError(ERR_PARSE.format(path=path, error=exc)) from exc
    if not isinstance(data, dict):
        raise TranslationFileError(ERR_OBJECT.format(path=path))
    for key, val in data.items():
        if not key.strip():
            raise TranslationFileError(ERR_KEY.format(path=path, key=key))
        if not isinstance(val, str):
            raise TranslationFileError(ERR_STRING.format(path=path, key=key))
    return data


def _load_all(directory: Path) -> tuple[dict[str, dict[str, str]], bool]:
    """Return the valid tables by language code and whether all files loaded."""
    tables: dict[str, dict[str, str]] = {}
    ok = True
    for path in sorted(directory.glob("*.json")):
        try:
            tables[path.stem] = load_translation(path)
        except (OSError, UnicodeDecodeError, TranslationFileError) as exc:
            logging.error("%s", exc)
            ok = False
    return tables, ok


def _validate_codes(tables: dict[str, dict[str, str]], catalog: LanguageCatalog) -> bool:
    """Ensure each file name is a catalog language code."""
    unknown = sorted(code for code in tables if catalog.by_code(code) is None)
    for code in unknown:
        logging.error("%s.json is not named after a known language code", code)
    return not unknown


def _validate_key_sets(tables: dict[str, dict[str, str]]) -> bool:
    """Ensure every table has the key set of the first one."""
    ok = True
    base_lang, base_table = next(iter(tables.items()))
    base_keys = set(base_table)
    for lang, table in tables.items():
        if lang == base_lang:
            continue
        keys = set(table)
        missing = sorted(base_keys - keys)
        extra = sorted(keys - base_keys)
        if missing:
            logging.error("%s.json missing keys: %s", lang, missing)
            ok = False
        if extra:
            logging.error("%s.json has extra keys: %s", lang, extra)
            ok = False
    return ok


def main(argv: Sequence[str] | None = None) -> int:
    """Validate translation files and report issues suitable for CI/pre-commit.

    Returns 0 on success; non-zero on validation error.
    """
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("directory", nargs="?", type=Path, default=TRANSLATIONS)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    tables, ok = _load_all(args.directory)
    if not tables:
        logging.error("no translations found in %s", args.directory)
        return 1
    if not _validate_codes(tables, LanguageCatalog()):
        ok = False
    if not _validate_key_sets(tables):
        ok = False
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
