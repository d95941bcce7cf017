#!/usr/bin/env python3
"""Format translation JSON files with stable key order and indentation."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS = ROOT / "src" / "polyglot_mini" / "assets" / "raw" / "polyglot" / "translations"


def formatted_text(text: str) -> str:
    """Return ``text`` re-serialised with sorted keys and two-space indentation."""
    data = json.loads(text)
    if isinstance(data, dict):
        data = {key: data[key] for key in sorted(data)}
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def format_file(path: Path, write: bool = True) -> bool:
    """Format a single translation file; return whether its content changes."""
    original = path.read_text(encoding="utf-8")
    formatted = formatted_text(original)
    if formatted == original:
        return False
    if write:
        path.write_text(formatted, encoding="utf-8")
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Format all translation files in the given directory.

    With ``--check`` nothing is written and 1 is returned when a file would
    change.
    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("directory", nargs="?", type=Path, default=TRANSLATIONS)
    parser.add_argument("--check", action="store_true", help="Only report unformatted files.")
    args = parser.parse_args(argv)

    changed = [
        p for p in sorted(args.directory.glob("*.json")) if format_file(p, write=not args.check)
    ]
    for p in changed:
        sys.stdout.write(f"{p.name}\n")
    return 1 if args.check and changed else 0


if __name__ == "__main__":
    raise SystemExit(main())
