"""Command line interface for inspecting and switching the active language."""

from __future__ import annotations

import argparse
import sys
import typing as t
from pathlib import Path
from typing import Self

from polyglot_mini.config import load_config, settings_from_config
from polyglot_mini.engine import Polyglot
from polyglot_mini.storage import FileStorage
from polyglot_mini.utils import configure_logging

_Handler = t.Callable[[Polyglot, argparse.Namespace], int]


class CliError(RuntimeError):
    """Raised when CLI arguments cannot be processed."""

    @classmethod
    def unsupported_command(cls, command: str) -> Self:
        """Return an error for a command without a handler."""
        return cls(f"unsupported command: {command}")

    @classmethod
    def no_languages(cls) -> Self:
        """Return an error for a storage without translations."""
        return cls("no translation files found")

    @classmethod
    def switch_failed(cls, language: str) -> Self:
        """Return an error for a switch that left the language unchanged."""
        return cls(f"could not switch to {language}")


def main(argv: t.Sequence[str] | None = None) -> int:
    """Parse *argv* and dispatch the requested command."""
    parser = _create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - argparse handles usage exits  # polyglot-mini: delegate help/usage exit codes to argparse | issue:-
        code = exc.code
        return code if isinstance(code, int) else 1

    try:
        handler = _resolve_handler(args.command)
        configure_logging(args.log_level or _config_value("log_level"))
        poly = _build_polyglot(args)
        return handler(poly, args)
    except CliError as exc:
        _write_line(sys.stderr, str(exc))
        return 2
    except Exception as exc:  # pragma: no cover - exercised in integration tests  # polyglot-mini: runtime errors bubble up to stderr for CLI users | issue:-
        _write_line(sys.stderr, f"Error: {exc}")
        return 1


def _resolve_handler(command: str) -> _Handler:
    handlers: dict[str, _Handler] = {
        "languages": _cmd_languages,
        "text": _cmd_text,
        "set": _cmd_set,
        "audit": _cmd_audit,
        "info": _cmd_info,
    }
    try:
        return handlers[command]
    except KeyError as exc:
        raise CliError.unsupported_command(command) from exc


def _config_value(key: str) -> str:
    return str(load_config().get(key) or "")


def _build_polyglot(args: argparse.Namespace) -> Polyglot:
    cfg = load_config()
    if args.app_version:
        cfg["app_version"] = args.app_version
    if args.default_language:
        cfg["default_language"] = args.default_language
    data_dir = Path(args.data_dir or cfg["data_dir"])
    assets_dir = Path(args.assets_dir or cfg["assets_dir"])
    system_language: t.Callable[[], int | None] | None = None
    if args.system_language is not None:
        system_id = args.system_language
        system_language = lambda: system_id  # noqa: E731  # polyglot-mini: fixed provider for scripted runs | issue:-
    return Polyglot(
        FileStorage(data_dir, assets_dir),
        settings_from_config(cfg),
        system_language=system_language,
    )


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polyglot-mini",
        description="Inspect and switch the language of a polyglot-mini app.",
    )
    parser.add_argument("--data-dir", help="Writable storage root.")
    parser.add_argument("--assets-dir", help="Bundled asset root.")
    parser.add_argument("--app-version", help="Version of the running app build.")
    parser.add_argument("--default-language", help="Language used when nothing matches.")
    parser.add_argument(
        "--system-language",
        type=int,
        help="Numeric system language id (defaults to the OS locale).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("languages", help="List supported languages.")

    text_parser = subparsers.add_parser("text", help="Print the text for a key.")
    text_parser.add_argument("key")

    set_parser = subparsers.add_parser("set", help="Switch the active language.")
    set_parser.add_argument("language", help="Language code such as en-US.")
    set_parser.add_argument(
        "--restart",
        action="store_true",
        help="Report that the app must be restarted instead of notifying listeners.",
    )

    audit_parser = subparsers.add_parser(
        "audit",
        help="Show a key's text in every supported language.",
    )
    audit_parser.add_argument("key")

    subparsers.add_parser("info", help="Show the language resolution state.")
    return parser


def _cmd_languages(poly: Polyglot, args: argparse.Namespace) -> int:
    del args
    codes = poly.get_supported_languages()
    if not codes:
        raise CliError.no_languages()
    active = poly.get_language()
    lines = []
    for code in codes:
        marker = "*" if code == active else " "
        name = poly.catalog.display_name(code) or code
        lines.append(f"{marker} {code}  {name}")
    _write_lines(sys.stdout, lines)
    return 0


def _cmd_text(poly: Polyglot, args: argparse.Namespace) -> int:
    _write_line(sys.stdout, poly.get_text(args.key))
    return 0


def _cmd_set(poly: Polyglot, args: argparse.Namespace) -> int:
    if poly.catalog.by_code(args.language) is not None:
        target = args.language
    else:
        target = poly.get_related_lang_code(args.language)
    result = poly.set_language(args.language, restart=args.restart)
    if result.language != target:
        raise CliError.switch_failed(args.language)
    line = result.language
    if result.requires_restart:
        line += " (restart required)"
    _write_line(sys.stdout, line)
    return 0


def _cmd_audit(poly: Polyglot, args: argparse.Namespace) -> int:
    entries = poly.get_available_translations_for_key(args.key)
    _write_lines(sys.stdout, [f"{entry.lang_code}: {entry.text}" for entry in entries])
    return 0


def _cmd_info(poly: Polyglot, args: argparse.Namespace) -> int:
    del args
    lines = [
        f"Language: {poly.get_language()} ({poly.get_lang_display_name() or '-'})",
        f"System language: {poly.get_sys_lang_code() or '-'}",
        f"Default language: {poly.settings.default_language}",
        f"Supported: {', '.join(poly.get_supported_languages()) or '-'}",
        f"Fallback mode: {'yes' if poly.is_using_fallback() else 'no'}",
    ]
    _write_lines(sys.stdout, lines)
    return 0


def _write_line(stream: t.TextIO, text: str) -> None:
    stream.write(f"{text}\n")


def _write_lines(stream: t.TextIO, lines: t.Iterable[str]) -> None:
    collected = list(lines)
    if not collected:
        return
    stream.write("\n".join(collected) + "\n")


__all__ = ["CliError", "main"]
