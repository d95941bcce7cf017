"""In-memory translation table for the active language."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from polyglot_mini.utils import logger

MISSING_TEXT = '"{key}"\nnot found'


def coerce_table(data: Any) -> dict[str, str]:
    """Return a mapping of string keys to string values.

    Other entries are dropped and their keys logged at DEBUG.
    """
    if not isinstance(data, Mapping):
        return {}
    table: dict[str, str] = {}
    dropped: list[str] = []
    for key, value in data.items():
        if isinstance(key, str) and isinstance(value, str):
            table[key] = value
        else:
            dropped.append(repr(key))
    if dropped:
        logger.debug("dropped non-string translation entries: %s", ", ".join(dropped))
    return table


class TranslationCache:
    """Holds exactly one language's key to text mapping.

    The table is only ever swapped as a whole through :meth:`replace`, so a
    reader never observes a half-loaded language.
    """

    def __init__(self, language: str, table: Mapping[str, str] | None = None) -> None:
        """Start with ``language`` and an optional initial ``table``."""
        self._language = language
        self._table: Mapping[str, str] = MappingProxyType(dict(table or {}))

    @property
    def language(self) -> str:
        """Language code of the cached table."""
        return self._language

    def replace(self, language: str, table: Mapping[str, str]) -> None:
        """Swap in ``table`` for ``language``."""
        self._table = MappingProxyType(dict(table))
        self._language = language

    def get_text(self, key: str) -> str:
        """Return the text for ``key`` or a visible not-found marker."""
        text = self._table.get(key)
        if text is None:
            return MISSING_TEXT.format(key=key)
        return text

    def get_all_texts(self) -> Mapping[str, str]:
        """Return a read-only view of the active table."""
        return self._table

    def __contains__(self, key: object) -> bool:
        """Return whether ``key`` has a text in the active table."""
        return key in self._table


__all__ = ["MISSING_TEXT", "TranslationCache", "coerce_table"]
