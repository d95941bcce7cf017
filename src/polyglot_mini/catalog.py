"""Static language catalog and relatability table.

The numeric ids follow the system language list of the watch platform, so a
system language reported as ``2`` means ``en-US``.
"""

from __future__ import annotations

import locale
from collections.abc import Iterable, Iterator, Mapping
from contextlib import suppress
from dataclasses import dataclass
from types import MappingProxyType

_LC_MESSAGES: int = getattr(locale, "LC_MESSAGES", locale.LC_CTYPE)

ERR_DUPLICATE_ID = "duplicate language id: {numeric_id}"
ERR_DUPLICATE_CODE = "duplicate language code: {code}"


@dataclass(frozen=True)
class LanguageEntry:
    """A catalog row."""

    numeric_id: int
    code: str
    display_name: str


_LANGUAGE_TABLE: tuple[tuple[int, str, str], ...] = (
    (0, "zh-CN", "Chinese"),
    (1, "zh-TW", "Taiwanese"),
    (2, "en-US", "English"),
    (3, "es-ES", "Spanish"),
    (4, "ru-RU", "Russian"),
    (5, "ko-KR", "Korean"),
    (6, "fr-FR", "French"),
    (7, "de-DE", "German"),
    (8, "id-ID", "Indonesian"),
    (9, "pl-PL", "Polish"),
    (10, "it-IT", "Italian"),
    (11, "ja-JP", "Japanese"),
    (12, "th-TH", "Thai"),
    (13, "ar-EG", "Arabic"),
    (14, "vi-VN", "Vietnamese"),
    (15, "pt-PT", "Portuguese"),
    (16, "nl-NL", "Dutch"),
    (17, "tr-TR", "Turkish"),
    (18, "uk-UA", "Ukrainian"),
    (19, "iw-IL", "Hebrew"),
    (20, "pt-BR", "Portuguese"),
    (21, "ro-RO", "Romanian"),
    (22, "cs-CZ", "Czech"),
    (23, "el-GR", "Greek"),
    (24, "sr-RS", "Serbian"),
    (25, "ca-ES", "Catalan"),
    (26, "fi-FI", "Finnish"),
    (27, "nb-NO", "Norwegian"),
    (28, "da-DK", "Danish"),
    (29, "sv-SE", "Swedish"),
    (30, "hu-HU", "Hungarian"),
    (31, "ms-MY", "Malay"),
    (32, "sk-SK", "Slovak"),
    (33, "hi-IN", "Hindi"),
)

LANGUAGES: tuple[LanguageEntry, ...] = tuple(
    LanguageEntry(*row) for row in _LANGUAGE_TABLE
)

# unsupported id -> nearest supported id; one-directional entries are intended
RELATABILITY: Mapping[int, int] = MappingProxyType(
    {
        0: 1,  # zh-CN -> zh-TW
        1: 0,  # zh-TW -> zh-CN
        15: 20,  # pt-PT -> pt-BR
        20: 15,  # pt-BR -> pt-PT
        18: 4,  # uk-UA -> ru-RU
    }
)


class LanguageCatalog:
    """Lookup over :class:`LanguageEntry` rows and the relatability map."""

    def __init__(
        self,
        entries: Iterable[LanguageEntry] = LANGUAGES,
        relatability: Mapping[int, int] = RELATABILITY,
    ) -> None:
        """Index ``entries``; duplicate ids or codes raise ``ValueError``."""
        self._entries: tuple[LanguageEntry, ...] = tuple(entries)
        self._by_id: dict[int, LanguageEntry] = {}
        self._by_code: dict[str, LanguageEntry] = {}
        for entry in self._entries:
            if entry.numeric_id in self._by_id:
                raise ValueError(ERR_DUPLICATE_ID.format(numeric_id=entry.numeric_id))
            if entry.code in self._by_code:
                raise ValueError(ERR_DUPLICATE_CODE.format(code=entry.code))
            self._by_id[entry.numeric_id] = entry
            self._by_code[entry.code] = entry
        self.relatability: Mapping[int, int] = MappingProxyType(dict(relatability))

    @classmethod
    def from_mapping(
        cls,
        table: Mapping[int, tuple[str, str]],
        relatability: Mapping[int, int] | None = None,
    ) -> LanguageCatalog:
        """Build a catalog from ``{id: (code, display_name)}``."""
        entries = [
            LanguageEntry(numeric_id, code, name)
            for numeric_id, (code, name) in table.items()
        ]
        return cls(entries, relatability or {})

    def __iter__(self) -> Iterator[LanguageEntry]:
        """Iterate entries in catalog order."""
        return iter(self._entries)

    def __len__(self) -> int:
        """Number of catalog entries."""
        return len(self._entries)

    def by_id(self, numeric_id: int | None) -> LanguageEntry | None:
        """Return the entry with ``numeric_id`` or ``None``."""
        if numeric_id is None:
            return None
        return self._by_id.get(numeric_id)

    def by_code(self, code: str | None) -> LanguageEntry | None:
        """Return the entry with ``code`` or ``None``."""
        if not code:
            return None
        return self._by_code.get(code)

    def codes(self) -> tuple[str, ...]:
        """Return every catalog code in table order."""
        return tuple(entry.code for entry in self._entries)

    def display_name(self, code: str | None) -> str | None:
        """Return the display name for ``code`` or ``None``."""
        entry = self.by_code(code)
        return entry.display_name if entry else None

    def related_code(self, code: str | None) -> str | None:
        """Return the relatability target of ``code`` or ``None``.

        Only the literal table is consulted; no reverse lookup is attempted.
        """
        entry = self.by_code(code)
        if entry is None:
            return None
        target = self.relatability.get(entry.numeric_id)
        related = self.by_id(target)
        return related.code if related else None

    def match_locale(self, name: str | None) -> LanguageEntry | None:
        """Return the entry for a POSIX style locale name like ``de_DE.UTF-8``.

        An exact region match wins; otherwise the first entry sharing the
        language part is returned.
        """
        if not name:
            return None
        base = name.split(".", 1)[0].split("@", 1)[0].replace("_", "-")
        if not base:
            return None
        lang, _sep, region = base.partition("-")
        lang = lang.lower()
        if region:
            exact = self.by_code(f"{lang}-{region.upper()}")
            if exact is not None:
                return exact
        for entry in self._entries:
            if entry.code.split("-", 1)[0].lower() == lang:
                return entry
        return None


def detect_system_language_id(catalog: LanguageCatalog | None = None) -> int | None:
    """Return the catalog id inferred from the OS locale, or ``None``."""
    catalog = catalog or LanguageCatalog()
    name = ""
    with suppress(Exception):
        name = locale.getlocale(_LC_MESSAGES)[0] or ""
    if not name:
        with suppress(Exception):
            name = locale.getlocale(locale.LC_CTYPE)[0] or ""
    entry = catalog.match_locale(name)
    return entry.numeric_id if entry else None


__all__ = [
    "LANGUAGES",
    "RELATABILITY",
    "LanguageCatalog",
    "LanguageEntry",
    "detect_system_language_id",
]
