"""Locale header validation and normalisation helpers.

Spreadsheet headers are typed by people, so the same language shows up as
``en``, ``EN`` or ``En-us`` depending on who created the column.  The helpers
in this module map those spellings onto canonical locale codes used as the
snapshot keys, while remembering the exact header so that write-backs land
in the column the translator created.

``normalize_locale_code``
    Expand a bare language code into a region-qualified locale.

``create_locale_mapping``
    Build the two-way mapping between canonical locales and original
    headers for one worksheet.

``is_valid_locale``
    Predicate separating locale columns from metadata columns such as
    ``notes`` or ``status``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

LANGUAGE_TO_COUNTRY_MAP: Mapping[str, str] = {
    "en": "en-GB",
    "de": "de-DE",
    "fr": "fr-FR",
    "es": "es-ES",
    "it": "it-IT",
    "pt": "pt-PT",
    "pl": "pl-PL",
    "ru": "ru-RU",
    "zh": "zh-CN",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "ar": "ar-SA",
    "hi": "hi-IN",
    "th": "th-TH",
    "vi": "vi-VN",
    "tr": "tr-TR",
    "nl": "nl-NL",
    "sv": "sv-SE",
    "da": "da-DK",
    "no": "no-NO",
    "fi": "fi-FI",
    "cs": "cs-CZ",
    "sk": "sk-SK",
    "hu": "hu-HU",
    "ro": "ro-RO",
    "bg": "bg-BG",
    "hr": "hr-HR",
    "sl": "sl-SI",
    "et": "et-EE",
    "lv": "lv-LV",
    "lt": "lt-LT",
    "el": "el-GR",
    "he": "he-IL",
    "uk": "uk-UA",
    "be": "be-BY",
}

NON_LOCALE_KEYWORDS = frozenset(
    {
        "key",
        "keys",
        "id",
        "identifier",
        "name",
        "title",
        "label",
        "description",
        "comment",
        "comments",
        "note",
        "notes",
        "context",
        "category",
        "type",
        "status",
        "updated",
        "created",
        "modified",
        "version",
        "source",
        "i18n",
        "translation",
        "namespace",
        "section",
    }
)

_LOCALE_PATTERNS = (
    re.compile(r"^[a-z]{2}$"),
    re.compile(r"^[a-z]{2}-[a-z]{2}$"),
    re.compile(r"^[a-z]{2}_[a-z]{2}$"),
    re.compile(r"^[a-z]{2}-[a-z]{2}-[a-z]+$"),
)

_LOCALE_HEADER_RE = re.compile(r"^[a-z]{2}([_-][a-z]{2})?([_-][a-z]+)?$")
_TWO_LETTER_RE = re.compile(r"^[a-z]{2}$")


@dataclass
class LocaleMapping:
    """Two-way mapping between canonical locales and worksheet headers."""

    normalized_locales: List[str] = field(default_factory=list)
    locale_mapping: Dict[str, str] = field(default_factory=dict)
    original_mapping: Dict[str, str] = field(default_factory=dict)

    def merge(self, other: "LocaleMapping") -> None:
        """Fold ``other`` into this mapping; entries seen first are kept."""

        for locale in other.normalized_locales:
            if locale not in self.normalized_locales:
                self.normalized_locales.append(locale)
        for locale, header in other.locale_mapping.items():
            self.locale_mapping.setdefault(locale, header)
        for header, locale in other.original_mapping.items():
            self.original_mapping.setdefault(header, locale)

    def original_header(self, locale: str) -> Optional[str]:
        return get_original_header_for_locale(locale, self.locale_mapping)


def normalize_locale_code(locale):
    """Return ``locale`` expanded to a region-qualified code when possible."""

    if not locale or not isinstance(locale, str):
        return locale

    normalised = locale.strip().lower()
    if "-" in normalised or "_" in normalised:
        return normalised

    with_country = LANGUAGE_TO_COUNTRY_MAP.get(normalised)
    if with_country:
        return with_country

    if _TWO_LETTER_RE.fullmatch(normalised):
        return f"{normalised}-{normalised.upper()}"

    return normalised


def create_locale_mapping(original_headers: Iterable[str], key_column: str) -> LocaleMapping:
    """Build a :class:`LocaleMapping` for the locale-shaped headers of a sheet.

    The key column and headers that do not look like a locale are skipped.
    When two headers normalise to the same locale the first one is kept as
    the write-back target.
    """

    key_lower = (key_column or "").lower()
    mapping = LocaleMapping()

    for header in original_headers:
        if not isinstance(header, str):
            continue
        header_lower = header.lower()
        if header_lower == key_lower:
            continue
        if not _LOCALE_HEADER_RE.fullmatch(header_lower):
            continue

        normalised = normalize_locale_code(header_lower)
        mapping.locale_mapping.setdefault(normalised, header)
        mapping.original_mapping.setdefault(header_lower, normalised)
        if normalised not in mapping.normalized_locales:
            mapping.normalized_locales.append(normalised)

    return mapping


def get_original_header_for_locale(
    normalized_locale: str, locale_mapping: Mapping[str, str]
) -> Optional[str]:
    """Return the worksheet header that produced ``normalized_locale``."""

    result = locale_mapping.get(normalized_locale)
    if result:
        return result

    lowered = normalized_locale.lower()
    result = locale_mapping.get(lowered)
    if result:
        return result

    for key, value in locale_mapping.items():
        if key.lower() == lowered:
            return value
    return None


def get_normalized_locale_for_header(
    original_header: str, original_mapping: Mapping[str, str]
) -> Optional[str]:
    return original_mapping.get(original_header.lower())


def is_valid_locale(value) -> bool:
    """Return ``True`` if ``value`` looks like a locale identifier."""

    if not value or not isinstance(value, str):
        return False

    normalised = value.strip().lower()
    if normalised in NON_LOCALE_KEYWORDS:
        return False
    return any(pattern.fullmatch(normalised) for pattern in _LOCALE_PATTERNS)


def filter_valid_locales(header_row: Sequence[str], key_column: str) -> List[str]:
    """Return the lower-cased locale columns of ``header_row``.

    This is the non-normalising variant; worksheet extraction goes through
    :func:`create_locale_mapping` instead.
    """

    key_lower = (key_column or "").lower()
    return [
        column.lower()
        for column in header_row
        if column.lower() != key_lower and is_valid_locale(column)
    ]


__all__ = [
    "LANGUAGE_TO_COUNTRY_MAP",
    "NON_LOCALE_KEYWORDS",
    "LocaleMapping",
    "create_locale_mapping",
    "filter_valid_locales",
    "get_normalized_locale_for_header",
    "get_original_header_for_locale",
    "is_valid_locale",
    "normalize_locale_code",
]
