"""Conversion between the runtime snapshot and the persisted array form.

The runtime shape is ``locale -> sheet -> key -> value``.  On disk the same
content is stored sheet first, one record per worksheet::

    [{"home": {"en-GB": {"welcome": "Hi"}, "de-DE": {"welcome": "Hallo"}}}]
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from sheet_i18n.models import PersistedData, TranslationData

logger = logging.getLogger(__name__)


def _sheet_titles(snapshot: Mapping[str, Mapping[str, Any]]) -> List[str]:
    titles: Dict[str, None] = {}
    for sheets in snapshot.values():
        if not sheets:
            continue
        for title in sheets:
            titles.setdefault(title, None)
    return list(titles)


def to_persisted(snapshot: TranslationData, locales: Sequence[str]) -> PersistedData:
    """Return ``snapshot`` restricted to ``locales`` in the persisted form.

    Locales are looked up with their exact casing.  A sheet is written when
    at least one locale holds keys for it; locales with an empty map for that
    sheet are kept as ``{}`` so an untranslated sheet stays visible.
    """

    result: PersistedData = []
    titles = _sheet_titles(snapshot)
    logger.debug("Converting %d sheets to persisted form", len(titles))

    for title in titles:
        per_locale: Dict[str, Dict[str, Any]] = {}
        for locale in locales:
            sheets = snapshot.get(locale)
            if not sheets or title not in sheets:
                continue
            translations = sheets[title] or {}
            per_locale[locale] = dict(translations)

        if any(per_locale.values()):
            result.append({title: per_locale})
        else:
            logger.debug("Sheet %s has no translations for the requested locales", title)

    return result


def from_persisted(records: Any) -> TranslationData:
    """Rebuild a snapshot from the persisted array form.

    Several records may describe the same sheet; their keys are merged.
    """

    if not isinstance(records, list):
        raise ValueError("Persisted translation data must be a JSON array")

    snapshot: TranslationData = {}
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ValueError(f"Record {position} is not an object")
        for title, sheet_data in record.items():
            if not isinstance(sheet_data, Mapping):
                raise ValueError(f"Sheet {title!r} in record {position} is not an object")
            for locale, translations in sheet_data.items():
                if not isinstance(translations, Mapping):
                    raise ValueError(
                        f"Locale {locale!r} of sheet {title!r} is not an object"
                    )
                target = snapshot.setdefault(locale, {}).setdefault(title, {})
                target.update(translations)
    return snapshot


__all__ = ["from_persisted", "to_persisted"]
