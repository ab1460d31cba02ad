"""Extraction of per-locale translations from a single worksheet."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from sheet_i18n.locales import create_locale_mapping, is_valid_locale
from sheet_i18n.models import SheetProcessingResult, TranslationData
from sheet_i18n.pacing import wait
from sheet_i18n.settings import DEFAULT_ROW_LIMIT
from sheet_i18n.sheets_document import SheetsClientError, Worksheet

logger = logging.getLogger(__name__)


def _find_field(row: Mapping[str, Any], header_lower: str) -> Optional[str]:
    for field in row:
        if str(field).lower() == header_lower:
            return field
    return None


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def extract_translations(rows: Sequence[Mapping[str, Any]], sheet_title: str) -> SheetProcessingResult:
    """Build ``{locale: {sheet_title: {key: value}}}`` from header-keyed rows.

    The first header is the key column.  Locale columns are resolved through
    :func:`create_locale_mapping`, so ``en`` and ``EN`` share one canonical
    locale and values are read from the first column that produced it.
    """

    result = SheetProcessingResult()
    if not rows:
        logger.warning('No rows found in sheet "%s"', sheet_title)
        return result

    original_headers = [str(header) for header in rows[0].keys()]
    if not original_headers:
        logger.warning('No header row found in sheet "%s"', sheet_title)
        return result

    header_row = [header.lower() for header in original_headers]
    logger.debug('Header row for sheet "%s": %s', sheet_title, header_row)
    key_column = header_row[0]

    candidates = [
        header
        for header in original_headers
        if header.lower() != key_column and is_valid_locale(header)
    ]
    mapping = create_locale_mapping(candidates, key_column)
    if not mapping.normalized_locales:
        logger.warning('No valid locale columns found in sheet "%s"', sheet_title)
        return result

    translations: TranslationData = {}
    for locale in mapping.normalized_locales:
        header = mapping.original_header(locale)
        if not header:
            logger.warning('No header found for locale "%s" in sheet "%s"', locale, sheet_title)
            continue
        header_lower = header.lower()

        sheet_values: Dict[str, Any] = {}
        for row in rows:
            key_field = _find_field(row, key_column)
            locale_field = _find_field(row, header_lower)
            if key_field is None or locale_field is None:
                continue
            key = row[key_field]
            value = row[locale_field]
            if _is_blank(key) or _is_blank(value):
                continue
            sheet_values[str(key).lower()] = value

        translations.setdefault(locale, {}).setdefault(sheet_title, {}).update(sheet_values)

    result.translations = translations
    result.locales = list(mapping.normalized_locales)
    result.locale_mapping = mapping
    result.success = True
    return result


def process_sheet(
    worksheet: Worksheet,
    sheet_title: str,
    row_limit: int = DEFAULT_ROW_LIMIT,
    wait_seconds: float = 0,
) -> SheetProcessingResult:
    """Fetch up to ``row_limit`` rows of ``worksheet`` and extract them.

    Read failures are logged and reported as an unsuccessful result so the
    other sheets of the same fetch are unaffected.
    """

    try:
        rows = worksheet.get_rows(limit=row_limit)
    except SheetsClientError:
        logger.exception('Error processing sheet "%s"', sheet_title)
        return SheetProcessingResult()

    result = extract_translations([row.to_dict() for row in rows], sheet_title)
    if result.success:
        wait(wait_seconds, f"after processing sheet: {sheet_title}")
    return result


__all__ = ["extract_translations", "process_sheet"]
