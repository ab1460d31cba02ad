"""Push locally added translations back to the spreadsheet.

Keys that already have a row are updated cell by cell; unknown keys are
appended as new rows in small batches.  With auto-translation enabled,
empty locale cells of a new row receive a ``GOOGLETRANSLATE`` formula that
reads the first supplied translation of the same row, for example::

    =GOOGLETRANSLATE(B12; $B$1; D$1)

The source and target language codes are taken from the header cells so the
formula follows whatever spelling the column uses.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sheet_i18n.locales import LocaleMapping, get_original_header_for_locale, is_valid_locale
from sheet_i18n.models import TranslationData
from sheet_i18n.pacing import wait
from sheet_i18n.sheets_document import HEADER_ROW_NUMBER, SpreadsheetDocument, column_letter

logger = logging.getLogger(__name__)

APPEND_BATCH_SIZE = 5


def chunked(sequence: Sequence[Any], max_size: int = APPEND_BATCH_SIZE) -> Iterator[Sequence[Any]]:
    """Yield slices of ``sequence`` containing at most ``max_size`` entries."""

    if max_size <= 0:
        raise ValueError("max_size must be positive")
    for start in range(0, len(sequence), max_size):
        yield sequence[start : start + max_size]


def translate_formula(source_index: int, target_index: int, row_number: int) -> str:
    """Return the translate formula for zero-based column indices and a sheet row."""

    source = column_letter(source_index + 1)
    target = column_letter(target_index + 1)
    return (
        f"=GOOGLETRANSLATE({source}{row_number}; "
        f"${source}${HEADER_ROW_NUMBER}; {target}${HEADER_ROW_NUMBER})"
    )


def _sheet_titles(changes: TranslationData) -> List[str]:
    titles: Dict[str, None] = {}
    for sheets in changes.values():
        for title in sheets or {}:
            titles.setdefault(title, None)
    return list(titles)


def _find_header(headers: Sequence[str], name: str) -> Optional[str]:
    lowered = name.lower()
    for header in headers:
        if header.lower() == lowered:
            return header
    return None


def _resolve_locale_header(
    locale: str, headers: Sequence[str], locale_mapping: Optional[LocaleMapping]
) -> Optional[str]:
    if locale_mapping is not None:
        original = get_original_header_for_locale(locale, locale_mapping.locale_mapping)
        if original:
            header = _find_header(headers, original)
            if header:
                return header
    return _find_header(headers, locale)


def _locale_headers(
    headers: Sequence[str], key_header: str, locale_mapping: Optional[LocaleMapping]
) -> List[str]:
    result: List[str] = []
    for header in headers:
        if not header or header == key_header:
            continue
        lowered = header.lower()
        if locale_mapping is not None and lowered in locale_mapping.original_mapping:
            result.append(header)
        elif is_valid_locale(header):
            result.append(header)
    return result


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _apply_translate_formulas(
    new_rows: Dict[str, Dict[str, Any]],
    sources: Dict[str, List[str]],
    headers: Sequence[str],
    locale_headers: Sequence[str],
    first_row_number: int,
) -> None:
    for position, (key_lower, record) in enumerate(new_rows.items()):
        filled = [
            header for header in sources.get(key_lower) or [] if not _is_blank(record.get(header))
        ]
        if not filled:
            continue
        source_index = headers.index(filled[0])
        row_number = first_row_number + position
        for header in locale_headers:
            if not _is_blank(record.get(header)):
                continue
            record[header] = translate_formula(source_index, headers.index(header), row_number)


def update_spreadsheet_with_local_changes(
    document: SpreadsheetDocument,
    changes: TranslationData,
    wait_seconds: float,
    auto_translate: bool = False,
    locale_mapping: Optional[LocaleMapping] = None,
) -> None:
    """Write ``changes`` to the worksheets of ``document``.

    Sheets are handled one after another.  A failing API call propagates and
    stops the remaining work; nothing already written is rolled back.
    """

    logger.info("Updating spreadsheet with local changes")
    worksheets = document.sheets_by_title()

    for title in _sheet_titles(changes):
        logger.info("Processing sheet: %s", title)
        worksheet = worksheets.get(title)
        if worksheet is None:
            logger.warning('Sheet "%s" not found in the document, cannot update', title)
            continue

        wait(wait_seconds, f"before getting rows for sheet: {title}")
        rows = worksheet.get_rows()
        headers = worksheet.headers
        if not headers:
            logger.warning('No header row found in sheet "%s", cannot update', title)
            continue

        key_header = headers[0]
        existing: Dict[str, int] = {}
        for index, row in enumerate(rows):
            key_value = row.to_dict().get(key_header)
            if key_value not in (None, ""):
                existing[str(key_value).lower()] = index

        new_rows: Dict[str, Dict[str, Any]] = {}
        sources: Dict[str, List[str]] = {}

        for locale, sheets in changes.items():
            translations = (sheets or {}).get(title)
            if not translations:
                continue
            header = _resolve_locale_header(locale, headers, locale_mapping)
            if header is None:
                logger.warning('No column for locale "%s" in sheet "%s", skipping', locale, title)
                continue

            for key, value in translations.items():
                key_lower = str(key).lower()
                position = existing.get(key_lower)
                if position is not None:
                    row = rows[position]
                    row.set(header, value)
                    wait(wait_seconds / 2, f"before updating row {row.row_number}")
                    row.save()
                    continue

                record = new_rows.setdefault(key_lower, {key_header: key})
                record[header] = value
                supplied = sources.setdefault(key_lower, [])
                if header not in supplied:
                    supplied.append(header)

        if new_rows:
            logger.info("Adding %d new keys to sheet %s", len(new_rows), title)
            last_row_number = rows[-1].row_number if rows else HEADER_ROW_NUMBER
            if auto_translate:
                _apply_translate_formulas(
                    new_rows,
                    sources,
                    headers,
                    _locale_headers(headers, key_header, locale_mapping),
                    last_row_number + 1,
                )

            records = list(new_rows.values())
            wait(wait_seconds, f"before adding {len(records)} new rows")
            batches = list(chunked(records, APPEND_BATCH_SIZE))
            for number, batch in enumerate(batches, start=1):
                worksheet.append_rows(batch)
                if number < len(batches):
                    wait(wait_seconds, f"after adding {len(batch)} rows (chunk {number})")

        wait(wait_seconds, f"after updating sheet: {title}")

    logger.info("Finished updating spreadsheet with local changes")


__all__ = [
    "APPEND_BATCH_SIZE",
    "chunked",
    "translate_formula",
    "update_spreadsheet_with_local_changes",
]
