"""Top-level fetch, sync and persist cycle for spreadsheet translations."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

from sheet_i18n.file_writer import (
    write_language_data_file,
    write_locales_file,
    write_translation_files,
)
from sheet_i18n.google_credentials import validate_env
from sheet_i18n.locales import LocaleMapping
from sheet_i18n.models import SheetProcessingResult, TranslationData
from sheet_i18n.pacing import wait
from sheet_i18n.settings import SyncOptions, normalize_config
from sheet_i18n.sheet_processor import process_sheet
from sheet_i18n.sheets_document import SpreadsheetDocument, build_document
from sheet_i18n.sync_manager import handle_bidirectional_sync

logger = logging.getLogger(__name__)

MAX_FETCH_WORKERS = 8


class MergedSheets:
    """Snapshot, locale list and locale mapping reduced from sheet results."""

    def __init__(self) -> None:
        self.translations: TranslationData = {}
        self.locales: List[str] = []
        self.locale_mapping = LocaleMapping()
        self.updated = False

    def add(self, result: SheetProcessingResult) -> None:
        if not result.success:
            return
        for locale, sheets in result.translations.items():
            self.translations.setdefault(locale, {}).update(sheets)
        for locale in result.locales:
            if locale not in self.locales:
                self.locales.append(locale)
        self.locale_mapping.merge(result.locale_mapping)
        self.updated = True


def _fetch_sheet(
    document: SpreadsheetDocument, title: str, options: SyncOptions
) -> SheetProcessingResult:
    wait(options.wait_seconds, f"before get cells for sheet: {title}")
    worksheet = document.sheets_by_title().get(title)
    if worksheet is None:
        logger.warning('Sheet "%s" not found in the document', title)
        return SheetProcessingResult()
    return process_sheet(worksheet, title, options.row_limit, options.wait_seconds)


def fetch_sheets(
    document: SpreadsheetDocument, titles: Sequence[str], options: SyncOptions
) -> MergedSheets:
    """Fetch ``titles`` concurrently and merge the results in request order."""

    merged = MergedSheets()
    if not titles:
        return merged

    workers = max(1, min(MAX_FETCH_WORKERS, len(titles)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sheet-fetch") as executor:
        futures = [executor.submit(_fetch_sheet, document, title, options) for title in titles]
        results = [future.result() for future in futures]

    for result in results:
        merged.add(result)
    return merged


def get_spreadsheet_data(
    sheet_titles: Optional[Sequence[str]],
    options: Union[SyncOptions, Mapping[str, Any], None] = None,
    *,
    document: Optional[SpreadsheetDocument] = None,
) -> TranslationData:
    """Fetch ``sheet_titles``, push local cache additions and write the outputs.

    When local additions were pushed the spreadsheet is read once more with
    sync disabled, and that second snapshot is what gets written and
    returned.
    """

    config = normalize_config(options)
    if document is None:
        document = build_document(validate_env())

    document.load_metadata()

    titles = list(dict.fromkeys(sheet_titles or []))
    if not titles:
        logger.warning("No sheet titles provided, cannot process spreadsheet data")
        return {}

    logger.info("Processing %d sheets: %s", len(titles), ", ".join(titles))
    merged = fetch_sheets(document, titles, config)

    sync = handle_bidirectional_sync(
        document,
        config.data_json_path,
        config.translations_output_dir,
        config.sync_local_changes,
        config.auto_translate,
        merged.translations,
        merged.locale_mapping,
        config.wait_seconds,
    )
    if sync.should_refresh:
        logger.info("Refreshing spreadsheet data after pushing local changes")
        return get_spreadsheet_data(
            titles, replace(config, sync_local_changes=False), document=document
        )

    data_json_exists = Path(config.data_json_path).exists()
    if merged.updated or not data_json_exists:
        write_language_data_file(merged.translations, merged.locales, config.data_json_path)
    write_locales_file(merged.locales, config.locales_output_path)
    write_translation_files(merged.translations, merged.locales, config.translations_output_dir)
    return merged.translations


__all__ = ["MergedSheets", "fetch_sheets", "get_spreadsheet_data"]
