"""Decide whether local cache edits must be pushed and push them.

The local cache (``languageData.json``) is only compared with the
spreadsheet when it was modified after the generated per-locale files, that
is, when somebody edited it by hand since the last pull.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from sheet_i18n.changes import find_changes, has_changes
from sheet_i18n.data_converter import from_persisted
from sheet_i18n.locales import LocaleMapping
from sheet_i18n.models import SyncResult, TranslationData
from sheet_i18n.sheets_document import SpreadsheetDocument
from sheet_i18n.spreadsheet_updater import update_spreadsheet_with_local_changes

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def get_file_last_modified(path: PathLike) -> Optional[float]:
    """Return the modification time of ``path`` or ``None`` if it is missing."""

    try:
        return Path(path).stat().st_mtime
    except OSError:
        return None


def is_data_json_newer(data_json_path: PathLike, translations_dir: PathLike) -> bool:
    """Return ``True`` if the cache was modified after every translation file."""

    cache_mtime = get_file_last_modified(data_json_path)
    if cache_mtime is None:
        return False

    directory = Path(translations_dir)
    if not directory.exists():
        return True

    try:
        mtimes = [
            entry.stat().st_mtime
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix == ".json"
        ]
    except OSError as exc:
        logger.warning("Error comparing file modification times: %s", exc)
        return False

    if not mtimes:
        return True
    return cache_mtime > max(mtimes)


def read_data_json(data_json_path: PathLike) -> Optional[TranslationData]:
    """Load the local cache as a snapshot; unreadable files yield ``None``."""

    path = Path(data_json_path)
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return from_persisted(payload)
    except (OSError, ValueError) as exc:
        logger.warning("Error reading or parsing %s: %s", path, exc)
        return None


def handle_bidirectional_sync(
    document: SpreadsheetDocument,
    data_json_path: PathLike,
    translations_dir: PathLike,
    sync_enabled: bool,
    auto_translate: bool,
    spreadsheet_data: TranslationData,
    locale_mapping: Optional[LocaleMapping] = None,
    wait_seconds: float = 0,
) -> SyncResult:
    """Push keys that only exist in the local cache to the spreadsheet.

    ``should_refresh`` is set when the spreadsheet was modified; the caller
    is expected to fetch once more with sync disabled.
    """

    result = SyncResult()
    if not sync_enabled:
        return result
    if not is_data_json_newer(data_json_path, translations_dir):
        return result

    local_data = read_data_json(data_json_path)
    if local_data is None:
        return result

    logger.info("Local %s is newer than translation files. Checking for changes...", data_json_path)
    changes = find_changes(local_data, spreadsheet_data)
    if not has_changes(changes):
        logger.info("No local changes found that need to be synced to the spreadsheet.")
        return result

    logger.info(
        "Found local changes to sync to the spreadsheet:\n%s",
        json.dumps(changes, indent=2, ensure_ascii=False),
    )
    update_spreadsheet_with_local_changes(
        document, changes, wait_seconds, auto_translate, locale_mapping
    )
    result.should_refresh = True
    result.has_changes = True
    return result


__all__ = [
    "get_file_last_modified",
    "handle_bidirectional_sync",
    "is_data_json_newer",
    "read_data_json",
]
