"""Pull, add a key to the local cache by hand, then push it back.

The second pull sees a cache that is newer than the per-locale files, sends
the new key to the spreadsheet and reads the sheets once more.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from sheet_i18n.google_credentials import CredentialsError
from sheet_i18n.logging_config import configure_logging
from sheet_i18n.settings import SyncOptions
from sheet_i18n.sheets_document import SheetsClientError
from sheet_i18n.translations import get_spreadsheet_data

SHEET_TITLES = ["Index"]
OUTPUT_DIR = Path(__file__).resolve().parent / "output"


def _add_test_key(data_json_path: Path) -> None:
    records = json.loads(data_json_path.read_text(encoding="utf-8"))
    sheet_title, locales = next(iter(records[0].items()))
    locale = next(iter(locales))
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    locales[locale][f"test_key_{stamp}"] = f"This is a test value added at {stamp}"
    data_json_path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f'Added test_key_{stamp} to sheet "{sheet_title}" in locale "{locale}"')


def main() -> int:
    configure_logging(logging.INFO)
    options = SyncOptions(
        data_json_path=str(OUTPUT_DIR / "data.json"),
        locales_output_path=str(OUTPUT_DIR / "locales.ts"),
        translations_output_dir=str(OUTPUT_DIR / "translations"),
        sync_local_changes=False,
    )
    try:
        print("Step 1: pulling the spreadsheet")
        get_spreadsheet_data(SHEET_TITLES, options)

        # mtime resolution on some filesystems is one second
        time.sleep(1)
        print("Step 2: editing the local cache")
        _add_test_key(Path(options.data_json_path))

        print("Step 3: pushing local additions")
        options.sync_local_changes = True
        get_spreadsheet_data(SHEET_TITLES, options)
    except (CredentialsError, SheetsClientError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
