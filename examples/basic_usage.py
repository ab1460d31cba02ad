"""Pull two worksheets and print the locales that were found.

Requires ``GOOGLE_CLIENT_EMAIL``, ``GOOGLE_PRIVATE_KEY`` and
``GOOGLE_SPREADSHEET_ID`` in the environment.
"""
from __future__ import annotations

import logging
import sys

from sheet_i18n.google_credentials import CredentialsError, validate_env
from sheet_i18n.logging_config import configure_logging
from sheet_i18n.sheets_document import SheetsClientError
from sheet_i18n.translations import get_spreadsheet_data

SHEET_TITLES = ["Sheet1", "Sheet2"]


def main() -> int:
    configure_logging(logging.INFO)
    try:
        validate_env()
        translations = get_spreadsheet_data(
            SHEET_TITLES,
            {
                "row_limit": 100,
                "wait_seconds": 2,
                "data_json_path": "./languageData.json",
                "locales_output_path": "./locales.ts",
                "translations_output_dir": "./translations",
            },
        )
    except (CredentialsError, SheetsClientError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Found {len(translations)} locales")
    for locale, sheets in translations.items():
        print(f"Locale: {locale}")
        print(f"  Sheets: {', '.join(sheets)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
