"""Push new keys with ``GOOGLETRANSLATE`` formulas for missing locales.

Keys that exist only in ``languageData.json`` are appended to the sheet; any
locale column left empty for such a key receives a formula that translates
the first supplied value of the row.
"""
from __future__ import annotations

import logging
import sys

from sheet_i18n.google_credentials import CredentialsError
from sheet_i18n.logging_config import configure_logging
from sheet_i18n.settings import SettingsError, load_settings
from sheet_i18n.sheets_document import SheetsClientError
from sheet_i18n.translations import get_spreadsheet_data


def main() -> int:
    configure_logging(logging.DEBUG)
    try:
        options = load_settings(
            "sheet-i18n.json", {"auto_translate": True, "sync_local_changes": True}
        )
        translations = get_spreadsheet_data(["Index"], options)
    except (CredentialsError, SettingsError, SheetsClientError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for locale, sheets in translations.items():
        print(f"{locale}: {sum(len(keys) for keys in sheets.values())} keys")
    return 0


if __name__ == "__main__":
    sys.exit(main())
