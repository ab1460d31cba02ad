"""Command line helper for pulling and syncing spreadsheet translations."""

from __future__ import annotations

import argparse
import logging
import sys

from sheet_i18n import __version__
from sheet_i18n.google_credentials import CredentialsError, validate_env
from sheet_i18n.logging_config import configure_logging
from sheet_i18n.settings import SettingsError, load_settings
from sheet_i18n.sheets_document import SheetsClientError
from sheet_i18n.translations import get_spreadsheet_data


def command_check(args: argparse.Namespace) -> int:
    try:
        env = validate_env()
    except CredentialsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Service account: {env.client_email}")
    print(f"Spreadsheet    : {env.spreadsheet_id}")
    return 0


def command_pull(args: argparse.Namespace) -> int:
    overrides = {
        "row_limit": args.row_limit,
        "wait_seconds": args.wait_seconds,
        "data_json_path": args.data_json,
        "locales_output_path": args.locales_output,
        "translations_output_dir": args.translations_dir,
        "sync_local_changes": False if args.no_sync else None,
        "auto_translate": True if args.auto_translate else None,
    }
    try:
        options = load_settings(args.settings, overrides)
        translations = get_spreadsheet_data(args.sheets, options)
    except (CredentialsError, SettingsError, SheetsClientError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    key_count = sum(
        len(keys) for sheets in translations.values() for keys in sheets.values()
    )
    print(f"Pulled {len(translations)} locales ({key_count} translations).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Google Sheets translation sync tool")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Write log output to this file instead of stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Validate the Google credentials in the environment")
    check_parser.set_defaults(func=command_check)

    pull_parser = subparsers.add_parser(
        "pull",
        help="Fetch sheets, push local additions and write translation files",
    )
    pull_parser.add_argument("sheets", nargs="+", help="Worksheet titles to process")
    pull_parser.add_argument("--settings", default="sheet-i18n.json", help="JSON settings file")
    pull_parser.add_argument("--row-limit", type=int, help="Maximum rows fetched per sheet")
    pull_parser.add_argument("--wait-seconds", type=float, help="Delay between API calls")
    pull_parser.add_argument("--data-json", help="Location of the aggregate translation cache")
    pull_parser.add_argument("--locales-output", help="Location of the generated locales module")
    pull_parser.add_argument("--translations-dir", help="Directory for per-locale JSON files")
    pull_parser.add_argument("--no-sync", action="store_true", help="Do not push local cache additions")
    pull_parser.add_argument(
        "--auto-translate",
        action="store_true",
        help="Fill missing translations of new keys with GOOGLETRANSLATE formulas",
    )
    pull_parser.set_defaults(func=command_pull)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
