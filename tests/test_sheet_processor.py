from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fake_sheets import FakeSheetsService
from sheet_i18n.sheet_processor import extract_translations, process_sheet
from sheet_i18n.sheets_document import SpreadsheetDocument


def _worksheet(rows, title: str = "home"):
    service = FakeSheetsService({title: rows})
    document = SpreadsheetDocument("doc-id", service)
    document.load_metadata()
    return service, document.sheets_by_title()[title]


def test_extract_translations_normalises_locales_and_lowercases_keys() -> None:
    rows = [
        {"Key": "Welcome", "en": "Hi", "EN-us": "Howdy", "notes": "greeting"},
        {"Key": "BYE", "en": "Bye", "EN-us": "", "notes": ""},
        {"Key": "", "en": "orphan", "EN-us": "orphan", "notes": ""},
    ]

    result = extract_translations(rows, "home")

    assert result.success is True
    assert result.locales == ["en-GB", "en-us"]
    assert result.translations == {
        "en-GB": {"home": {"welcome": "Hi", "bye": "Bye"}},
        "en-us": {"home": {"welcome": "Howdy"}},
    }
    assert result.locale_mapping.locale_mapping == {"en-GB": "en", "en-us": "EN-us"}


def test_extract_translations_reads_from_first_header_of_duplicate_locale() -> None:
    rows = [{"key": "title", "DE": "Titel", "de": "ignored"}]

    result = extract_translations(rows, "about")

    assert result.translations == {"de-DE": {"about": {"title": "Titel"}}}


def test_extract_translations_without_locale_columns_fails_softly() -> None:
    rows = [{"key": "title", "notes": "x", "status": "done", "id": "1"}]

    result = extract_translations(rows, "about")

    assert result.success is False
    assert result.translations == {}
    assert result.locales == []


def test_extract_translations_without_rows_fails_softly() -> None:
    result = extract_translations([], "empty")

    assert result.success is False


def test_extract_translations_keeps_empty_sheet_map_for_locale_without_values() -> None:
    rows = [{"key": "title", "en": "Title", "fr": ""}]

    result = extract_translations(rows, "about")

    assert result.translations["fr-FR"] == {"about": {}}


def test_process_sheet_respects_row_limit() -> None:
    rows = [["key", "en"]] + [[f"k{index}", f"v{index}"] for index in range(10)]
    service, worksheet = _worksheet(rows)

    result = process_sheet(worksheet, "home", row_limit=3)

    assert result.translations == {"en-GB": {"home": {"k0": "v0", "k1": "v1", "k2": "v2"}}}
    get_requests = [request for request in service.requests if request[0] == "get"]
    assert get_requests[-1][1] == "'home'!A1:Z4"


def test_process_sheet_handles_header_only_sheet() -> None:
    _service, worksheet = _worksheet([["key", "en"]])

    result = process_sheet(worksheet, "home")

    assert result.success is False


def test_process_sheet_downgrades_read_errors() -> None:
    service, worksheet = _worksheet([["key", "en"], ["a", "b"]])
    service.fail_on.add("get")

    result = process_sheet(worksheet, "home")

    assert result.success is False
    assert result.translations == {}


def test_process_sheet_downgrades_transport_errors() -> None:
    service, worksheet = _worksheet([["key", "en"], ["a", "b"]])
    service.read_errors["home"] = ConnectionResetError("reset by peer")

    result = process_sheet(worksheet, "home")

    assert result.success is False
    assert result.translations == {}
