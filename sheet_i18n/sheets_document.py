"""Google Sheets document adapter used by the translation sync.

This module centralises all direct interactions with the Google Sheets API.
It exposes a row-oriented surface that the rest of the package relies on
without needing to know about A1 notation or googleapiclient internals:

* :class:`SpreadsheetDocument` loads the worksheet list of a spreadsheet and
  hands out :class:`Worksheet` objects by title.
* :class:`Worksheet` reads rows below the header row, appends new rows and
  writes single rows back.
* :class:`SheetRow` is a mutable view of one data row keyed by the original
  header spelling.

All public entry points raise subclasses of :class:`SheetsClientError`, so
callers have a single failure type to handle.  That includes API error
responses as well as socket, ``httplib2`` and token refresh failures.  HTTP
calls are serialised through a lock because the underlying transport is not
thread-safe, which lets several worksheets be fetched from worker threads.

Read ranges span the column count reported by the worksheet metadata, so
wide sheets are read in full.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Dict, List, Mapping, MutableSequence, Optional, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheet_i18n.google_credentials import GoogleEnvironment, create_credentials

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_COUNT = 52
HEADER_ROW_NUMBER = 1

# Transport and auth failures surface as these instead of HttpError.
_TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error, GoogleAuthError)


class SheetsClientError(RuntimeError):
    """Base error raised for Sheets API failures."""


class SheetsApiResponseError(SheetsClientError):
    """Raised when the Google API returns an error response."""


def column_letter(index: int) -> str:
    """Return the spreadsheet column letter for a 1-indexed column index."""

    if index < 1:
        raise ValueError("Column index must be >= 1")
    letters: MutableSequence[str] = []
    while index:
        index, remainder = divmod(index - 1, 26)
        letters.append(chr(65 + remainder))
    return "".join(reversed(letters))


def quote_title(title: str) -> str:
    """Return a worksheet title quoted according to A1 notation rules."""

    safe = (title or "").strip()
    if not safe:
        raise SheetsClientError("Worksheet title must not be empty.")
    safe = safe.replace("'", "''")
    return f"'{safe}'"


def a1_range(title: str, range_spec: str) -> str:
    return f"{quote_title(title)}!{range_spec}"


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value, ensure_ascii=False)


class SheetRow:
    """A data row of a worksheet, addressed by its 1-based sheet row number."""

    def __init__(self, worksheet: "Worksheet", row_number: int, values: Sequence[Any]) -> None:
        self._worksheet = worksheet
        self._row_number = row_number
        self._values: List[Any] = list(values)

    @property
    def row_number(self) -> int:
        return self._row_number

    def to_dict(self) -> Dict[str, Any]:
        """Return the row as ``{original header: cell value}``."""

        result: Dict[str, Any] = {}
        for index, header in enumerate(self._worksheet.headers):
            if not header:
                continue
            result[header] = self._values[index] if index < len(self._values) else ""
        return result

    def get(self, header: str, default: Any = None) -> Any:
        return self.to_dict().get(header, default)

    def set(self, header: str, value: Any) -> None:
        index = self._worksheet.header_index(header)
        if index is None:
            raise KeyError(f"Unknown header {header!r} in sheet {self._worksheet.title!r}")
        while len(self._values) <= index:
            self._values.append("")
        self._values[index] = value

    def save(self) -> None:
        self._worksheet._write_row(self._row_number, self._values)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"SheetRow({self._worksheet.title!r}, {self._row_number}, {self._values!r})"


class Worksheet:
    """A single tab of a :class:`SpreadsheetDocument`."""

    def __init__(
        self,
        document: "SpreadsheetDocument",
        title: str,
        sheet_id: Optional[int] = None,
        *,
        column_count: int = DEFAULT_COLUMN_COUNT,
    ) -> None:
        self._document = document
        self.title = title
        self.sheet_id = sheet_id
        self._column_count = max(1, column_count)
        self._headers: Optional[List[str]] = None

    @property
    def last_column(self) -> str:
        return column_letter(self._column_count)

    @property
    def headers(self) -> List[str]:
        if self._headers is None:
            self.load_header_row()
        return list(self._headers or [])

    def header_index(self, header: str) -> Optional[int]:
        headers = self.headers
        if header in headers:
            return headers.index(header)
        return None

    def load_header_row(self) -> List[str]:
        range_spec = a1_range(
            self.title, f"A{HEADER_ROW_NUMBER}:{self.last_column}{HEADER_ROW_NUMBER}"
        )
        values = self._document._get_values(range_spec)
        self._headers = [str(cell).strip() for cell in values[0]] if values else []
        return list(self._headers)

    def get_rows(self, limit: Optional[int] = None) -> List[SheetRow]:
        """Return up to ``limit`` data rows (all rows when ``limit`` is ``None``)."""

        if limit is not None and limit < 1:
            return []
        end_row = "" if limit is None else str(HEADER_ROW_NUMBER + limit)
        range_spec = a1_range(self.title, f"A{HEADER_ROW_NUMBER}:{self.last_column}{end_row}")
        values = self._document._get_values(range_spec)
        if not values:
            self._headers = []
            return []

        self._headers = [str(cell).strip() for cell in values[0]]
        rows: List[SheetRow] = []
        for offset, raw in enumerate(values[1:], start=1):
            rows.append(SheetRow(self, HEADER_ROW_NUMBER + offset, raw))
        return rows

    def append_rows(self, records: Sequence[Mapping[str, Any]]) -> None:
        """Append ``records`` below the last row, matching keys to headers."""

        if not records:
            return
        headers = self.headers
        if not headers:
            raise SheetsClientError(f"Sheet {self.title!r} has no header row.")

        matrix: List[List[Any]] = []
        for record in records:
            lowered = {str(key).lower(): value for key, value in record.items()}
            row: List[Any] = []
            for header in headers:
                if header in record:
                    value = record[header]
                else:
                    value = lowered.get(header.lower(), "") if header else ""
                row.append(_cell_value(value))
            matrix.append(row)

        self._document._append_values(a1_range(self.title, "A1"), matrix)
        logger.info("Appended %d rows to sheet %s", len(matrix), self.title)

    def _write_row(self, row_number: int, values: Sequence[Any]) -> None:
        end = column_letter(max(1, len(values)))
        range_spec = a1_range(self.title, f"A{row_number}:{end}{row_number}")
        self._document._update_values(range_spec, [[_cell_value(value) for value in values]])


class SpreadsheetDocument:
    """Concrete helper that speaks to Google Sheets using the REST API."""

    def __init__(self, spreadsheet_id: str, service, *, column_count: int = DEFAULT_COLUMN_COUNT) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._service = service
        self._column_count = column_count
        self._lock = threading.Lock()
        self._worksheets: Dict[str, Worksheet] = {}
        self.title: str = ""

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load_metadata(self) -> None:
        """Fetch the spreadsheet title and its worksheet list."""

        request = self._service.spreadsheets().get(
            spreadsheetId=self._spreadsheet_id,
            includeGridData=False,
        )
        metadata = self._execute(request, "spreadsheets.get")
        properties = metadata.get("properties", {}) if isinstance(metadata, Mapping) else {}
        self.title = str(properties.get("title", "")) if isinstance(properties, Mapping) else ""

        worksheets: Dict[str, Worksheet] = {}
        for sheet in metadata.get("sheets", []) if isinstance(metadata, Mapping) else []:
            props = sheet.get("properties", {}) if isinstance(sheet, Mapping) else {}
            title = props.get("title")
            if not isinstance(title, str):
                continue
            sheet_id = props.get("sheetId")
            grid = props.get("gridProperties") or {}
            column_count = grid.get("columnCount") if isinstance(grid, Mapping) else None
            if not isinstance(column_count, int):
                column_count = self._column_count
            worksheets[title] = Worksheet(
                self,
                title,
                sheet_id if isinstance(sheet_id, int) else None,
                column_count=column_count,
            )
        self._worksheets = worksheets
        logger.debug("Loaded %d worksheets from %s", len(worksheets), self._spreadsheet_id)

    def sheets_by_title(self) -> Dict[str, Worksheet]:
        return dict(self._worksheets)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _execute(self, request, description: str) -> Dict[str, Any]:
        with self._lock:
            try:
                return request.execute()
            except HttpError as exc:
                raise SheetsApiResponseError(f"Sheets {description} failed: {exc}") from exc
            except _TRANSPORT_ERRORS as exc:
                raise SheetsApiResponseError(
                    f"Sheets {description} failed: {type(exc).__name__}: {exc}"
                ) from exc

    def _get_values(self, range_spec: str) -> List[List[Any]]:
        request = self._service.spreadsheets().values().get(
            spreadsheetId=self._spreadsheet_id,
            range=range_spec,
            majorDimension="ROWS",
        )
        result = self._execute(request, "values.get")
        values = result.get("values", []) if isinstance(result, Mapping) else []
        return [list(row) for row in values]

    def _update_values(self, range_spec: str, values: List[List[Any]]) -> None:
        request = self._service.spreadsheets().values().update(
            spreadsheetId=self._spreadsheet_id,
            range=range_spec,
            valueInputOption="USER_ENTERED",
            body={"values": values},
        )
        self._execute(request, "values.update")

    def _append_values(self, range_spec: str, values: List[List[Any]]) -> None:
        request = self._service.spreadsheets().values().append(
            spreadsheetId=self._spreadsheet_id,
            range=range_spec,
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": values},
        )
        self._execute(request, "values.append")


def build_document(env: GoogleEnvironment) -> SpreadsheetDocument:
    """Factory helper that authenticates and returns a document adapter."""

    credentials = create_credentials(env)
    try:
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
    except Exception as exc:  # pragma: no cover - HTTP / auth error guard
        raise SheetsApiResponseError(str(exc)) from exc
    return SpreadsheetDocument(env.spreadsheet_id, service)


__all__ = [
    "DEFAULT_COLUMN_COUNT",
    "SheetRow",
    "SheetsApiResponseError",
    "SheetsClientError",
    "SpreadsheetDocument",
    "Worksheet",
    "a1_range",
    "build_document",
    "column_letter",
    "quote_title",
]
