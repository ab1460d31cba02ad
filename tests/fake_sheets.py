"""In-memory stand-in for the googleapiclient Sheets v4 service used in tests."""
from __future__ import annotations

import re
from types import SimpleNamespace
from typing import Any, Dict, Iterable, List, Optional, Set

from googleapiclient.errors import HttpError

_CELL_RANGE_RE = re.compile(r"^([A-Z]+)(\d+)(?::([A-Z]+)(\d*))?$")


def make_http_error(status: int = 500, message: str = "boom") -> HttpError:
    resp = SimpleNamespace(status=status, reason=message)
    content = ('{"error": {"message": "%s"}}' % message).encode("utf-8")
    return HttpError(resp, content)


class _FakeRequest:
    def __init__(self, service: "FakeSheetsService", action: str, callback) -> None:
        self._service = service
        self._action = action
        self._callback = callback

    def execute(self):
        if self._action in self._service.fail_on:
            raise make_http_error()
        return self._callback()


class _FakeValues:
    def __init__(self, service: "FakeSheetsService") -> None:
        self._service = service

    def get(self, spreadsheetId: str, range: str, majorDimension: str = "ROWS"):  # noqa: N803 - API compatibility
        return _FakeRequest(self._service, "get", lambda: self._service._handle_get(range))

    def update(self, spreadsheetId: str, range: str, valueInputOption: str, body: Dict[str, Any]):  # noqa: N803
        return _FakeRequest(
            self._service, "update", lambda: self._service._handle_update(range, body)
        )

    def append(  # noqa: N803 - API compatibility
        self,
        spreadsheetId: str,
        range: str,
        valueInputOption: str,
        insertDataOption: str,
        body: Dict[str, Any],
    ):
        return _FakeRequest(
            self._service, "append", lambda: self._service._handle_append(range, body)
        )


class _FakeSpreadsheets:
    def __init__(self, service: "FakeSheetsService") -> None:
        self._service = service

    def get(self, spreadsheetId: str, includeGridData: bool = False):  # noqa: N803 - API compatibility
        return _FakeRequest(self._service, "metadata", self._service._handle_metadata)

    def values(self) -> _FakeValues:
        return _FakeValues(self._service)


class FakeSheetsService:
    """Keep worksheets as lists of rows, header row first."""

    def __init__(self, sheets: Optional[Dict[str, Iterable[List[Any]]]] = None) -> None:
        self.sheets: Dict[str, List[List[Any]]] = {
            title: [list(row) for row in rows] for title, rows in (sheets or {}).items()
        }
        self.requests: List[tuple] = []
        self.fail_on: Set[str] = set()
        self.read_errors: Dict[str, BaseException] = {}

    def spreadsheets(self) -> _FakeSpreadsheets:
        return _FakeSpreadsheets(self)

    def rows_as_dicts(self, title: str) -> List[Dict[str, Any]]:
        header, *rows = self.sheets[title]
        return [
            {name: (row[index] if index < len(row) else "") for index, name in enumerate(header)}
            for row in rows
        ]

    # Internal helpers -------------------------------------------------
    def _handle_metadata(self) -> Dict[str, Any]:
        self.requests.append(("metadata",))
        return {
            "properties": {"title": "Translations"},
            "sheets": [
                {
                    "properties": {
                        "title": title,
                        "sheetId": index,
                        "gridProperties": {"columnCount": self._column_count(title)},
                    }
                }
                for index, title in enumerate(self.sheets)
            ],
        }

    def _handle_get(self, range_spec: str) -> Dict[str, Any]:
        self.requests.append(("get", range_spec))
        title, start, end = self._parse(range_spec)
        if title in self.read_errors:
            raise self.read_errors[title]
        rows = self.sheets.get(title, [])
        window = rows[start - 1 : end] if end else rows[start - 1 :]
        last_column = self._last_column(range_spec)
        values = [self._trim(row[:last_column]) for row in window]
        while values and not values[-1]:
            values.pop()
        return {"range": range_spec, "values": values} if values else {"range": range_spec}

    def _handle_update(self, range_spec: str, body: Dict[str, Any]) -> Dict[str, Any]:
        self.requests.append(("update", range_spec, body))
        title, start, _end = self._parse(range_spec)
        rows = self.sheets.setdefault(title, [])
        for offset, values in enumerate(body.get("values", [])):
            index = start - 1 + offset
            while len(rows) <= index:
                rows.append([])
            rows[index] = list(values)
        return {}

    def _handle_append(self, range_spec: str, body: Dict[str, Any]) -> Dict[str, Any]:
        self.requests.append(("append", range_spec, body))
        title, _start, _end = self._parse(range_spec)
        rows = self.sheets.setdefault(title, [])
        while rows and not self._trim(rows[-1]):
            rows.pop()
        rows.extend(list(values) for values in body.get("values", []))
        return {}

    def _column_count(self, title: str) -> int:
        widest = max((len(row) for row in self.sheets.get(title, [])), default=0)
        return max(26, widest)

    @staticmethod
    def _last_column(range_spec: str) -> Optional[int]:
        match = _CELL_RANGE_RE.match(range_spec.split("!", 1)[1])
        letters = match.group(3) if match else None
        if not letters:
            return None
        index = 0
        for letter in letters:
            index = index * 26 + (ord(letter) - 64)
        return index

    @staticmethod
    def _trim(row: List[Any]) -> List[Any]:
        trimmed = list(row)
        while trimmed and trimmed[-1] in ("", None):
            trimmed.pop()
        return trimmed

    @staticmethod
    def _parse(range_spec: str) -> tuple[str, int, Optional[int]]:
        sheet, cell_range = range_spec.split("!", 1)
        if sheet.startswith("'") and sheet.endswith("'"):
            sheet = sheet[1:-1].replace("''", "'")
        match = _CELL_RANGE_RE.match(cell_range)
        if not match:
            raise ValueError(f"Unsupported range {range_spec!r}")
        start = int(match.group(2))
        end_group = match.group(4)
        end = int(end_group) if end_group else None
        if match.group(3) is None:
            end = start
        return sheet, start, end
