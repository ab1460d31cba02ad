"""Keep a Google Sheets translation workbook and local JSON files in sync."""
from __future__ import annotations

__version__ = "1.0.0"
