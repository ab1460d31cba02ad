"""Shared data shapes for translation snapshots and sync results."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from sheet_i18n.locales import LocaleMapping

# locale -> sheet -> key -> value
SheetTranslations = Dict[str, Any]
TranslationData = Dict[str, Dict[str, SheetTranslations]]
PersistedData = List[Dict[str, Dict[str, SheetTranslations]]]


@dataclass
class SheetProcessingResult:
    """Outcome of extracting a single worksheet."""

    translations: TranslationData = field(default_factory=dict)
    locales: List[str] = field(default_factory=list)
    locale_mapping: LocaleMapping = field(default_factory=LocaleMapping)
    success: bool = False


@dataclass
class SyncResult:
    should_refresh: bool = False
    has_changes: bool = False


__all__ = [
    "PersistedData",
    "SheetProcessingResult",
    "SheetTranslations",
    "SyncResult",
    "TranslationData",
]
