"""Detect translations that exist locally but not yet in the spreadsheet."""
from __future__ import annotations

from typing import Mapping

from sheet_i18n.models import TranslationData


def find_changes(local: TranslationData, remote: TranslationData) -> TranslationData:
    """Return the keys of ``local`` whose locale/sheet/key path is missing in ``remote``.

    Only presence is compared.  A key that exists on both sides with
    different values is left alone so remote edits are never overwritten,
    and keys that only exist remotely are ignored.
    """

    changes: TranslationData = {}
    for locale, sheets in local.items():
        if not sheets:
            continue
        remote_sheets = remote.get(locale) or {}
        for title, translations in sheets.items():
            if not translations:
                continue
            remote_keys = remote_sheets.get(title) or {}
            for key, value in translations.items():
                if key in remote_keys:
                    continue
                changes.setdefault(locale, {}).setdefault(title, {})[key] = value
    return changes


def has_changes(changes: Mapping[str, Mapping[str, object]]) -> bool:
    return any(sheets for sheets in changes.values())


__all__ = ["find_changes", "has_changes"]
