"""Writers for the generated locale list, per-locale files and local cache."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Union

from sheet_i18n.data_converter import to_persisted
from sheet_i18n.models import TranslationData

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def write_translation_files(
    translations: TranslationData, locales: Sequence[str], translations_dir: PathLike
) -> List[Path]:
    """Write ``<locale>.json`` for every locale that has content."""

    directory = Path(translations_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for locale in locales:
        sheets = translations.get(locale)
        if not sheets:
            logger.warning('No translations found for locale "%s"', locale)
            continue
        target = directory / f"{locale.lower()}.json"
        _write_json(target, sheets)
        written.append(target)
        logger.info("Successfully wrote translations for %s", locale)
    return written


def write_locales_file(locales: Sequence[str], locales_output_path: PathLike) -> Path:
    """Write the locale list as an ES module exporting ``locales``."""

    path = Path(locales_output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    valid = [locale for locale in locales if locale and locale.strip()]
    path.write_text(
        f"export const locales = {json.dumps(valid)};\nexport default locales;",
        encoding="utf-8",
    )
    logger.info("Successfully wrote locales file with %d locales: %s", len(valid), valid)
    return path


def write_language_data_file(
    translations: TranslationData, locales: Sequence[str], data_json_path: PathLike
) -> Path:
    """Write the aggregate cache in the persisted array form."""

    path = Path(data_json_path)
    _write_json(path, to_persisted(translations, locales))
    logger.info("Successfully updated %s with fresh spreadsheet data", path)
    return path


__all__ = ["write_language_data_file", "write_locales_file", "write_translation_files"]
