"""Configuration helpers for the translation sync."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


DEFAULT_ROW_LIMIT = 100
DEFAULT_WAIT_SECONDS = 1.0
DEFAULT_DATA_JSON_PATH = os.getenv("SHEET_I18N_DATA_JSON", "src/lib/languageData.json")
DEFAULT_LOCALES_OUTPUT_PATH = os.getenv("SHEET_I18N_LOCALES_OUTPUT", "src/i18n/locales.ts")
DEFAULT_TRANSLATIONS_OUTPUT_DIR = os.getenv("SHEET_I18N_TRANSLATIONS_DIR", "translations")

_OPTION_ALIASES: Mapping[str, str] = {
    "rowLimit": "row_limit",
    "waitSeconds": "wait_seconds",
    "dataJsonPath": "data_json_path",
    "localesOutputPath": "locales_output_path",
    "translationsOutputDir": "translations_output_dir",
    "syncLocalChanges": "sync_local_changes",
    "autoTranslate": "auto_translate",
}


class SettingsError(Exception):
    """Raised when a settings file cannot be read."""


def _default_data_json_path() -> str:
    return str(Path.cwd() / DEFAULT_DATA_JSON_PATH)


@dataclass
class SyncOptions:
    row_limit: int = DEFAULT_ROW_LIMIT
    wait_seconds: float = DEFAULT_WAIT_SECONDS
    data_json_path: str = field(default_factory=_default_data_json_path)
    locales_output_path: str = DEFAULT_LOCALES_OUTPUT_PATH
    translations_output_dir: str = DEFAULT_TRANSLATIONS_OUTPUT_DIR
    sync_local_changes: bool = True
    auto_translate: bool = False

    def to_json(self) -> Dict[str, object]:
        return {
            "row_limit": self.row_limit,
            "wait_seconds": self.wait_seconds,
            "data_json_path": self.data_json_path,
            "locales_output_path": self.locales_output_path,
            "translations_output_dir": self.translations_output_dir,
            "sync_local_changes": self.sync_local_changes,
            "auto_translate": self.auto_translate,
        }


def _canonical_keys(options: Mapping[str, Any]) -> Dict[str, Any]:
    known = {item.name for item in fields(SyncOptions)}
    result: Dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            logger.debug("Ignoring unknown option %s", key)
            continue
        result[name] = value
    return result


def _coerce_int(value: Any, default: int, *, minimum: int) -> int:
    try:
        return max(minimum, int(value))
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float, *, minimum: float) -> float:
    try:
        return max(minimum, float(value))
    except (TypeError, ValueError):
        return default


def _coerce_path(value: Any, default: str) -> str:
    if isinstance(value, (str, os.PathLike)):
        text = os.fspath(value).strip()
        if text:
            return text
    return default


def normalize_config(options: Union[SyncOptions, Mapping[str, Any], None] = None) -> SyncOptions:
    """Return :class:`SyncOptions` with defaults applied to missing entries.

    Both snake_case and camelCase option names are accepted.  Sync stays
    enabled unless explicitly set to ``False``; auto-translation is only
    enabled by an explicit ``True``.
    """

    if isinstance(options, SyncOptions):
        return SyncOptions(**options.to_json())

    data = _canonical_keys(options or {})
    defaults = SyncOptions()
    return SyncOptions(
        row_limit=_coerce_int(data.get("row_limit"), defaults.row_limit, minimum=1),
        wait_seconds=_coerce_float(data.get("wait_seconds"), defaults.wait_seconds, minimum=0.0),
        data_json_path=_coerce_path(data.get("data_json_path"), defaults.data_json_path),
        locales_output_path=_coerce_path(
            data.get("locales_output_path"), defaults.locales_output_path
        ),
        translations_output_dir=_coerce_path(
            data.get("translations_output_dir"), defaults.translations_output_dir
        ),
        sync_local_changes=data.get("sync_local_changes") is not False,
        auto_translate=data.get("auto_translate") is True,
    )


def load_settings(path: Union[str, Path], overrides: Optional[Mapping[str, Any]] = None) -> SyncOptions:
    """Read options from the JSON file at ``path`` and apply ``overrides``."""

    settings_path = Path(path)
    data: Dict[str, Any] = {}
    if settings_path.exists():
        try:
            with settings_path.open("r", encoding="utf-8") as handle:
                loaded = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsError(f"Cannot read settings file {settings_path}: {exc}") from exc
        if not isinstance(loaded, Mapping):
            raise SettingsError(f"Settings file {settings_path} must contain a JSON object")
        data.update(_canonical_keys(loaded))
    else:
        logger.debug("Settings file %s not found, using defaults", settings_path)

    if overrides:
        data.update(
            {key: value for key, value in _canonical_keys(overrides).items() if value is not None}
        )
    return normalize_config(data)


def save_settings(options: SyncOptions, path: Union[str, Path]) -> None:
    settings_path = Path(path)
    if settings_path.parent:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
    with settings_path.open("w", encoding="utf-8") as handle:
        json.dump(options.to_json(), handle, indent=2)


__all__ = [
    "DEFAULT_DATA_JSON_PATH",
    "DEFAULT_LOCALES_OUTPUT_PATH",
    "DEFAULT_ROW_LIMIT",
    "DEFAULT_TRANSLATIONS_OUTPUT_DIR",
    "DEFAULT_WAIT_SECONDS",
    "SettingsError",
    "SyncOptions",
    "load_settings",
    "normalize_config",
    "save_settings",
]
