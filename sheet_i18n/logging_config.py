"""Application-wide logging configuration utilities."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_CONFIGURED = False
_LOG_PATH: Optional[Path] = None


def configure_logging(
    level: int = logging.INFO, log_path: Union[str, Path, None] = None
) -> Optional[Path]:
    """Configure the root logger for command line use.

    Parameters
    ----------
    level:
        The minimum logging level for the root logger.
    log_path:
        When given, records are written to this file instead of stderr.

    Returns
    -------
    pathlib.Path or None
        The path to the log file, if one is used.
    """

    global _CONFIGURED, _LOG_PATH

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.setLevel(level)
    else:
        root_logger.setLevel(min(root_logger.level, level))

    if _CONFIGURED:
        return _LOG_PATH

    formatter = logging.Formatter(LOG_FORMAT)
    handler: logging.Handler
    if log_path is not None:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        _LOG_PATH = path
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # file_cache is unavailable with oauth2client>=4
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)

    _CONFIGURED = True
    root_logger.debug("Logging configured (file=%s)", _LOG_PATH)
    return _LOG_PATH