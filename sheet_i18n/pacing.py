"""Fixed delays used to keep Sheets API calls under the quota."""
from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


def wait(seconds: float, reason: str) -> None:
    """Sleep for ``seconds`` and log ``reason`` at debug level."""

    logger.debug("wait %ss %s", seconds, reason)
    if seconds <= 0:
        return
    time.sleep(seconds)


__all__ = ["wait"]
