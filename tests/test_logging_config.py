from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sheet_i18n import logging_config


def test_configure_logging_writes_to_file_once(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
    monkeypatch.setattr(logging_config, "_LOG_PATH", None)
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level
    log_path = tmp_path / "logs" / "sync.log"

    try:
        assert logging_config.configure_logging(logging.INFO, log_path) == log_path
        assert logging_config.configure_logging(logging.INFO, tmp_path / "other.log") == log_path

        added = [handler for handler in root_logger.handlers if handler not in handlers_before]
        assert len(added) == 1
        assert isinstance(added[0], logging.FileHandler)

        logging.getLogger("sheet_i18n.test").warning("hello %s", "file")
        added[0].flush()
        assert "[WARNING] sheet_i18n.test: hello file" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in handlers_before:
                root_logger.removeHandler(handler)
                handler.close()
        root_logger.setLevel(level_before)
