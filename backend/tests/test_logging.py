from __future__ import annotations

import logging
from pathlib import Path

from trippino.core.logging import get_logger, setup_logging
from trippino.core.settings import settings


def _flush_all() -> None:
    for logger in (logging.getLogger(), logging.getLogger("trippino")):
        for handler in logger.handlers:
            handler.flush()


def test_get_logger_stays_inside_trippino_tree():
    assert get_logger().name == "trippino"
    assert get_logger("trippino.core.auth").name == "trippino.core.auth"
    assert get_logger("CitySequenceService").name == "trippino.CitySequenceService"


def test_setup_logging_writes_trippino_files(tmp_path: Path):
    original = (settings.log_directory, settings.log_level, settings.library_log_level)
    settings.log_directory = str(tmp_path)
    settings.log_level = "INFO"
    settings.library_log_level = "WARNING"
    try:
        setup_logging()
        get_logger("CitySequenceService").info("city.appended")
        get_logger("core.auth").error("storage.failure")
        logging.getLogger("sqlalchemy.pool").info("pool checked out")
        logging.getLogger("uvicorn.error").error("worker crashed")
        _flush_all()

        app_log = (tmp_path / settings.log_file_name).read_text(encoding="utf-8")
        error_log = (tmp_path / settings.error_log_file_name).read_text(encoding="utf-8")
    finally:
        settings.log_directory, settings.log_level, settings.library_log_level = original
        setup_logging()

    assert settings.log_file_name == "trippino.log"
    assert "trippino.CitySequenceService | city.appended" in app_log
    assert "trippino.core.auth | storage.failure" in app_log
    assert "pool checked out" not in app_log
    assert "worker crashed" not in app_log

    assert "trippino.core.auth | storage.failure" in error_log
    assert "uvicorn.error | worker crashed" in error_log
    assert "city.appended" not in error_log
