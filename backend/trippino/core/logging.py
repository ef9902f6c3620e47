from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from trippino.core.settings import settings

APP_LOGGER = "trippino"


def _build_logging_config(log_dir: Path) -> Dict[str, Any]:
    """Console and rotating file output for the ``trippino`` logger tree.

    Trippino records go to ``settings.log_file_name`` at ``log_level``;
    anything at ERROR, from any logger, also lands in
    ``settings.error_log_file_name``. Other libraries only reach the
    console at ``library_log_level`` or above.
    """

    formatter = {
        "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
    }
    rotating = {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "standard",
        "maxBytes": settings.log_max_bytes,
        "backupCount": settings.log_backup_count,
        "encoding": "utf-8",
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": "standard",
            },
            "trippino_file": {
                **rotating,
                "level": settings.log_level,
                "filename": str(log_dir / settings.log_file_name),
            },
            "error_file": {
                **rotating,
                "level": "ERROR",
                "filename": str(log_dir / settings.error_log_file_name),
            },
        },
        "loggers": {
            APP_LOGGER: {
                "level": settings.log_level,
                "handlers": ["trippino_file"],
            },
        },
        "root": {
            "level": settings.library_log_level,
            "handlers": ["console", "error_file"],
        },
    }


def setup_logging() -> None:
    """Configure logging once at application start."""

    log_dir = Path(settings.log_directory).resolve()
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(_build_logging_config(log_dir))


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger inside the ``trippino`` tree so its level and file apply."""

    if not name or name == APP_LOGGER:
        return logging.getLogger(APP_LOGGER)
    if not name.startswith(f"{APP_LOGGER}."):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
