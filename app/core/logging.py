"""Logging configuration: stdlib logging wired through dictConfig."""

import logging
import logging.config
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from app.core.config import settings


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that always carries level and logger name."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name


def build_logging_config(level: str, fmt: str) -> Dict[str, Any]:
    formatter = "json" if fmt.lower() == "json" else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": ServiceJsonFormatter,
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            "app": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            "httpx": {"handlers": ["console"], "level": "WARNING", "propagate": False},
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
        },
    }


def setup_logging() -> logging.Logger:
    logging.config.dictConfig(build_logging_config(settings.log_level, settings.log_format))
    logger = logging.getLogger("app")
    logger.info("Logging initialized with level: %s", settings.log_level)
    return logger
