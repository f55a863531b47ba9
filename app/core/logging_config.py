# app/core/logging_config.py

import logging
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    """
    Конфигурация логирования сервиса наград.
    level задает уровень логгера пакета app, сторонние библиотеки пишут с INFO и выше,
    SQL-движок - только предупреждения.
    """
    console = {"handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "app": {**console, "level": level.upper()},
            "uvicorn": {"handlers": ["console"], "level": "INFO"},
            "sqlalchemy.engine": {**console, "level": "WARNING"},
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }


def setup_logging(level: str = "INFO"):
    """Применяет конфигурацию логирования."""
    dictConfig(build_logging_config(level))
    logging.getLogger(__name__).debug(f"Logging configured, app level {level.upper()}.")
