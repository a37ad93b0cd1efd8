"""Structured logging configuration for the application."""

import logging
import logging.config
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from staff_audit.config import settings


def setup_logging() -> None:
    """Configure structured logging with per-start log files and appropriate levels."""

    # File handlers are skipped during automated tests.
    disable_file_handlers = settings.is_testing
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG" if settings.is_development else "INFO",
            "formatter": "json" if settings.is_production else "detailed",
            "stream": sys.stdout,
        },
    }
    extra_handlers: list[str] = []

    if not disable_file_handlers:
        log_dir = Path("./logs")
        log_dir.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        handlers.update(
            {
                "file": {
                    "class": "logging.FileHandler",
                    "level": "INFO",
                    "formatter": "json" if settings.is_production else "detailed",
                    "filename": str(log_dir / f"staff-audit-{timestamp}.log"),
                    "encoding": "utf-8",
                },
                "error_file": {
                    "class": "logging.FileHandler",
                    "level": "ERROR",
                    "formatter": "detailed",
                    "filename": str(log_dir / f"error-{timestamp}.log"),
                    "encoding": "utf-8",
                },
            }
        )
        extra_handlers = ["file", "error_file"]

    handler_names = ["console"] + extra_handlers

    formatters: dict[str, Any] = {
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }
    if settings.is_production:
        formatters["json"] = {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(filename)s %(lineno)d %(message)s",
        }

    log_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            "staff_audit": {
                "level": settings.log_level,
                "handlers": handler_names,
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": handler_names,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING" if (settings.is_production or settings.is_testing) else "INFO",
                "handlers": handler_names,
                "propagate": False,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": handler_names,
        },
    }

    logging.config.dictConfig(log_config)

    logger = logging.getLogger("staff_audit")
    logger.info(
        "Logging initialized - Environment: %s, Level: %s",
        settings.environment,
        settings.log_level,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the application logger.

    Args:
        name: Logger name, typically the module's short name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(f"staff_audit.{name}")
