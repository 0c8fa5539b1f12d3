"""
Centralized Logging Configuration for DLT Export.

Provides structured logging with console output and optional rotating log files.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional
from datetime import datetime

from dltexport.config.settings import AppSettings, settings


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging."""

    def format(self, record):
        # Add custom fields to log record
        record.service_name = getattr(record, 'service_name', 'dltexport')
        record.export_id = getattr(record, 'export_id', None)

        # Format timestamp
        record.timestamp = datetime.fromtimestamp(record.created).isoformat()

        return super().format(record)


def setup_logging(app_settings: Optional[AppSettings] = None) -> None:
    """Setup logging configuration for export runs."""
    app_settings = app_settings or settings.app

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, app_settings.log_level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    console_format = (
        "%(asctime)s - %(name)s - %(levelname)s - "
        "%(message)s"
    )

    if app_settings.debug:
        console_handler.setLevel(logging.DEBUG)
        console_format = (
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(filename)s:%(lineno)d] - %(message)s"
        )

    console_handler.setFormatter(logging.Formatter(console_format))
    root_logger.addHandler(console_handler)

    if not app_settings.log_to_file:
        logging.info(f"Logging configuration initialized for {app_settings.app_name} {app_settings.app_version}")
        return

    os.makedirs(app_settings.log_dir, exist_ok=True)

    # File handler for general export logs
    app_file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(app_settings.log_dir, "export.log"),
        maxBytes=app_settings.log_max_bytes,
        backupCount=app_settings.log_backup_count
    )
    app_file_handler.setLevel(logging.INFO)
    app_file_handler.setFormatter(StructuredFormatter(
        "%(timestamp)s - %(name)s - %(levelname)s - "
        "%(service_name)s - %(export_id)s - %(message)s"
    ))
    root_logger.addHandler(app_file_handler)

    # Error file handler for errors and above
    error_file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(app_settings.log_dir, "errors.log"),
        maxBytes=app_settings.log_max_bytes,
        backupCount=app_settings.log_backup_count * 2
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(StructuredFormatter(
        "%(timestamp)s - %(name)s - %(levelname)s - "
        "%(service_name)s - %(export_id)s - "
        "[%(filename)s:%(lineno)d] - %(message)s"
    ))
    root_logger.addHandler(error_file_handler)

    logging.info(f"Logging configuration initialized for {app_settings.app_name} {app_settings.app_version}")


class LoggerAdapter(logging.LoggerAdapter):
    """Custom logger adapter for adding context to log messages."""

    def __init__(self, logger, extra=None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        # Add extra context to log record
        if 'extra' not in kwargs:
            kwargs['extra'] = {}

        kwargs['extra'].update(self.extra)
        return msg, kwargs


def get_logger(name: str, **context) -> LoggerAdapter:
    """Get a logger with optional context."""
    logger = logging.getLogger(name)
    return LoggerAdapter(logger, context)
