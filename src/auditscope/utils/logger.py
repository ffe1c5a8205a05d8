"""
Structured logging configuration for AuditScope.

This module provides a small logging setup with support for both console
and file output, with optional JSON formatting.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union, cast

from pythonjsonlogger.json import JsonFormatter

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "auditscope"


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter that includes additional context."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord,
                   message_dict: Dict[str, Any]) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["logger"] = record.name
        log_record["level"] = record.levelname
        log_record["timestamp"] = record.created


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_level: Optional[Union[str, int]] = None,
    log_file: Optional[Union[str, Path]] = None,
    json_format: bool = False,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Configure and return a logger with the specified settings.

    Args:
        name: Logger name (default: "auditscope")
        log_level: Logging level (default: INFO)
        log_file: Optional file path for logging
        json_format: Whether to use JSON formatting
        log_format: Format string for plain text output

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = logging.INFO

    # Convert string log level to numeric
    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(cast(int, log_level))

    # Remove existing handlers to avoid duplicate logs
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
        )
    else:
        formatter = logging.Formatter(log_format)

    # Logs go to stderr so that stdout only carries the report
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(cast(int, log_level))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(cast(int, log_level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Logger name (default: None, returns the package logger)

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
