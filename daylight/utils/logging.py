"""Logging configuration for Daylight."""

import os
import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any

LOGGER_NAME = 'daylight'

# Attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime', 'taskName'}


class LineFormatter(logging.Formatter):
    """
    Formatter that renders records as a single "timestamp LEVEL: message" line.

    Dict messages are serialized as JSON and any additional fields passed at
    construction time, or per record through ``extra``, are appended as
    ``key=value`` pairs.
    """
    def __init__(self, **kwargs):
        """Initialize formatter with optional additional fields."""
        self.additional_fields = kwargs
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format LogRecord in standard format.

        Args:
            record: LogRecord instance

        Returns:
            Formatted log string
        """
        if isinstance(record.msg, dict):
            message = json.dumps(record.msg)
        else:
            message = record.getMessage()

        line = f"{self.formatTime(record)} {record.levelname}: {message}"
        fields = dict(self.additional_fields)
        fields.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        )
        if fields:
            extras = ' '.join(f"{k}={v}" for k, v in fields.items())
            line = f"{line} [{extras}]"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

def setup_logging(
    log_dir: str,
    log_file: str,
    level: int = logging.INFO,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    add_console_handler: bool = True,
    additional_fields: Optional[Dict[str, Any]] = None
) -> logging.Logger:
    """
    Set up application logging with file rotation and optional console output.

    Every module logger in the package is a child of the ``daylight`` logger,
    so handlers attached here receive their records as well.

    Args:
        log_dir: Directory to store log files
        log_file: Name of the log file
        level: Logging level
        max_bytes: Maximum size of each log file
        backup_count: Number of backup files to keep
        add_console_handler: Whether to add a console handler
        additional_fields: Additional fields to include in every log entry

    Returns:
        Configured logger instance
    """
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Repeated setup (tests, --once followed by a run) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = LineFormatter(**(additional_fields or {}))

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if add_console_handler:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger

class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that allows adding context to log messages.
    """
    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """
        Process the logging message and keyword arguments.

        Args:
            msg: Log message
            kwargs: Keyword arguments

        Returns:
            Tuple of (modified message, modified kwargs)
        """
        kwargs.setdefault('extra', {}).update(self.extra)
        return msg, kwargs

def get_logger(
    name: str,
    context: Optional[Dict[str, Any]] = None
) -> LoggerAdapter:
    """
    Get a logger with optional context information.

    Args:
        name: Logger name
        context: Additional context to include in log entries

    Returns:
        Logger adapter instance
    """
    logger = logging.getLogger(name)
    return LoggerAdapter(logger, context or {})
