"""Utility modules for Daylight."""

from .exceptions import (
    DaylightError,
    DaylightConfigError,
    FetchError,
    NetworkError,
    CalculationError,
    StartupFetchError,
    CreationError
)
from .retry import retry_with_backoff
from .logging import setup_logging, get_logger, LineFormatter, LoggerAdapter

__all__ = [
    'DaylightError',
    'DaylightConfigError',
    'FetchError',
    'NetworkError',
    'CalculationError',
    'StartupFetchError',
    'CreationError',
    'retry_with_backoff',
    'setup_logging',
    'get_logger',
    'LineFormatter',
    'LoggerAdapter'
]
