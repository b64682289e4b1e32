"""Configuration module for Daylight."""

from .configuration import (
    ConfigManager,
    LocationConfig,
    ScheduleConfig,
    ProvidersConfig,
    CalendarConfig,
    LoggingConfig
)

__all__ = [
    'ConfigManager',
    'LocationConfig',
    'ScheduleConfig',
    'ProvidersConfig',
    'CalendarConfig',
    'LoggingConfig'
]
