"""Configuration management for Daylight."""

import os
import logging
from typing import List, Optional
from configparser import ConfigParser, SectionProxy
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzlocal import get_localzone_name

from ..utils.exceptions import DaylightConfigError

TRUE_VALUES = ('true', 'yes', '1', 'on')

@dataclass
class LocationConfig:
    """Observer location settings."""
    name: str
    latitude: float
    longitude: float
    timezone: str = ''

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_float_range('latitude', -90, 90)
        self._validate_float_range('longitude', -180, 180)
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise DaylightConfigError(f"Unknown timezone: {self.timezone}")

    def _validate_float_range(self, field_name: str, min_val: float, max_val: float):
        """Validate that a float is within a specified range."""
        value = float(getattr(self, field_name))
        if not min_val <= value <= max_val:
            raise DaylightConfigError(
                f"{field_name} must be between {min_val} and {max_val}, got {value}"
            )

    @property
    def tzinfo(self) -> tzinfo:
        """Time zone used for "local day" decisions; the system zone when unset."""
        if self.timezone:
            return ZoneInfo(self.timezone)
        try:
            return ZoneInfo(get_localzone_name())
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise DaylightConfigError(
                f"Cannot determine the system timezone ({e}); set [location] timezone"
            )

@dataclass
class ScheduleConfig:
    """Event loop timing settings."""
    refresh_interval_seconds: float = 60
    cleanup_interval_seconds: float = 15 * 60

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_positive('refresh_interval_seconds')
        self._validate_positive('cleanup_interval_seconds')

    def _validate_positive(self, field_name: str):
        """Validate that a field contains a positive number."""
        value = getattr(self, field_name)
        if value <= 0:
            raise DaylightConfigError(
                f"{field_name} must be positive, got {value}"
            )

@dataclass
class ProvidersConfig:
    """Sun data source configuration."""
    providers: List[str] = field(default_factory=lambda: ['astral'])
    primary_provider: str = 'astral'
    fallback_enabled: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.providers:
            raise DaylightConfigError("At least one sun data provider is required")
        if self.primary_provider not in self.providers:
            raise DaylightConfigError(
                f"primary_provider ({self.primary_provider}) must be one of "
                f"providers ({', '.join(self.providers)})"
            )

@dataclass
class CalendarConfig:
    """Calendar reminder settings."""
    event_minutes: List[int] = field(default_factory=lambda: [30, 60, 90])
    file_name_template: str = 'daylight.*.ics'

    def __post_init__(self):
        """Validate configuration after initialization."""
        for minutes in self.event_minutes:
            if minutes <= 0:
                raise DaylightConfigError(
                    f"event_minutes must be positive, got {minutes}"
                )
        if '*' not in self.file_name_template:
            raise DaylightConfigError(
                f"file_name_template must contain '*', got {self.file_name_template}"
            )

@dataclass
class LoggingConfig:
    """Log output settings."""
    log_dir: str = 'logs'
    log_file: str = 'daylight.log'
    level: str = 'INFO'

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.level = self.level.upper()
        if not isinstance(logging.getLevelName(self.level), int):
            raise DaylightConfigError(f"Unknown log level: {self.level}")

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


class ConfigManager:
    """Configuration manager for the application."""

    def __init__(self, config_path: str):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self.config = ConfigParser(inline_comment_prefixes=(';', '#'))
        self._load_config()

    def _load_config(self) -> None:
        """Load and validate configuration file."""
        if not os.path.exists(self.config_path):
            raise DaylightConfigError(f"Config file not found: {self.config_path}")

        self.config.read(self.config_path, encoding='utf-8')
        self._validate_sections()

    def _validate_sections(self) -> None:
        """Validate that all required sections are present."""
        required_sections = {'location'}
        missing_sections = required_sections - set(self.config.sections())

        if missing_sections:
            raise DaylightConfigError(
                f"Missing required config sections: {', '.join(sorted(missing_sections))}"
            )

    def _get_env_or_config(self, section: str, key: str, env_var: str, fallback: str = '') -> str:
        """
        Get value from environment variable or config file.

        Args:
            section: Config section name
            key: Config key name
            env_var: Environment variable name
            fallback: Value used when neither source sets the key

        Returns:
            Configuration value
        """
        value = os.getenv(env_var)
        if not value:
            value = self.config.get(section, key, fallback=fallback)
        return value

    def _get_float(self, section: str, key: str, env_var: str) -> float:
        """Read a required float, allowing an environment override."""
        raw = self._get_env_or_config(section, key, env_var)
        if raw == '':
            raise DaylightConfigError(f"Missing required setting [{section}] {key}")
        try:
            return float(raw)
        except ValueError:
            raise DaylightConfigError(f"[{section}] {key} must be a number, got {raw!r}")

    def _parse_list(self, value: str) -> List[str]:
        """Parse a comma-separated list."""
        return [item.strip() for item in value.split(',') if item.strip()]

    def _section(self, name: str) -> Optional[SectionProxy]:
        return self.config[name] if name in self.config else None

    @property
    def location(self) -> LocationConfig:
        """Get validated location configuration."""
        return LocationConfig(
            name=self._get_env_or_config('location', 'name', 'DAYLIGHT_LOCATION_NAME', 'Here'),
            latitude=self._get_float('location', 'latitude', 'DAYLIGHT_LATITUDE'),
            longitude=self._get_float('location', 'longitude', 'DAYLIGHT_LONGITUDE'),
            timezone=self._get_env_or_config('location', 'timezone', 'DAYLIGHT_TIMEZONE')
        )

    @property
    def schedule(self) -> ScheduleConfig:
        """Get validated schedule configuration."""
        section = self._section('schedule')
        if section is None:
            return ScheduleConfig()

        try:
            return ScheduleConfig(
                refresh_interval_seconds=section.getfloat('refresh_interval_seconds', 60),
                cleanup_interval_seconds=section.getfloat('cleanup_interval_seconds', 15 * 60)
            )
        except ValueError as e:
            raise DaylightConfigError(f"Invalid [schedule] setting: {e}")

    @property
    def providers(self) -> ProvidersConfig:
        """Get sun data providers configuration."""
        section = self._section('providers')
        if section is None:
            return ProvidersConfig()

        providers = self._parse_list(section.get('providers', 'astral'))
        primary = section.get('primary_provider', providers[0] if providers else 'astral')
        fallback = section.get('fallback_enabled', 'true').lower() in TRUE_VALUES

        return ProvidersConfig(
            providers=providers,
            primary_provider=primary,
            fallback_enabled=fallback
        )

    @property
    def calendar(self) -> CalendarConfig:
        """Get validated calendar configuration."""
        section = self._section('calendar')
        if section is None:
            return CalendarConfig()

        try:
            minutes = [int(m) for m in self._parse_list(section.get('event_minutes', '30, 60, 90'))]
        except ValueError as e:
            raise DaylightConfigError(f"Invalid [calendar] event_minutes: {e}")

        return CalendarConfig(
            event_minutes=minutes,
            file_name_template=section.get('file_name_template', 'daylight.*.ics')
        )

    @property
    def logging(self) -> LoggingConfig:
        """Get validated logging configuration."""
        section = self._section('logging')
        if section is None:
            return LoggingConfig()

        return LoggingConfig(
            log_dir=section.get('log_dir', 'logs'),
            log_file=section.get('log_file', 'daylight.log'),
            level=section.get('level', 'INFO')
        )
