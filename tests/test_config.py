import logging
import pytest
import tzlocal
from datetime import date
from zoneinfo import ZoneInfo

from daylight.config import (
    CalendarConfig,
    ConfigManager,
    LocationConfig,
    LoggingConfig,
    ProvidersConfig,
    ScheduleConfig,
)
from daylight.config import configuration
from daylight.sun.calculator import utc_offset_hours
from daylight.utils.exceptions import DaylightConfigError

FULL_CONFIG = """
[location]
name = Reykjavik
latitude = 64.1466
longitude = -21.9426
timezone = Atlantic/Reykjavik

[schedule]
refresh_interval_seconds = 30
cleanup_interval_seconds = 600

[providers]
providers = wttr, astral
primary_provider = wttr
fallback_enabled = no

[calendar]
event_minutes = 15, 45   ; reminders offered from the prompt
file_name_template = sunset.*.ics

[logging]
log_dir = /tmp/daylight-logs
log_file = sun.log
level = debug
"""

MINIMAL_CONFIG = """
[location]
latitude = 37.7749
longitude = -122.4194
"""


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for var in ("DAYLIGHT_LOCATION_NAME", "DAYLIGHT_LATITUDE", "DAYLIGHT_LONGITUDE", "DAYLIGHT_TIMEZONE"):
        monkeypatch.delenv(var, raising=False)


class TestConfigManager:
    def test_full_config(self, write_config):
        config = ConfigManager(write_config(FULL_CONFIG))

        assert config.location == LocationConfig("Reykjavik", 64.1466, -21.9426, "Atlantic/Reykjavik")
        assert config.schedule == ScheduleConfig(30, 600)
        assert config.providers == ProvidersConfig(["wttr", "astral"], "wttr", False)
        assert config.calendar == CalendarConfig([15, 45], "sunset.*.ics")
        assert config.logging.level == "DEBUG"
        assert config.logging.level_number == logging.DEBUG
        assert config.logging.log_file == "sun.log"

    def test_defaults_for_optional_sections(self, write_config):
        config = ConfigManager(write_config(MINIMAL_CONFIG))

        assert config.location.name == "Here"
        assert config.location.timezone == ""
        assert config.schedule == ScheduleConfig()
        assert config.providers == ProvidersConfig()
        assert config.calendar.event_minutes == [30, 60, 90]
        assert config.logging == LoggingConfig()

    def test_environment_overrides(self, write_config, monkeypatch):
        monkeypatch.setenv("DAYLIGHT_LATITUDE", "51.5074")
        monkeypatch.setenv("DAYLIGHT_LONGITUDE", "-0.1278")
        monkeypatch.setenv("DAYLIGHT_TIMEZONE", "Europe/London")
        monkeypatch.setenv("DAYLIGHT_LOCATION_NAME", "London")

        location = ConfigManager(write_config(MINIMAL_CONFIG)).location

        assert location == LocationConfig("London", 51.5074, -0.1278, "Europe/London")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DaylightConfigError, match="not found"):
            ConfigManager(str(tmp_path / "absent.ini"))

    def test_missing_location_section(self, write_config):
        with pytest.raises(DaylightConfigError, match="location"):
            ConfigManager(write_config("[schedule]\nrefresh_interval_seconds = 60\n"))

    def test_missing_latitude(self, write_config):
        config = ConfigManager(write_config("[location]\nlongitude = 10\n"))

        with pytest.raises(DaylightConfigError, match="latitude"):
            config.location

    def test_non_numeric_latitude(self, write_config):
        config = ConfigManager(write_config("[location]\nlatitude = north\nlongitude = 10\n"))

        with pytest.raises(DaylightConfigError, match="must be a number"):
            config.location

    def test_invalid_schedule_value(self, write_config):
        config = ConfigManager(write_config(MINIMAL_CONFIG + "[schedule]\nrefresh_interval_seconds = soon\n"))

        with pytest.raises(DaylightConfigError):
            config.schedule

    def test_invalid_event_minutes(self, write_config):
        config = ConfigManager(write_config(MINIMAL_CONFIG + "[calendar]\nevent_minutes = 30, half\n"))

        with pytest.raises(DaylightConfigError):
            config.calendar

    def test_primary_defaults_to_first_listed(self, write_config):
        config = ConfigManager(write_config(MINIMAL_CONFIG + "[providers]\nproviders = wttr, astral\n"))

        assert config.providers.primary_provider == "wttr"
        assert config.providers.fallback_enabled is True


class TestLocationConfig:
    @pytest.mark.parametrize("latitude, longitude", [(90.5, 0), (-90.5, 0), (0, 180.5), (0, -180.5)])
    def test_out_of_range(self, latitude, longitude):
        with pytest.raises(DaylightConfigError):
            LocationConfig("Nowhere", latitude, longitude)

    def test_unknown_timezone(self):
        with pytest.raises(DaylightConfigError, match="Unknown timezone"):
            LocationConfig("Atlantis", 0, 0, "Ocean/Atlantis")

    def test_tzinfo_from_name(self):
        assert LocationConfig("Tokyo", 35.68, 139.69, "Asia/Tokyo").tzinfo == ZoneInfo("Asia/Tokyo")

    def test_tzinfo_falls_back_to_system_zone(self, monkeypatch):
        monkeypatch.setattr(configuration, "get_localzone_name", lambda: "America/Los_Angeles")

        tz = LocationConfig("Here", 37.77, -122.42).tzinfo

        assert tz == ZoneInfo("America/Los_Angeles")

    def test_system_zone_keeps_dst_per_date(self, monkeypatch):
        monkeypatch.setattr(configuration, "get_localzone_name", lambda: "America/Los_Angeles")

        tz = LocationConfig("Here", 37.77, -122.42).tzinfo

        assert utc_offset_hours(date(2024, 1, 15), tz) == -8
        assert utc_offset_hours(date(2024, 7, 15), tz) == -7

    def test_system_zone_follows_tz_environment(self, monkeypatch):
        monkeypatch.setenv("TZ", "America/Los_Angeles")
        tzlocal.reload_localzone()
        try:
            tz = LocationConfig("Here", 37.77, -122.42).tzinfo
        finally:
            monkeypatch.undo()
            tzlocal.reload_localzone()

        assert utc_offset_hours(date(2024, 1, 15), tz) != utc_offset_hours(date(2024, 7, 15), tz)

    def test_unresolvable_system_zone(self, monkeypatch):
        monkeypatch.setattr(configuration, "get_localzone_name", lambda: "Nowhere/Special")

        with pytest.raises(DaylightConfigError, match="set \\[location\\] timezone"):
            LocationConfig("Here", 0, 0).tzinfo


class TestSectionConfigs:
    def test_schedule_must_be_positive(self):
        with pytest.raises(DaylightConfigError):
            ScheduleConfig(refresh_interval_seconds=0)

    def test_primary_must_be_listed(self):
        with pytest.raises(DaylightConfigError, match="primary_provider"):
            ProvidersConfig(["astral"], "wttr")

    def test_providers_required(self):
        with pytest.raises(DaylightConfigError):
            ProvidersConfig([], "astral")

    def test_event_minutes_positive(self):
        with pytest.raises(DaylightConfigError):
            CalendarConfig(event_minutes=[30, 0])

    def test_template_needs_wildcard(self):
        with pytest.raises(DaylightConfigError, match="'\\*'"):
            CalendarConfig(file_name_template="daylight.ics")

    def test_unknown_log_level(self):
        with pytest.raises(DaylightConfigError):
            LoggingConfig(level="chatty")
