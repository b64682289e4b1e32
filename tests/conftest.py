import pytest
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from daylight.config import LocationConfig
from daylight.sun.base import SunProvider
from daylight.utils.exceptions import FetchError

LA = ZoneInfo("America/Los_Angeles")


class FixedClock:
    """Settable clock; call it to read the time."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class StubProvider(SunProvider):
    """Returns canned times and records every requested date."""

    def __init__(self, times=None, error=None):
        super().__init__()
        self.times = times or {}
        self.error = error
        self.calls = []

    def get_sun_times(self, target_date, location):
        self.calls.append(target_date)
        if self.error is not None:
            raise self.error
        if target_date not in self.times:
            raise FetchError(f"No data for {target_date}", "stub")
        return self.times[target_date]


def at(day, hour, minute=0):
    """Aware datetime in Los Angeles on a June 2024 day."""
    return datetime(2024, 6, day, hour, minute, tzinfo=LA)


@pytest.fixture
def location():
    return LocationConfig(
        name="San Francisco",
        latitude=37.7749,
        longitude=-122.4194,
        timezone="America/Los_Angeles",
    )


@pytest.fixture
def june_times():
    return {
        date(2024, 5, 31): (datetime(2024, 5, 31, 5, 49, tzinfo=LA), datetime(2024, 5, 31, 20, 34, tzinfo=LA)),
        date(2024, 6, 1): (at(1, 5, 48), at(1, 20, 35)),
        date(2024, 6, 2): (at(2, 5, 47), at(2, 20, 36)),
        date(2024, 6, 3): (at(3, 5, 47), at(3, 20, 37)),
    }


@pytest.fixture
def stub_provider(june_times):
    return StubProvider(june_times)


@pytest.fixture
def clock():
    return FixedClock(at(1, 8))


@pytest.fixture
def temp_artifact_dir(tmp_path):
    artifact_dir = tmp_path / "artifacts"
    artifact_dir.mkdir()
    return artifact_dir


@pytest.fixture
def write_config(tmp_path):
    def _write(text):
        path = tmp_path / "daylight.ini"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
