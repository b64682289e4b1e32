import pytest
from datetime import date, datetime, timedelta, timezone

from conftest import LA
from daylight.config import LocationConfig
from daylight.sun.calculator import AstralProvider, SunCalculator, utc_offset_hours
from daylight.utils.exceptions import CalculationError


def minutes_between(a, b):
    return abs((a - b).total_seconds()) / 60


class TestSunCalculator:
    def test_san_francisco_in_june(self):
        sunrise, sunset = SunCalculator().compute(date(2024, 6, 1), 37.7749, -122.4194, -7)

        assert minutes_between(sunrise, datetime(2024, 6, 1, 5, 48, tzinfo=LA)) < 5
        assert minutes_between(sunset, datetime(2024, 6, 1, 20, 27, tzinfo=LA)) < 5
        assert sunrise.utcoffset() == timedelta(hours=-7)

    def test_is_deterministic(self):
        calculator = SunCalculator()

        first = calculator.compute(date(2024, 12, 21), 51.5, -0.116, 0)
        second = calculator.compute(date(2024, 12, 21), 51.5, -0.116, 0)

        assert first == second
        assert first[0] < first[1]

    def test_polar_day_raises_calculation_error(self):
        with pytest.raises(CalculationError):
            SunCalculator().compute(date(2024, 6, 21), 78.22, 15.65, 2)

    def test_polar_night_raises_calculation_error(self):
        with pytest.raises(CalculationError):
            SunCalculator().compute(date(2024, 12, 21), 78.22, 15.65, 1)

    def test_reykjavik_summer_without_civil_twilight(self):
        sunrise, sunset = SunCalculator().compute(date(2024, 6, 1), 64.1466, -21.9426, 0)

        assert datetime(2024, 6, 1, 2, 45, tzinfo=timezone.utc) < sunrise < datetime(2024, 6, 1, 4, 0, tzinfo=timezone.utc)
        assert datetime(2024, 6, 1, 22, 45, tzinfo=timezone.utc) < sunset < datetime(2024, 6, 1, 23, 59, tzinfo=timezone.utc)

    def test_helsinki_midsummer(self):
        sunrise, sunset = SunCalculator().compute(date(2024, 6, 20), 60.1699, 24.9384, 3)

        eest = timezone(timedelta(hours=3))
        assert minutes_between(sunrise, datetime(2024, 6, 20, 3, 54, tzinfo=eest)) < 10
        assert minutes_between(sunset, datetime(2024, 6, 20, 22, 50, tzinfo=eest)) < 10

    @pytest.mark.parametrize("latitude, longitude", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_invalid_coordinates(self, latitude, longitude):
        with pytest.raises(CalculationError):
            SunCalculator().compute(date(2024, 6, 1), latitude, longitude, 0)


class RecordingCalculator(SunCalculator):
    def __init__(self):
        self.offsets = {}

    def compute(self, target_date, latitude, longitude, utc_offset_hours):
        self.offsets[target_date] = utc_offset_hours
        return super().compute(target_date, latitude, longitude, utc_offset_hours)


class TestAstralProvider:
    def test_offset_is_taken_per_date_across_dst(self, location):
        calculator = RecordingCalculator()
        provider = AstralProvider(calculator)

        provider.get_sun_times(date(2024, 3, 9), location)
        provider.get_sun_times(date(2024, 3, 10), location)

        assert calculator.offsets == {date(2024, 3, 9): -8, date(2024, 3, 10): -7}

    def test_times_are_in_location_zone(self, location):
        sunrise, sunset = AstralProvider().get_sun_times(date(2024, 6, 1), location)

        assert sunrise.tzinfo == LA
        assert sunrise.date() == date(2024, 6, 1)
        assert sunset.date() == date(2024, 6, 1)

    def test_polar_location(self):
        svalbard = LocationConfig("Longyearbyen", 78.22, 15.65, "Arctic/Longyearbyen")

        with pytest.raises(CalculationError):
            AstralProvider().get_sun_times(date(2024, 6, 21), svalbard)

    def test_subpolar_summer_location(self):
        reykjavik = LocationConfig("Reykjavik", 64.1466, -21.9426, "Atlantic/Reykjavik")

        sunrise, sunset = AstralProvider().get_sun_times(date(2024, 6, 1), reykjavik)

        assert sunrise < sunset
        assert sunrise.date() == sunset.date() == date(2024, 6, 1)

    def test_utc_offset_hours(self):
        assert utc_offset_hours(date(2024, 1, 15), LA) == -8
        assert utc_offset_hours(date(2024, 7, 15), LA) == -7

    def test_provider_name(self):
        assert AstralProvider().name == "astral"
