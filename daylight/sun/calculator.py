"""Local sunrise/sunset calculation using astral."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple

from astral import Observer
from astral.sun import sunrise, sunset

from .base import SunProvider
from ..config import LocationConfig
from ..utils.exceptions import CalculationError

logger = logging.getLogger(__name__)


class SunCalculator:
    """Stateless wrapper around the astral solar solver."""

    def compute(
        self,
        target_date: date,
        latitude: float,
        longitude: float,
        utc_offset_hours: float
    ) -> Tuple[datetime, datetime]:
        """
        Compute sunrise and sunset for a date at a fixed UTC offset.

        Args:
            target_date: Local calendar date
            latitude: Latitude in decimal degrees (-90 to 90)
            longitude: Longitude in decimal degrees (-180 to 180)
            utc_offset_hours: Offset of local time from UTC on that date

        Returns:
            Tuple of (sunrise, sunset) carrying the given offset

        Raises:
            CalculationError: For invalid coordinates or when the sun does not
                rise or set on that date (polar day/night)
        """
        if not -90 <= latitude <= 90:
            raise CalculationError(f"Invalid latitude: {latitude}", 'astral')
        if not -180 <= longitude <= 180:
            raise CalculationError(f"Invalid longitude: {longitude}", 'astral')

        tz = timezone(timedelta(hours=utc_offset_hours))
        observer = Observer(latitude=latitude, longitude=longitude)

        # Only the horizon crossings are solved; twilight may not exist in
        # subpolar summers even though the sun rises and sets.
        try:
            sunrise_time = sunrise(observer, date=target_date, tzinfo=tz)
        except ValueError as e:
            raise CalculationError(f"No sunrise on {target_date}: {e}", 'astral')

        try:
            sunset_time = sunset(observer, date=target_date, tzinfo=tz)
        except ValueError as e:
            raise CalculationError(f"No sunset on {target_date}: {e}", 'astral')

        return sunrise_time, sunset_time


def utc_offset_hours(target_date: date, tz) -> float:
    """UTC offset of ``tz`` at local noon on ``target_date``, in hours."""
    offset = tz.utcoffset(datetime.combine(target_date, time(12)))
    return offset.total_seconds() / 3600 if offset is not None else 0.0


class AstralProvider(SunProvider):
    """Sun data computed locally from the configured coordinates."""

    def __init__(self, calculator: Optional[SunCalculator] = None):
        super().__init__()
        self.calculator = calculator or SunCalculator()

    def get_sun_times(self, target_date: date, location: LocationConfig) -> Tuple[datetime, datetime]:
        """
        Compute sunrise and sunset for ``target_date`` at ``location``.

        The UTC offset is derived from the date itself so that dates on either
        side of a DST transition each get their own offset.
        """
        tz = location.tzinfo
        offset = utc_offset_hours(target_date, tz)
        logger.debug(
            f"Calculating sun times for {location.name} on {target_date} "
            f"(UTC{offset:+g})"
        )
        sunrise, sunset = self.calculator.compute(
            target_date, location.latitude, location.longitude, offset
        )
        return sunrise.astimezone(tz), sunset.astimezone(tz)
