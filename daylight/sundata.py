"""Sunlight data for the current day and its once-a-day refresh policy."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Optional, Tuple

from .config import LocationConfig
from .sun.base import SunProvider
from .utils.exceptions import CalculationError, FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SunData:
    """
    Sunlight data for one local day at one location.

    Attributes:
        computed_at: When this value was computed, in the cache's time zone
        sunrise: Sunrise on the day of ``computed_at``
        sunset: Sunset on the day of ``computed_at``
        sunrise_tomorrow: Sunrise on the following day
    """
    computed_at: datetime
    sunrise: datetime
    sunset: datetime
    sunrise_tomorrow: datetime

    def __post_init__(self):
        if self.sunrise >= self.sunset:
            raise CalculationError(
                f"Sunrise ({self.sunrise.isoformat()}) is not before "
                f"sunset ({self.sunset.isoformat()})"
            )

    def is_stale(self, now: datetime, tz: Optional[tzinfo] = None) -> bool:
        """
        Check whether this value was computed on a different local day.

        Args:
            now: Current time
            tz: Zone in which calendar days are compared; defaults to the zone
                of ``computed_at``

        Returns:
            True if ``computed_at`` and ``now`` fall on different dates in ``tz``
        """
        tz = tz or self.computed_at.tzinfo
        return self.computed_at.astimezone(tz).date() != now.astimezone(tz).date()


class SunDataCache:
    """
    Holds the last computed ``SunData`` and recomputes it once per local day.

    A failed recomputation keeps the previous value, so a transient source
    failure never blanks out data that was already shown.
    """

    def __init__(
        self,
        provider: SunProvider,
        location: LocationConfig,
        now: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the cache.

        Args:
            provider: Source of sunrise/sunset times
            location: Observer location; its zone defines the local day
            now: Clock returning the current time, for tests
        """
        self.provider = provider
        self.location = location
        self.tz = location.tzinfo
        self._now = now or (lambda: datetime.now(self.tz))
        self.data: Optional[SunData] = None

    def now(self) -> datetime:
        """Current time in the cache's zone."""
        return self._now().astimezone(self.tz)

    def needs_refresh(self, current: Optional[SunData], force: bool = False) -> bool:
        """True when ``current`` is missing, ``force`` is set, or it is from another day."""
        return current is None or force or current.is_stale(self.now(), self.tz)

    def compute(self) -> SunData:
        """
        Compute fresh sun data for today and tomorrow.

        Raises:
            FetchError: If either day cannot be computed
        """
        now = self.now()
        tomorrow = now + timedelta(hours=24)

        sunrise, sunset = self.provider.get_sun_times(now.date(), self.location)
        sunrise_tomorrow, _ = self.provider.get_sun_times(tomorrow.date(), self.location)

        return SunData(
            computed_at=now,
            sunrise=sunrise,
            sunset=sunset,
            sunrise_tomorrow=sunrise_tomorrow
        )

    def update(
        self,
        current: Optional[SunData],
        force: bool = False
    ) -> Tuple[Optional[SunData], Optional[FetchError]]:
        """
        Apply the refresh policy to ``current``.

        Args:
            current: Previously computed value, or None
            force: Recompute even if ``current`` is from today

        Returns:
            Tuple of (data, error). ``data`` is the new value on success, or
            ``current`` unchanged when no refresh was needed or the refresh
            failed. ``error`` is set only when a refresh was attempted and failed.
        """
        if not self.needs_refresh(current, force):
            return current, None

        try:
            fresh = self.compute()
        except FetchError as e:
            logger.warning(f"Keeping previous sun data after refresh failure: {e}")
            return current, e

        logger.info(
            f"Sun data refreshed - sunrise: {fresh.sunrise:%H:%M}, "
            f"sunset: {fresh.sunset:%H:%M}, "
            f"tomorrow's sunrise: {fresh.sunrise_tomorrow:%H:%M}"
        )
        return fresh, None

    def refresh(self, force: bool = False) -> Optional[FetchError]:
        """
        Update the held value in place.

        Returns:
            The refresh error, or None
        """
        self.data, error = self.update(self.data, force)
        return error
