"""wttr.in sun data provider."""

import logging
from datetime import date, datetime
from typing import Any, Dict, Tuple

import requests

from .base import SunProvider
from ..config import LocationConfig
from ..utils.exceptions import FetchError, NetworkError
from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)


class WttrProvider(SunProvider):
    """Sunrise/sunset from the wttr.in weather service."""

    BASE_URL = "https://wttr.in"
    # wttr.in reports astronomy times like "07:04 AM" in the location's local time
    TIME_FORMAT = "%I:%M %p"
    requires_network = True

    def __init__(self, timeout: float = 10, session: requests.Session = None):
        """
        Initialize wttr.in provider.

        Args:
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        super().__init__()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    @retry_with_backoff(retries=2, backoff_in_seconds=1)
    def get_forecast(self, location: LocationConfig) -> Dict[str, Any]:
        """
        Get the three-day weather report for a location.

        Args:
            location: Observer location

        Returns:
            Decoded JSON report

        Raises:
            NetworkError: If the request fails or times out
            FetchError: If the response is not JSON
        """
        url = f"{self.BASE_URL}/{location.latitude},{location.longitude}"
        logger.info(f"Fetching {url}")

        try:
            response = self.session.get(url, params={'format': 'j1'}, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise NetworkError("Request timeout", self.name)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request failed: {str(e)}", self.name)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Error decoding JSON response: {e}", self.name)

    def get_sun_times(self, target_date: date, location: LocationConfig) -> Tuple[datetime, datetime]:
        """
        Get sunrise and sunset for ``target_date`` from the wttr.in report.

        Args:
            target_date: Local date at the observer's location
            location: Observer location

        Returns:
            Tuple of (sunrise, sunset) in the location's time zone

        Raises:
            FetchError: If the report has no usable entry for the date
        """
        report = self.get_forecast(location)
        date_str = target_date.isoformat()

        for day in report.get('weather', []):
            if day.get('date') != date_str:
                continue
            astronomy = (day.get('astronomy') or [{}])[0]
            return (
                self._parse(astronomy.get('sunrise'), target_date, location),
                self._parse(astronomy.get('sunset'), target_date, location),
            )

        raise FetchError(f"No data for {date_str}", self.name)

    def _parse(self, raw_time: str, target_date: date, location: LocationConfig) -> datetime:
        """Combine a wttr.in clock time with the target date in the location's zone."""
        try:
            parsed = datetime.strptime(raw_time or '', self.TIME_FORMAT)
        except ValueError:
            raise FetchError(f"Error parsing raw time: {raw_time!r}", self.name)
        return datetime.combine(target_date, parsed.time(), tzinfo=location.tzinfo)
