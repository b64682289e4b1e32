"""Base interface for sun data providers."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, Tuple

from ..config import LocationConfig


class SunProvider(ABC):
    """Abstract base class for sunrise/sunset sources."""

    requires_network = False

    def __init__(self):
        self.name = self.__class__.__name__.replace('Provider', '').lower()

    @abstractmethod
    def get_sun_times(self, target_date: date, location: LocationConfig) -> Tuple[datetime, datetime]:
        """
        Get sunrise and sunset for a local calendar date.

        Args:
            target_date: Local date at the observer's location
            location: Observer location

        Returns:
            Tuple of timezone-aware (sunrise, sunset) datetimes

        Raises:
            FetchError: If the source cannot provide times for that date
        """
        pass

    def get_provider_info(self) -> Dict[str, str]:
        """
        Get information about this provider.

        Returns:
            Dictionary with provider metadata
        """
        return {
            'name': self.name,
            'requires_network': str(self.requires_network).lower()
        }
