"""Sun data provider manager for handling multiple sources."""

from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
import logging

from .base import SunProvider
from .calculator import AstralProvider
from .wttr import WttrProvider
from ..config import LocationConfig
from ..utils.exceptions import FetchError


logger = logging.getLogger(__name__)


class SunProviderManager(SunProvider):
    """Composite provider trying a primary source, then the others as fallback."""

    # Registry of available providers
    PROVIDERS = {
        'astral': AstralProvider,
        'wttr': WttrProvider,
    }

    def __init__(
        self,
        providers: List[str] = None,
        primary_provider: str = None,
        fallback_enabled: bool = True,
        instances: Optional[Dict[str, SunProvider]] = None
    ):
        """
        Initialize provider manager.

        Args:
            providers: List of provider names to use (e.g. ['astral', 'wttr'])
            primary_provider: Name of the provider tried first
            fallback_enabled: Whether to try the other providers when the primary fails
            instances: Pre-built providers keyed by name, used instead of the registry
        """
        super().__init__()
        self.providers: Dict[str, SunProvider] = {}
        self.fallback_enabled = fallback_enabled
        self.last_provider_name: Optional[str] = None

        if instances:
            self.providers.update(instances)
        else:
            for provider_name in providers or ['astral']:
                try:
                    self.providers[provider_name] = self._create_provider(provider_name)
                    logger.info(f"Initialized sun data provider: {provider_name}")
                except FetchError as e:
                    logger.error(f"Failed to initialize provider {provider_name}: {e}")

        if not self.providers:
            raise FetchError("No sun data providers could be initialized")

        if primary_provider and primary_provider in self.providers:
            self.primary_provider_name = primary_provider
        else:
            self.primary_provider_name = list(self.providers.keys())[0]
            if primary_provider:
                logger.warning(
                    f"Primary provider not available, using {self.primary_provider_name}"
                )

    @classmethod
    def from_config(cls, providers_config) -> 'SunProviderManager':
        """Build a manager from a ``ProvidersConfig``."""
        return cls(
            providers=providers_config.providers,
            primary_provider=providers_config.primary_provider,
            fallback_enabled=providers_config.fallback_enabled
        )

    def _create_provider(self, provider_name: str) -> SunProvider:
        """
        Create a provider instance.

        Args:
            provider_name: Name of provider to create

        Returns:
            Initialized provider instance

        Raises:
            FetchError: If provider is unknown
        """
        if provider_name not in self.PROVIDERS:
            raise FetchError(f"Unknown provider: {provider_name}")
        return self.PROVIDERS[provider_name]()

    def _ordered(self) -> List[Tuple[str, SunProvider]]:
        primary = (self.primary_provider_name, self.providers[self.primary_provider_name])
        if not self.fallback_enabled:
            return [primary]
        return [primary] + [
            (name, provider) for name, provider in self.providers.items()
            if name != self.primary_provider_name
        ]

    def get_sun_times(
        self,
        target_date: date,
        location: LocationConfig
    ) -> Tuple[datetime, datetime]:
        """
        Get sunrise and sunset for a date, with automatic fallback.

        Args:
            target_date: Local date at the observer's location
            location: Observer location

        Returns:
            Tuple of (sunrise, sunset) from the first provider that succeeded;
            its name is kept in ``last_provider_name``

        Raises:
            FetchError: If every provider failed; the last provider error is chained
        """
        last_error: Optional[FetchError] = None

        for name, provider in self._ordered():
            try:
                sunrise, sunset = provider.get_sun_times(target_date, location)
            except FetchError as e:
                logger.warning(f"Provider {name} failed for {target_date}: {e}")
                last_error = e
                continue

            if name != self.primary_provider_name:
                logger.info(f"Using fallback provider: {name}")
            self.last_provider_name = name
            return sunrise, sunset

        if len(self.providers) == 1 or not self.fallback_enabled:
            raise last_error
        raise FetchError("All sun data providers failed") from last_error
