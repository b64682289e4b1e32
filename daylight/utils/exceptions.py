"""Custom exceptions and error handling utilities for Daylight."""

from typing import Optional


class DaylightError(Exception):
    """Base exception for Daylight errors."""
    pass

class DaylightConfigError(DaylightError):
    """Exception raised for configuration errors."""
    pass

class FetchError(DaylightError):
    """Exception raised when sun data cannot be obtained from a source."""
    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(f"[{provider}] {message}" if provider else message)

class NetworkError(FetchError):
    """Exception raised when a remote sun data source is unreachable."""
    pass

class CalculationError(FetchError):
    """Exception raised when the solar solver cannot produce sunrise/sunset."""
    pass

class StartupFetchError(FetchError):
    """Exception raised when the first forced refresh at startup fails."""
    pass

class CreationError(DaylightError):
    """Exception raised when a temporary artifact cannot be created."""
    pass
