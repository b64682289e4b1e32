"""Sun data provider system for sunrise/sunset times."""

from .base import SunProvider
from .calculator import SunCalculator, AstralProvider, utc_offset_hours
from .wttr import WttrProvider
from .manager import SunProviderManager

__all__ = [
    'SunProvider',
    'SunCalculator',
    'AstralProvider',
    'utc_offset_hours',
    'WttrProvider',
    'SunProviderManager',
]
