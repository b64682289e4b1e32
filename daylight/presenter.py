"""Rendering of sun data into status text."""

import sys
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, TextIO

from .sundata import SunData

logger = logging.getLogger(__name__)

# Used between launch and the first successful refresh
TITLE_LOADING = "◌"
# The present time is before sunrise or after sunset
TITLE_DARK = "◻"
# The present time is between sunrise and sunset; formats the time until sunset
TITLE_DAYLIGHT_FORMAT = "◼ {}"


@dataclass(frozen=True)
class RenderState:
    """Text shown in the status area (``title``) and its menu (``detail``)."""
    title: str
    detail: str


def format_duration(delta: timedelta) -> str:
    """Format a duration rounded to the minute as e.g. ``2h5m``."""
    minutes = max(0, round(delta.total_seconds() / 60))
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes}m"


def render_state(data: Optional[SunData], now: datetime) -> RenderState:
    """
    Compute what to display for ``data`` at ``now``.

    Args:
        data: Current sun data, or None while loading or unavailable
        now: Current time

    Returns:
        RenderState for the status area
    """
    if data is None:
        return RenderState(TITLE_LOADING, "Loading sunlight data...")

    if now < data.sunrise:
        until = format_duration(data.sunrise - now)
        return RenderState(TITLE_DARK, f"{until} until sunrise")

    if now > data.sunset:
        until = format_duration(data.sunrise_tomorrow - now)
        return RenderState(TITLE_DARK, f"{until} until sunrise")

    until = format_duration(data.sunset - now)
    return RenderState(TITLE_DAYLIGHT_FORMAT.format(until), f"{until} until sunset")


class ConsolePresenter:
    """Writes the status line to a text stream whenever it changes."""

    def __init__(self, stream: TextIO = None, clock=None):
        """
        Args:
            stream: Output stream, stdout by default
            clock: Callable returning the current aware datetime
        """
        self.stream = stream or sys.stdout
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.last_state: Optional[RenderState] = None

    def render(self, data: Optional[SunData]) -> RenderState:
        state = render_state(data, self.clock())
        if state != self.last_state:
            logger.debug(f"Rendering {state.title!r} / {state.detail!r}")
            self.stream.write(f"{state.title}  {state.detail}\n")
            self.stream.flush()
            self.last_state = state
        return state
