"""Calendar reminders that end at sunset."""

import os
import sys
import uuid
import logging
import subprocess
from datetime import datetime, timedelta
from typing import Callable, Optional

from ics import Calendar, Event

from .tempfiles import ArtifactSet
from .utils.exceptions import CreationError

logger = logging.getLogger(__name__)

SUMMARY_FORMAT = "☀️ {minutes} minutes to sunset"


def open_with_default_app(path: str) -> None:
    """Hand a file to the platform's default application."""
    if sys.platform == 'win32':
        os.startfile(path)
    elif sys.platform == 'darwin':
        subprocess.run(['open', path], check=True)
    else:
        subprocess.run(['xdg-open', path], check=True)


def build_calendar(sunset: datetime, minutes: int, location_name: str) -> Calendar:
    """
    Build a calendar holding one event for the last ``minutes`` before sunset.

    Args:
        sunset: Sunset instant; the event ends here
        minutes: Event duration in minutes
        location_name: Shown as the event location

    Returns:
        Calendar with a single event
    """
    event = Event(
        name=SUMMARY_FORMAT.format(minutes=minutes),
        begin=sunset - timedelta(minutes=minutes),
        end=sunset,
        uid=str(uuid.uuid4()),
        location=location_name
    )
    calendar = Calendar()
    calendar.events.add(event)
    return calendar


class CalendarEventWriter:
    """Writes a sunset reminder to a temporary .ics file and opens it."""

    def __init__(
        self,
        artifacts: ArtifactSet,
        location_name: str,
        opener: Optional[Callable[[str], None]] = None
    ):
        """
        Args:
            artifacts: Registry that owns the generated files
            location_name: Location written into each event
            opener: Called with the file path once written
        """
        self.artifacts = artifacts
        self.location_name = location_name
        self.opener = opener or open_with_default_app

    def __call__(self, sunset: datetime, minutes: int) -> Optional[str]:
        """
        Create and open a reminder.

        Returns:
            Path of the written file, or None if it could not be created
        """
        logger.info(f"Creating a {minutes}-minute calendar event")
        calendar = build_calendar(sunset, minutes, self.location_name)

        try:
            handle = self.artifacts.new()
        except CreationError as e:
            logger.error(f"Encountered error creating temporary ICS file: {e}")
            return None

        try:
            with handle:
                handle.writelines(calendar.serialize_iter())
        except OSError as e:
            logger.error(f"Encountered error writing ICS file {handle.name}: {e}")
            return None

        try:
            self.opener(handle.name)
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Encountered error opening ICS file {handle.name}: {e}")

        return handle.name
