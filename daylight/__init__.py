"""Daylight: time until sunset, and calendar reminders before it."""

__version__ = "0.1.0"
