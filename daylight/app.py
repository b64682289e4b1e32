"""Main application module for Daylight."""

import os
import sys
import atexit
import signal
import logging
import asyncio
import argparse
import threading
from typing import Optional, TextIO

from .calendar_event import CalendarEventWriter
from .config import ConfigManager
from .coordinator import Coordinator
from .presenter import ConsolePresenter, render_state
from .sun import SunProviderManager
from .sundata import SunDataCache
from .tempfiles import ArtifactSet
from .utils import (
    setup_logging,
    get_logger,
    DaylightError,
    DaylightConfigError
)

DEFAULT_CONFIG_PATHS = (
    os.path.join(os.path.expanduser('~'), '.config', 'daylight', 'daylight.ini'),
    os.path.join('conf', 'daylight.ini'),
)

HELP_TEXT = """Commands:
  r            Refresh sunlight data now
  e MINUTES    Create a calendar event for the last MINUTES before sunset ({choices})
  h            Show this help
  q            Quit"""


class DaylightApp:
    """Main application class for Daylight."""

    def __init__(self, config_path: str, debug: bool = False, stream: Optional[TextIO] = None):
        """
        Initialize the Daylight application.

        Args:
            config_path: Path to configuration file
            debug: Log at DEBUG level regardless of configuration
            stream: Where status lines are written, stdout by default
        """
        self.config = ConfigManager(config_path)
        logging_config = self.config.logging

        self.logger = setup_logging(
            log_dir=logging_config.log_dir,
            log_file=logging_config.log_file,
            level=logging.DEBUG if debug else logging_config.level_number,
            add_console_handler=debug
        )

        try:
            self.location = self.config.location
            self.schedule = self.config.schedule
            self.calendar = self.config.calendar

            self.provider = SunProviderManager.from_config(self.config.providers)
            self.cache = SunDataCache(self.provider, self.location)
            self.artifacts = ArtifactSet(self.calendar.file_name_template)
            self.presenter = ConsolePresenter(stream=stream, clock=self.cache.now)
            self.event_writer = CalendarEventWriter(self.artifacts, self.location.name)

            self.coordinator = Coordinator(
                cache=self.cache,
                artifacts=self.artifacts,
                render=self.presenter.render,
                create_event=self.event_writer,
                refresh_interval=self.schedule.refresh_interval_seconds,
                cleanup_interval=self.schedule.cleanup_interval_seconds,
            )

        except Exception as e:
            self.logger.error(f"Failed to initialize application: {e}")
            raise

        get_logger(__name__, {'location': self.location.name}).info(
            f"Daylight configured for {self.location.name} "
            f"({self.location.latitude}, {self.location.longitude})"
        )

    def run_once(self) -> int:
        """Refresh once, print the status and return an exit code."""
        error = self.cache.refresh(force=True)
        state = render_state(self.cache.data, self.cache.now())
        print(f"{state.title}  {state.detail}")
        if error is not None:
            print(f"Error: {error}", file=sys.stderr)
            return 1
        return 0

    def handle_command(self, line: str) -> bool:
        """
        Translate one line of user input into a coordinator event.

        Returns:
            False once the user asked to quit
        """
        parts = line.strip().lower().split()
        if not parts:
            return True

        command, args = parts[0], parts[1:]
        if command in ('q', 'quit'):
            self.coordinator.stop()
            return False
        if command in ('r', 'refresh'):
            self.coordinator.request_refresh()
        elif command in ('e', 'event'):
            minutes = self._parse_minutes(args)
            if minutes is not None:
                self.coordinator.request_event(minutes)
        else:
            choices = ', '.join(str(m) for m in self.calendar.event_minutes)
            print(HELP_TEXT.format(choices=choices))
        return True

    def _parse_minutes(self, args) -> Optional[int]:
        if not args:
            return self.calendar.event_minutes[0]
        try:
            minutes = int(args[0])
        except ValueError:
            print(f"Not a number of minutes: {args[0]}")
            return None
        if minutes <= 0:
            print("Minutes must be positive")
            return None
        return minutes

    def _read_commands(self, stream: TextIO) -> None:
        for line in stream:
            if not self.handle_command(line):
                return
        # End of input: keep running on the timers alone

    def start_command_reader(self, stream: TextIO = None) -> threading.Thread:
        """Read commands from ``stream`` (stdin) in a daemon thread."""
        reader = threading.Thread(
            target=self._read_commands,
            args=(stream or sys.stdin,),
            daemon=True,
            name='daylight-commands',
        )
        reader.start()
        return reader

    def run(self, read_input: bool = True) -> None:
        """Run the event loop until quit or a termination signal."""
        atexit.register(self.artifacts.cleanup)

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                signal.signal(sig, lambda signum, frame: self.coordinator.stop())
            except ValueError:
                # Not the main thread
                pass

        if read_input:
            self.start_command_reader()

        self.logger.info("[ STARTING DAYLIGHT ]")
        try:
            asyncio.run(self.coordinator.run())
        finally:
            self.coordinator.shutdown()
            self.logger.info("[ CLOSING DAYLIGHT ]")


def find_config_path(explicit: Optional[str] = None) -> str:
    """
    Resolve the configuration file path.

    Order: explicit argument, ``DAYLIGHT_CONFIG``, the user config directory,
    then ``conf/daylight.ini``. The last candidate is returned even if it does
    not exist so the error names a concrete path.
    """
    if explicit:
        return explicit

    env_path = os.getenv('DAYLIGHT_CONFIG')
    if env_path:
        return env_path

    for candidate in DEFAULT_CONFIG_PATHS:
        if os.path.exists(candidate):
            return candidate
    return DEFAULT_CONFIG_PATHS[-1]


def main(argv=None):
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        prog='daylight',
        description='Show the time left until sunset and create sunset reminders.'
    )
    parser.add_argument('-c', '--config', metavar='FILE', help='Path to the INI configuration file')
    parser.add_argument('--once', action='store_true', help='Print the current status and exit')
    parser.add_argument('--no-input', action='store_true', help='Do not read commands from stdin')
    parser.add_argument('--debug', action='store_true', help='Log at DEBUG level to the console')
    args = parser.parse_args(argv)

    config_path = find_config_path(args.config)

    try:
        app = DaylightApp(config_path, debug=args.debug)
        if args.once:
            return app.run_once()
        app.run(read_input=not args.no_input)

    except DaylightConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except DaylightError as e:
        print(f"Application failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
