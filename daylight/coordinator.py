"""
Event loop that owns the sun data cache and the temporary artifacts.

Four event sources feed one queue: a refresh tick, a cleanup tick, manual
refresh requests and calendar event requests. A single consumer handles each
event to completion before taking the next, so the cache and what is rendered
from it never disagree.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from .sundata import SunData, SunDataCache
from .tempfiles import ArtifactSet
from .utils.exceptions import FetchError, StartupFetchError

logger = logging.getLogger(__name__)


class CoordinatorState(Enum):
    """Lifecycle states of the coordinator."""
    LOADING = "loading"
    READY = "ready"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RefreshTick:
    """Periodic check; refreshes only if the cached data is from another day."""


@dataclass(frozen=True)
class CleanupTick:
    """Periodic removal of temporary artifacts."""


@dataclass(frozen=True)
class ManualRefresh:
    """User request to recompute sun data now."""


@dataclass(frozen=True)
class CreateEvent:
    """User request for a calendar event covering the last ``minutes`` before sunset."""
    minutes: int


@dataclass(frozen=True)
class Shutdown:
    """Stop the event loop."""


class Coordinator:
    """Single-threaded event loop driving refreshes, cleanup and rendering."""

    def __init__(
        self,
        cache: SunDataCache,
        artifacts: ArtifactSet,
        render: Callable[[Optional[SunData]], object],
        create_event: Callable[[datetime, int], object],
        refresh_interval: float = 60,
        cleanup_interval: float = 15 * 60,
    ):
        """
        Initialize the coordinator.

        Args:
            cache: Sun data cache, used only from the loop
            artifacts: Temporary files to clean up periodically and on exit
            render: Presenter callback; receives None while loading
            create_event: Called with (sunset, minutes) for calendar requests
            refresh_interval: Seconds between refresh ticks
            cleanup_interval: Seconds between cleanup ticks
        """
        self.cache = cache
        self.artifacts = artifacts
        self.render = render
        self.create_event = create_event
        self.refresh_interval = refresh_interval
        self.cleanup_interval = cleanup_interval

        self.state = CoordinatorState.LOADING
        self.last_error: Optional[FetchError] = None

        self._handlers = {
            RefreshTick: self._on_refresh_tick,
            CleanupTick: self._on_cleanup_tick,
            ManualRefresh: self._on_manual_refresh,
            CreateEvent: self._on_create_event,
        }

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._pending: List[object] = []
        self._post_lock = threading.Lock()

    # Event intake

    def post(self, event) -> None:
        """Queue an event for the loop. Safe to call from any thread."""
        with self._post_lock:
            if self.state is CoordinatorState.STOPPED:
                logger.debug(f"Event loop stopped; dropping {event}")
                return
            if self._loop is None:
                self._pending.append(event)
                return
            loop = self._loop

        try:
            loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError:
            logger.debug(f"Event loop closed; dropping {event}")

    def request_refresh(self) -> None:
        self.post(ManualRefresh())

    def request_event(self, minutes: int) -> None:
        self.post(CreateEvent(minutes))

    def stop(self) -> None:
        self.post(Shutdown())

    # Handlers

    def _apply_refresh(self, force: bool) -> Optional[FetchError]:
        error = self.cache.refresh(force=force)
        if error is not None:
            self.last_error = error
            logger.error(f"Encountered error re-fetching data: {error}")
        elif self.cache.data is not None:
            self.last_error = None
        if self.cache.data is not None and self.state is CoordinatorState.LOADING:
            self.state = CoordinatorState.READY
        return error

    def startup(self) -> None:
        """Forced refresh and first render, before any event is handled."""
        error = self._apply_refresh(force=True)
        if error is not None:
            self.last_error = StartupFetchError(f"Initial fetch failed: {error}")
            logger.warning(str(self.last_error))
        self.render(self.cache.data)

    def _on_refresh_tick(self, event: RefreshTick) -> None:
        self._apply_refresh(force=False)
        self.render(self.cache.data)

    def _on_cleanup_tick(self, event: CleanupTick) -> None:
        self.artifacts.cleanup()

    def _on_manual_refresh(self, event: ManualRefresh) -> None:
        self.render(None)
        self._apply_refresh(force=True)
        self.render(self.cache.data)

    def _on_create_event(self, event: CreateEvent) -> None:
        data = self.cache.data
        if data is None:
            logger.warning(
                f"No sun data yet; ignoring request for a {event.minutes}-minute event"
            )
            return
        self.create_event(data.sunset, event.minutes)

    def dispatch(self, event) -> None:
        """Handle one event. Errors are logged; they never propagate to the loop."""
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning(f"Ignoring unknown event {event!r}")
            return
        try:
            handler(event)
        except Exception as e:
            logger.error(f"Error handling {type(event).__name__}: {e}")

    # Loop

    async def _tick(self, interval: float, event_type) -> None:
        while True:
            await asyncio.sleep(interval)
            self._queue.put_nowait(event_type())

    async def run(self) -> None:
        """Run until a ``Shutdown`` event arrives, then clean up artifacts."""
        self._queue = asyncio.Queue()
        with self._post_lock:
            self._loop = asyncio.get_running_loop()
            for event in self._pending:
                self._queue.put_nowait(event)
            self._pending.clear()

        try:
            self.startup()
        except Exception as e:
            logger.error(f"Error during startup: {e}")

        tickers = [
            asyncio.create_task(self._tick(self.refresh_interval, RefreshTick)),
            asyncio.create_task(self._tick(self.cleanup_interval, CleanupTick)),
        ]
        logger.info("Event loop started")

        try:
            while True:
                event = await self._queue.get()
                if isinstance(event, Shutdown):
                    break
                self.dispatch(event)
        finally:
            for task in tickers:
                task.cancel()
            await asyncio.gather(*tickers, return_exceptions=True)
            self.shutdown()
            with self._post_lock:
                self._loop = None
                self._pending.clear()

    def shutdown(self) -> None:
        """Final cleanup; safe to call more than once."""
        if self.state is CoordinatorState.STOPPED:
            return
        self.artifacts.cleanup()
        self.state = CoordinatorState.STOPPED
        logger.info("Event loop stopped")
