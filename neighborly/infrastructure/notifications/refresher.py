"""Debounced re-fetch driven by refresh events, push callbacks and polling."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable
from typing import Any, Awaitable, Callable

from neighborly.domain.entities import RefreshEvent, RefreshEventType

from .refresh_bus import RefreshBus, Unsubscribe

logger = logging.getLogger(__name__)

Refetch = Callable[[], Awaitable[Any] | Any]
EventFilter = Callable[[RefreshEvent], bool]

DEFAULT_DEBOUNCE_SECONDS = 0.3

NOTIFICATION_REFRESH_EVENTS: tuple[RefreshEventType, ...] = (
    RefreshEventType.NOTIFICATIONS,
    RefreshEventType.NOTIFICATION_CREATED,
    RefreshEventType.NOTIFICATION_READ,
    RefreshEventType.NOTIFICATION_ARCHIVED,
    RefreshEventType.NOTIFICATIONS_ALL_READ,
    RefreshEventType.EVENT_RSVP_UPDATED,
    RefreshEventType.SKILLS_UPDATED,
    RefreshEventType.SAFETY_UPDATED,
    RefreshEventType.GOODS_UPDATED,
)

ACTIVITY_REFRESH_EVENTS: tuple[RefreshEventType, ...] = (
    RefreshEventType.ACTIVITIES_UPDATED,
    RefreshEventType.EVENT_SUBMITTED,
    RefreshEventType.EVENT_DELETED,
    RefreshEventType.SAFETY_UPDATED,
    RefreshEventType.GOODS_UPDATED,
    RefreshEventType.SKILLS_UPDATED,
    RefreshEventType.CARE_UPDATED,
)


class DebouncedRefresher:
    """Converge every refresh stimulus onto a single debounced ``refetch``.

    Bus events and :meth:`notify_push` schedule the refetch after
    ``debounce_seconds``; further triggers inside that window restart the
    timer. When ``poll_interval`` is set, a polling task calls the refetch on a
    fixed cadence. Refetches never overlap: a trigger that arrives while one is
    running causes exactly one follow-up run.

    Must be started from inside a running event loop. :meth:`close` detaches
    the bus handlers and cancels pending timers synchronously.
    """

    def __init__(
        self,
        bus: RefreshBus,
        refetch: Refetch,
        event_types: Iterable[RefreshEventType | str],
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        poll_interval: float | None = None,
        event_filter: EventFilter | None = None,
    ) -> None:
        self._bus = bus
        self._refetch = refetch
        self._event_types = tuple(RefreshEventType(event_type) for event_type in event_types)
        self._debounce_seconds = debounce_seconds
        self._poll_interval = poll_interval
        self._event_filter = event_filter

        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribers: list[Unsubscribe] = []
        self._pending: asyncio.TimerHandle | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._refreshing = False
        self._dirty = False
        self._closed = False
        self.refresh_count = 0

    @property
    def has_pending_refresh(self) -> bool:
        return self._pending is not None

    @property
    def is_running(self) -> bool:
        return self._loop is not None and not self._closed

    def start(self) -> "DebouncedRefresher":
        if self._closed:
            raise RuntimeError("Refresher has already been closed")
        if self._loop is not None:
            return self

        self._loop = asyncio.get_running_loop()
        self._unsubscribers = [
            self._bus.on(event_type, self._handle_event) for event_type in self._event_types
        ]
        if self._poll_interval:
            self._poll_task = self._loop.create_task(self._poll())
        logger.debug(
            "Refresher subscribed to %d event type(s), polling every %s",
            len(self._event_types),
            self._poll_interval,
        )
        return self

    def notify_push(self, payload: Any = None) -> None:
        """Handle an asynchronous push from the backing store."""

        self._schedule_threadsafe()

    def schedule(self) -> None:
        """Schedule a refetch after the debounce delay, restarting any pending one."""

        if self._closed or self._loop is None:
            return
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._loop.call_later(self._debounce_seconds, self._fire)

    async def refresh_now(self) -> None:
        """Run the refetch immediately, coalescing with any run in progress."""

        if self._closed:
            return
        if self._refreshing:
            self._dirty = True
            return

        self._refreshing = True
        try:
            while True:
                self._dirty = False
                await self._run_refetch()
                if not self._dirty or self._closed:
                    break
        finally:
            self._refreshing = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        for task in list(self._tasks):
            task.cancel()
        logger.debug("Refresher closed")

    def _handle_event(self, event: RefreshEvent) -> None:
        if self._event_filter is not None and not self._event_filter(event):
            return
        self._schedule_threadsafe()

    def _schedule_threadsafe(self) -> None:
        if self._closed or self._loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self.schedule()
        else:
            self._loop.call_soon_threadsafe(self.schedule)

    def _fire(self) -> None:
        self._pending = None
        if self._closed or self._loop is None:
            return
        task = self._loop.create_task(self.refresh_now())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_refetch(self) -> None:
        try:
            result = self._refetch()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Refresh refetch failed")
        else:
            self.refresh_count += 1

    async def _poll(self) -> None:
        assert self._poll_interval is not None
        while not self._closed:
            await asyncio.sleep(self._poll_interval)
            await self.refresh_now()


__all__ = [
    "ACTIVITY_REFRESH_EVENTS",
    "DEFAULT_DEBOUNCE_SECONDS",
    "DebouncedRefresher",
    "NOTIFICATION_REFRESH_EVENTS",
]
