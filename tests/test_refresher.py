"""Tests for the debounced refresher driving re-fetches."""

from __future__ import annotations

import asyncio
import logging

import pytest

from neighborly.domain.entities import RefreshEventType
from neighborly.infrastructure.notifications import (
    NOTIFICATION_REFRESH_EVENTS,
    DebouncedRefresher,
    RefreshBus,
)

DEBOUNCE = 0.05


class CountingRefetch:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls = 0
        self.delay = delay

    async def __call__(self) -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)


@pytest.mark.asyncio
async def test_burst_of_events_triggers_single_refetch(bus: RefreshBus) -> None:
    refetch = CountingRefetch()
    refresher = DebouncedRefresher(
        bus, refetch, NOTIFICATION_REFRESH_EVENTS, debounce_seconds=DEBOUNCE
    ).start()
    try:
        for _ in range(5):
            bus.emit(RefreshEventType.NOTIFICATION_READ, user_id="bob")
        assert refresher.has_pending_refresh
        await asyncio.sleep(DEBOUNCE * 4)
    finally:
        refresher.close()

    assert refetch.calls == 1
    assert refresher.refresh_count == 1


@pytest.mark.asyncio
async def test_close_detaches_and_cancels_pending_refetch(bus: RefreshBus) -> None:
    refetch = CountingRefetch()
    refresher = DebouncedRefresher(
        bus, refetch, NOTIFICATION_REFRESH_EVENTS, debounce_seconds=DEBOUNCE
    ).start()
    bus.emit(RefreshEventType.NOTIFICATIONS)

    refresher.close()
    await asyncio.sleep(DEBOUNCE * 3)
    bus.emit(RefreshEventType.NOTIFICATIONS)

    assert refetch.calls == 0
    assert bus.subscriber_count() == 0
    assert not refresher.has_pending_refresh
    assert not refresher.is_running


@pytest.mark.asyncio
async def test_push_notifications_share_the_debounce(bus: RefreshBus) -> None:
    refetch = CountingRefetch()
    refresher = DebouncedRefresher(
        bus, refetch, NOTIFICATION_REFRESH_EVENTS, debounce_seconds=DEBOUNCE
    ).start()
    try:
        refresher.notify_push({"eventType": "UPDATE"})
        bus.emit(RefreshEventType.NOTIFICATION_ARCHIVED)
        await asyncio.sleep(DEBOUNCE * 4)
    finally:
        refresher.close()

    assert refetch.calls == 1


@pytest.mark.asyncio
async def test_polling_refetches_without_events(bus: RefreshBus) -> None:
    refetch = CountingRefetch()
    refresher = DebouncedRefresher(
        bus, refetch, NOTIFICATION_REFRESH_EVENTS, poll_interval=0.05
    ).start()
    try:
        await asyncio.sleep(0.18)
    finally:
        refresher.close()

    assert refetch.calls >= 2


@pytest.mark.asyncio
async def test_event_filter_ignores_other_recipients(bus: RefreshBus) -> None:
    refetch = CountingRefetch()
    refresher = DebouncedRefresher(
        bus,
        refetch,
        NOTIFICATION_REFRESH_EVENTS,
        debounce_seconds=DEBOUNCE,
        event_filter=lambda event: event.payload.get("user_id") == "bob",
    ).start()
    try:
        bus.emit(RefreshEventType.NOTIFICATIONS, user_id="carol")
        assert not refresher.has_pending_refresh
        bus.emit(RefreshEventType.NOTIFICATIONS, user_id="bob")
        await asyncio.sleep(DEBOUNCE * 4)
    finally:
        refresher.close()

    assert refetch.calls == 1


@pytest.mark.asyncio
async def test_concurrent_refreshes_coalesce(bus: RefreshBus) -> None:
    refetch = CountingRefetch(delay=0.03)
    refresher = DebouncedRefresher(bus, refetch, NOTIFICATION_REFRESH_EVENTS).start()
    try:
        await asyncio.gather(
            refresher.refresh_now(), refresher.refresh_now(), refresher.refresh_now()
        )
    finally:
        refresher.close()

    assert refetch.calls == 2


@pytest.mark.asyncio
async def test_refetch_errors_are_logged(
    bus: RefreshBus, caplog: pytest.LogCaptureFixture
) -> None:
    def failing_refetch() -> None:
        raise RuntimeError("backend unavailable")

    refresher = DebouncedRefresher(bus, failing_refetch, NOTIFICATION_REFRESH_EVENTS).start()
    try:
        with caplog.at_level(logging.ERROR):
            await refresher.refresh_now()
    finally:
        refresher.close()

    assert refresher.refresh_count == 0
    assert "Refresh refetch failed" in caplog.text


def test_start_requires_running_loop(bus: RefreshBus) -> None:
    refresher = DebouncedRefresher(bus, CountingRefetch(), NOTIFICATION_REFRESH_EVENTS)

    with pytest.raises(RuntimeError):
        refresher.start()
