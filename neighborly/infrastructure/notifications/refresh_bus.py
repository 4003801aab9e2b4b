"""Named publish/subscribe channel for refresh signals."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Literal

from neighborly.domain.entities import RefreshEvent, RefreshEventType

logger = logging.getLogger(__name__)

RefreshHandler = Callable[[RefreshEvent], Any]
Unsubscribe = Callable[[], None]

ContentOperation = Literal["create", "update", "delete"]

_CONTENT_EVENTS: dict[str, RefreshEventType] = {
    "event": RefreshEventType.EVENT_SUBMITTED,
    "safety": RefreshEventType.SAFETY_UPDATED,
    "goods": RefreshEventType.GOODS_UPDATED,
    "skills": RefreshEventType.SKILLS_UPDATED,
    "care": RefreshEventType.CARE_UPDATED,
    "notification": RefreshEventType.NOTIFICATIONS,
    "activity": RefreshEventType.ACTIVITIES_UPDATED,
    "neighbor": RefreshEventType.NEIGHBORS_UPDATED,
}


class RefreshBus:
    """Dispatch refresh events to the handlers registered for each event type.

    Handlers run synchronously in the emitting thread. A handler that raises is
    logged and skipped so the remaining subscribers still run.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[RefreshEventType, list[RefreshHandler]] = defaultdict(list)

    def on(self, event_type: RefreshEventType | str, handler: RefreshHandler) -> Unsubscribe:
        """Register ``handler`` and return the callable that detaches it."""

        key = RefreshEventType(event_type)
        self._handlers[key].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(key)
            if handlers is None:
                return
            try:
                handlers.remove(handler)
            except ValueError:
                return
            if not handlers:
                self._handlers.pop(key, None)

        return unsubscribe

    def emit(self, event_type: RefreshEventType | str, **payload: Any) -> int:
        """Notify every subscriber of ``event_type``; return how many ran."""

        event = RefreshEvent(event_type=RefreshEventType(event_type), payload=payload)
        handlers = list(self._handlers.get(event.event_type, ()))
        logger.debug(
            "Emitting refresh event %s to %d handler(s)",
            event.event_type.value,
            len(handlers),
        )
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Refresh handler %r failed for %s", handler, event.event_type.value
                )
        return len(handlers)

    def subscriber_count(self, event_type: RefreshEventType | str | None = None) -> int:
        if event_type is None:
            return sum(len(handlers) for handlers in self._handlers.values())
        return len(self._handlers.get(RefreshEventType(event_type), ()))


def emit_content_change(
    bus: RefreshBus, operation: ContentOperation, content_type: str, **payload: Any
) -> bool:
    """Emit the refresh events that follow a change to domain content.

    Neighbor joins and goods creation also produce feed activities, so they
    refresh the activity feed as well. Deleted events emit ``event-deleted``.
    Returns ``False`` for unknown content types.
    """

    event_type = _CONTENT_EVENTS.get(content_type)
    if event_type is None:
        logger.warning("No refresh event registered for content type: %s", content_type)
        return False

    if content_type == "event" and operation == "delete":
        event_type = RefreshEventType.EVENT_DELETED
    bus.emit(event_type, **payload)

    if operation == "create" and content_type in {"neighbor", "goods"}:
        bus.emit(RefreshEventType.ACTIVITIES_UPDATED, **payload)
    if content_type == "neighbor" and operation == "create":
        bus.emit(RefreshEventType.NOTIFICATIONS, **payload)
    return True


refresh_bus = RefreshBus()


__all__ = [
    "RefreshBus",
    "RefreshHandler",
    "Unsubscribe",
    "emit_content_change",
    "refresh_bus",
]
