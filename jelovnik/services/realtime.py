"""
Realtime change feed for the jelovnik table.
Every committed store mutation is published as an INSERT/UPDATE/DELETE event; subscribers
(SSE streams, in-process listeners) each get their own bounded queue. MenuState is the
client-side mirror: three reducers replace or remove entries by external_id, last write wins.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Optional

from jelovnik.config import get_settings
from jelovnik.schemas.menu import MenuItemSchema

logger = logging.getLogger(__name__)


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    event_type: ChangeType
    new: Optional[dict[str, Any]] = None
    old: Optional[dict[str, Any]] = None

    @classmethod
    def inserted(cls, item: MenuItemSchema) -> "ChangeEvent":
        return cls(ChangeType.INSERT, new=item.model_dump(mode="json"))

    @classmethod
    def updated(cls, item: MenuItemSchema, old: Optional[MenuItemSchema] = None) -> "ChangeEvent":
        return cls(
            ChangeType.UPDATE,
            new=item.model_dump(mode="json"),
            old=old.model_dump(mode="json") if old is not None else None,
        )

    @classmethod
    def deleted(cls, item: MenuItemSchema) -> "ChangeEvent":
        return cls(ChangeType.DELETE, old=item.model_dump(mode="json"))

    def to_payload(self) -> dict[str, Any]:
        return {"eventType": self.event_type.value, "new": self.new, "old": self.old}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChangeEvent":
        return cls(ChangeType(payload["eventType"]), new=payload.get("new"), old=payload.get("old"))


# Wakes a consumer blocked in Subscription.get after the feed cut it off
_CLOSED = object()


@dataclass(eq=False)
class Subscription:
    queue: asyncio.Queue
    event_mask: frozenset[ChangeType]
    closed: bool = False

    def accepts(self, event: ChangeEvent) -> bool:
        return event.event_type in self.event_mask

    def close(self) -> None:
        """Mark the subscription as cut off; pending events are discarded."""
        self.closed = True
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(_CLOSED)

    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Next event, or None on timeout. Once closed, always None; check `closed` to tell the two apart."""
        if self.closed:
            return None
        try:
            item = await asyncio.wait_for(self.queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None
        return None if item is _CLOSED else item


class ChangeFeed:
    def __init__(self, queue_size: int = 100) -> None:
        self.queue_size = queue_size
        self._subscribers: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, event_mask: Optional[Iterable[ChangeType]] = None) -> Subscription:
        mask = frozenset(event_mask) if event_mask is not None else frozenset(ChangeType)
        sub = Subscription(queue=asyncio.Queue(maxsize=self.queue_size), event_mask=mask)
        self._subscribers.add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        self._subscribers.discard(sub)

    def publish(self, event: ChangeEvent) -> None:
        for sub in list(self._subscribers):
            if not sub.accepts(event):
                continue
            try:
                sub.queue.put_nowait(event)
            except asyncio.QueueFull:
                # A stalled consumer is cut off; it must refetch and resubscribe.
                logger.warning("change_feed_subscriber_dropped", extra={"event_type": event.event_type.value})
                self._subscribers.discard(sub)
                sub.close()

    def publish_all(self, events: Iterable[ChangeEvent]) -> None:
        for event in events:
            self.publish(event)


@lru_cache
def get_change_feed() -> ChangeFeed:
    return ChangeFeed(queue_size=get_settings().realtime_queue_size)


@dataclass
class MenuState:
    """In-memory item list kept current by change events."""

    items: list[MenuItemSchema] = field(default_factory=list)

    def on_insert(self, item: MenuItemSchema) -> None:
        self.items.append(item)

    def on_update(self, item: MenuItemSchema) -> None:
        self.items = [item if existing.external_id == item.external_id else existing for existing in self.items]

    def on_delete(self, external_id: str) -> None:
        self.items = [existing for existing in self.items if existing.external_id != external_id]

    def apply(self, event: ChangeEvent) -> None:
        if event.event_type is ChangeType.INSERT and event.new:
            self.on_insert(MenuItemSchema.model_validate(event.new))
        elif event.event_type is ChangeType.UPDATE and event.new:
            self.on_update(MenuItemSchema.model_validate(event.new))
        elif event.event_type is ChangeType.DELETE and event.old:
            self.on_delete(event.old["external_id"])
