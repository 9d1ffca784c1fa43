"""Event queue that folds pending events for the same object into one."""

from __future__ import annotations

import enum
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Hashable, List, Optional

KeyFunc = Callable[[Any], Hashable]


class ActionType(str, enum.Enum):
    """The kind of change an event records."""

    ADDED = "Added"
    UPDATED = "Updated"
    DELETED = "Deleted"


@dataclass
class Event:
    """A change to one object, with the number of times it was put back."""

    action: ActionType
    object: Any
    reput_count: int = 0


class QueueClosedError(Exception):
    """Raised when popping from a closed, empty queue."""

    def __init__(self) -> None:
        super().__init__("queue is closed")


def pressure_events(older: Optional[Event], newer: Optional[Event]) -> Optional[Event]:
    """Fold a newer event for an object into an older pending one."""
    if newer is None:
        return older
    if older is None or newer.action is ActionType.DELETED or older.action == newer.action:
        return newer

    if newer.action is ActionType.UPDATED:
        if older.action is ActionType.DELETED:
            # Events from an informer arrive in order, so the deletion wins.
            return older
        if older.action is ActionType.ADDED:
            newer.action = ActionType.ADDED
        return newer

    # newer is an addition following a pending update or deletion
    if older.action is ActionType.DELETED:
        newer.action = ActionType.UPDATED
    return newer


class PressureQueue:
    """A FIFO of object keys where only the latest folded event per key is kept.

    A key that has been popped stays "processing" until ``done`` is called;
    events arriving meanwhile are held and the key is queued again on ``done``.
    """

    def __init__(self, key_func: KeyFunc) -> None:
        if key_func is None:
            raise ValueError("key_func is required")
        self._key_func = key_func
        self._cond = threading.Condition()
        self._processing: set = set()
        self._items: dict = {}
        self._queue: deque = deque()
        self._closed = False

    def add(self, obj: Any) -> None:
        self._queue_action(ActionType.ADDED, obj)

    def update(self, obj: Any) -> None:
        self._queue_action(ActionType.UPDATED, obj)

    def delete(self, obj: Any) -> None:
        self._queue_action(ActionType.DELETED, obj)

    def _queue_action(self, action: ActionType, obj: Any) -> None:
        key = self._key_func(obj)
        with self._cond:
            self._put(key, pressure_events(self._items.get(key), Event(action, obj)))

    def reput(self, event: Optional[Event]) -> None:
        """Put a popped event back, counting the attempt."""
        if event is None:
            return
        key = self._key_func(event.object)
        with self._cond:
            self._processing.discard(key)
            event.reput_count += 1
            self._put(key, pressure_events(event, self._items.get(key)))

    def _put(self, key: Hashable, event: Optional[Event]) -> None:
        if event is None:
            return
        if key not in self._processing and key not in self._items:
            self._queue.append(key)
        self._items[key] = event
        self._cond.notify_all()

    def done(self, event: Event) -> None:
        """Mark a popped event as handled, requeuing its key if changes are pending."""
        key = self._key_func(event.object)
        with self._cond:
            self._processing.discard(key)
            if key in self._items:
                self._queue.append(key)
            self._cond.notify_all()

    def pop(self) -> Event:
        """Block until an event is ready and return it."""
        with self._cond:
            while True:
                while not self._queue:
                    if self._closed:
                        raise QueueClosedError()
                    self._cond.wait()

                key = self._queue.popleft()
                event = self._items.pop(key, None)
                if event is None:
                    continue
                self._processing.add(key)
                return event

    def pop_all(self) -> List[Event]:
        """Return every queued event without blocking."""
        with self._cond:
            if not self._queue:
                if self._closed:
                    raise QueueClosedError()
                return []

            events = []
            for key in self._queue:
                event = self._items.get(key)
                if event is not None:
                    events.append(event)
                    self._processing.add(key)
            self._items = {}
            self._queue.clear()
            return events

    def __len__(self) -> int:
        with self._cond:
            return len(self._queue)

    def discard_and_retain(self, retain: int) -> bool:
        """Drop all but the first ``retain`` queued keys; report whether any were dropped."""
        with self._cond:
            if len(self._queue) <= retain:
                return False
            kept = list(self._queue)[:retain]
            self._queue = deque(kept)
            self._items = {key: self._items.get(key) for key in kept}
            return True

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()