"""Event notifications for Plumb.

Ref changes and object store writes are published here for whoever
wants to observe them (audit logs, monitors). Publishing never fails
the operation that triggered it.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceEvent:
    """A ref moved from old_sha to new_sha ('' means absent or unborn)."""
    ref_name: str
    old_sha: str
    new_sha: str
    timestamp: float = field(default_factory=time.time)

    event_type: ClassVar[str] = 'reference'


@dataclass(frozen=True)
class ObjectStoreEvent:
    """An object was added to or removed from the store."""
    action: str
    sha: str
    object_type: str
    timestamp: float = field(default_factory=time.time)

    event_type: ClassVar[str] = 'object_store'


Listener = Callable[[object], None]


class EventBus:
    """
    Synchronous publish/subscribe hub.

    Listeners are called in subscription order on the publishing
    thread. A listener that raises is logged and skipped.
    """

    def __init__(self, history_size: int = 1000):
        self._listeners: Dict[str, List[Listener]] = {}
        self._history = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: str, listener: Listener) -> bool:
        with self._lock:
            listeners = self._listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)
                return True
        return False

    def publish(self, event) -> None:
        with self._lock:
            self._history.append(event)
            listeners = list(self._listeners.get(event.event_type, ()))

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s event", listener, event.event_type)

    def recent_events(self, limit: int = 10) -> list:
        """Most recent events, oldest first."""
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        with self._lock:
            events = list(self._history)
        return events[-limit:] if limit else []

    def events_by_type(self, event_type: str) -> list:
        with self._lock:
            return [e for e in self._history if e.event_type == event_type]

    def all_events(self) -> list:
        with self._lock:
            return list(self._history)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
