"""Reference change history for Plumb."""

import itertools
import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, List

from .events import ReferenceEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefChange:
    """One recorded move of a ref. '' stands for absent or unborn."""
    ref_name: str
    old_target: str
    new_target: str
    timestamp: float
    operation: str
    sequence: int

    def __repr__(self) -> str:
        old = self.old_target[:7] or '(none)'
        new = self.new_target[:7] or '(none)'
        return f"RefChange({self.operation} {self.ref_name} {old} -> {new})"


class RefHistoryTracker:
    """
    Append-only log of ref changes, kept per ref name.

    Each change gets a wall-clock timestamp and a tracker-wide sequence
    number. Ordering uses the sequence number only, since the wall clock
    can move backwards.
    """

    def __init__(self, event_bus=None):
        """
        Initialize tracker.

        Args:
            event_bus: Optional EventBus that receives a ReferenceEvent
                       for every recorded change
        """
        self._history: Dict[str, List[RefChange]] = {}
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()
        self.event_bus = event_bus

    def record_change(self, ref_name: str, old_sha: str, new_sha: str, operation: str) -> RefChange:
        """
        Append a change to ref_name's log and publish it.

        Args:
            ref_name: Full ref name (e.g., 'refs/heads/main', 'HEAD')
            old_sha: Previous target ('' if the ref did not exist)
            new_sha: New target ('' if the ref was deleted)
            operation: What happened (create, update, delete, ...)

        Returns:
            RefChange: The recorded entry
        """
        change = self.append(ref_name, old_sha, new_sha, operation)
        self.publish(change)
        return change

    def append(self, ref_name: str, old_sha: str, new_sha: str, operation: str) -> RefChange:
        """Append a change to ref_name's log without publishing it."""
        with self._lock:
            change = RefChange(
                ref_name, old_sha, new_sha, time.time(), operation, next(self._sequence)
            )
            self._history.setdefault(ref_name, []).append(change)
        return change

    def publish(self, change: RefChange) -> None:
        """Send a recorded change to the event bus, if there is one."""
        if self.event_bus is not None:
            self.event_bus.publish(ReferenceEvent(
                change.ref_name, change.old_target, change.new_target, change.timestamp
            ))

    def history_for(self, ref_name: str) -> List[RefChange]:
        with self._lock:
            return list(self._history.get(ref_name, ()))

    def all_history(self) -> Dict[str, List[RefChange]]:
        with self._lock:
            return {name: list(changes) for name, changes in self._history.items()}

    def recent_changes(self, limit: int = 10) -> List[RefChange]:
        """
        Most recent changes across all refs, newest first.

        Raises:
            ValueError: If limit is negative
        """
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        with self._lock:
            changes = [c for entries in self._history.values() for c in entries]

        changes.sort(key=lambda c: c.sequence, reverse=True)
        return changes[:limit]
