"""In-memory object storage for Plumb."""

import logging
import threading
from typing import Dict, List, Optional, Set

from .events import ObjectStoreEvent
from .objects import OBJECT_TYPES, PlumbObject

logger = logging.getLogger(__name__)


class ObjectStore:
    """
    Content-addressed store of immutable objects.

    Objects are keyed by digest and additionally indexed by kind. Both
    maps are updated under one lock, so a digest is never visible in one
    without the other.
    """

    def __init__(self, event_bus=None):
        """
        Initialize an empty store.

        Args:
            event_bus: Optional EventBus notified when objects are
                       added or removed
        """
        self._objects: Dict[str, PlumbObject] = {}
        self._type_index: Dict[str, Set[str]] = {kind: set() for kind in OBJECT_TYPES}
        self._lock = threading.Lock()
        self.event_bus = event_bus

    def store(self, obj: PlumbObject) -> str:
        """
        Write object to the store.

        Storing content that is already present is a no-op.

        Args:
            obj: Object to store

        Returns:
            str: Digest of the object
        """
        sha = obj.hash

        with self._lock:
            added = sha not in self._objects
            if added:
                self._objects[sha] = obj
                self._type_index[obj.type].add(sha)

        if added:
            logger.debug("Stored %s %s", obj.type, sha)
            self._notify('stored', sha, obj.type)
        return sha

    def retrieve(self, sha: str) -> Optional[PlumbObject]:
        with self._lock:
            return self._objects.get(sha)

    def exists(self, sha: str) -> bool:
        with self._lock:
            return sha in self._objects

    def delete(self, sha: str) -> bool:
        """
        Remove an object.

        Objects that other objects or refs still point at may be
        deleted; the resulting dangling links are reported by the
        graph analyzer.

        Returns:
            True if an object was removed, False if none was stored
        """
        with self._lock:
            obj = self._objects.pop(sha, None)
            if obj is None:
                return False
            self._type_index[obj.type].discard(sha)

        logger.debug("Deleted %s %s", obj.type, sha)
        self._notify('deleted', sha, obj.type)
        return True

    def all_digests(self) -> Set[str]:
        with self._lock:
            return set(self._objects)

    def by_kind(self, kind: str) -> List[PlumbObject]:
        """Return every stored object of the given kind, in no particular order."""
        with self._lock:
            return [self._objects[sha] for sha in self._type_index.get(kind, ())]

    def size_of(self, sha: str) -> Optional[int]:
        """Payload size in bytes, or None if the object is not stored."""
        obj = self.retrieve(sha)
        return obj.size if obj is not None else None

    def count(self) -> int:
        with self._lock:
            return len(self._objects)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, sha) -> bool:
        return self.exists(sha)

    def _notify(self, action: str, sha: str, kind: str) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(ObjectStoreEvent(action, sha, kind))

    def __repr__(self) -> str:
        return f"ObjectStore(objects={self.count()})"
