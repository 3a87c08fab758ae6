"""Reference management for Plumb."""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from .hash import is_valid_digest

logger = logging.getLogger(__name__)

HEAD = 'HEAD'
REFS_PREFIX = 'refs/'
HEADS_PREFIX = 'refs/heads/'
TAGS_PREFIX = 'refs/tags/'

_NAME_PUNCTUATION = frozenset('-_.')


@dataclass(frozen=True)
class Ref:
    """A named pointer to a digest. An empty target means unborn."""
    name: str
    target: str = ''

    @property
    def is_branch(self) -> bool:
        return self.name.startswith(HEADS_PREFIX)

    @property
    def is_tag(self) -> bool:
        return self.name.startswith(TAGS_PREFIX)

    @property
    def is_head(self) -> bool:
        return self.name == HEAD

    @property
    def is_unborn(self) -> bool:
        return not self.target

    @property
    def short_name(self) -> str:
        for prefix in (HEADS_PREFIX, TAGS_PREFIX):
            if self.name.startswith(prefix):
                return self.name[len(prefix):]
        return self.name

    def __repr__(self) -> str:
        target = self.target[:7] if self.target else '(unborn)'
        return f"Ref({self.name} -> {target})"


def is_valid_ref_name(name: str) -> bool:
    """
    Check a branch or tag short name.

    Names must be non-empty, must not start or end with '/', must not
    contain '..' or '//', and may only contain alphanumerics, '-', '_'
    and '.'.
    """
    if not isinstance(name, str) or not name:
        return False
    if name.startswith('/') or name.endswith('/'):
        return False
    if '..' in name or '//' in name:
        return False
    return all(ch.isalnum() or ch in _NAME_PUNCTUATION for ch in name)


class RefManager:
    """
    Manages references (branches, tags, HEAD).

    Handles:
    - Branch references (refs/heads/*)
    - Tag references (refs/tags/*)
    - HEAD, which always exists and starts out unborn
    - Reference resolution and name validation

    Refs only hold digests. Whether the target object exists is not
    checked here; see GraphAnalyzer.validate_ref_integrity.

    Changes are appended to the history while the lock is held, so each
    ref's log follows the order its writes were applied. Events are
    published after the lock is released, so listeners may call back
    into the manager. Writes that leave a target unchanged record nothing.
    """

    def __init__(self, history=None):
        """
        Initialize reference manager.

        Args:
            history: Optional RefHistoryTracker that records every
                     successful mutation
        """
        self._refs: Dict[str, Ref] = {}
        self._head = Ref(HEAD)
        self._lock = threading.RLock()
        self.history = history

    def _record(self, ref_name: str, old: str, new: str, operation: str):
        """Log a change while the lock is held. Returns it for publishing, or None."""
        logger.debug("%s %s: %s -> %s", operation, ref_name, old or '(none)', new or '(none)')
        if self.history is None:
            return None
        return self.history.append(ref_name, old, new, operation)

    def _publish(self, change) -> None:
        if change is not None:
            self.history.publish(change)

    def _write_ref(self, full_name: str, sha: str) -> None:
        with self._lock:
            old = self._refs.get(full_name)
            if old is not None and old.target == sha:
                return
            self._refs[full_name] = Ref(full_name, sha)
            operation = 'update' if old is not None else 'create'
            change = self._record(full_name, old.target if old else '', sha, operation)
        self._publish(change)

    def _delete_ref(self, full_name: str) -> bool:
        with self._lock:
            old = self._refs.pop(full_name, None)
            if old is None:
                return False
            change = self._record(full_name, old.target, '', 'delete')
        self._publish(change)
        return True

    def create_branch(self, name: str, sha: str) -> bool:
        """
        Create a branch, or move it if it already exists.

        Args:
            name: Branch short name
            sha: 40-character digest to point to

        Returns:
            True if written, False if the name or digest is malformed
        """
        if not is_valid_ref_name(name) or not is_valid_digest(sha):
            return False
        self._write_ref(HEADS_PREFIX + name, sha)
        return True

    def delete_branch(self, name: str) -> bool:
        """Delete a branch. Returns False if it does not exist."""
        return self._delete_ref(HEADS_PREFIX + name)

    def get_branch(self, name: str) -> Optional[Ref]:
        with self._lock:
            return self._refs.get(HEADS_PREFIX + name)

    def list_branches(self) -> List[Ref]:
        with self._lock:
            return sorted((r for r in self._refs.values() if r.is_branch), key=lambda r: r.name)

    def create_tag(self, name: str, sha: str) -> bool:
        """
        Create a tag, or move it if it already exists.

        Returns:
            True if written, False if the name or digest is malformed
        """
        if not is_valid_ref_name(name) or not is_valid_digest(sha):
            return False
        self._write_ref(TAGS_PREFIX + name, sha)
        return True

    def delete_tag(self, name: str) -> bool:
        return self._delete_ref(TAGS_PREFIX + name)

    def get_tag(self, name: str) -> Optional[Ref]:
        with self._lock:
            return self._refs.get(TAGS_PREFIX + name)

    def list_tags(self) -> List[Ref]:
        with self._lock:
            return sorted((r for r in self._refs.values() if r.is_tag), key=lambda r: r.name)

    def update_head(self, sha: str) -> bool:
        """
        Point HEAD at a digest.

        Returns:
            True if updated, False if the digest is malformed
        """
        if not is_valid_digest(sha):
            return False
        with self._lock:
            old = self._head
            if old.target == sha:
                return True
            self._head = Ref(HEAD, sha)
            change = self._record(HEAD, old.target, sha, 'update')
        self._publish(change)
        return True

    def get_head(self) -> Ref:
        with self._lock:
            return self._head

    def current_commit(self) -> Optional[str]:
        """HEAD's digest, or None while HEAD is unborn."""
        return self.get_head().target or None

    def get_all_refs(self) -> List[Ref]:
        """Every branch and tag, followed by HEAD."""
        with self._lock:
            return self.list_branches() + self.list_tags() + [self._head]

    def resolve_ref(self, ref: str) -> Optional[str]:
        """
        Resolve a reference to a digest.

        Resolution order:
        1. 'HEAD'
        2. Full names starting with 'refs/', looked up exactly
        3. Branch short name (refs/heads/<ref>)
        4. Tag short name (refs/tags/<ref>)

        A branch and a tag with the same short name resolve to the branch.

        Args:
            ref: Reference string (e.g., 'HEAD', 'main', 'refs/tags/v1.0')

        Returns:
            Digest, or None if the reference can't be resolved or is unborn
        """
        with self._lock:
            if ref == HEAD:
                return self._head.target or None

            if ref.startswith(REFS_PREFIX):
                found = self._refs.get(ref)
                return found.target if found else None

            for prefix in (HEADS_PREFIX, TAGS_PREFIX):
                found = self._refs.get(prefix + ref)
                if found is not None:
                    return found.target

        return None

    def __repr__(self) -> str:
        with self._lock:
            return f"RefManager(refs={len(self._refs)}, head={self._head.target[:7] or 'unborn'})"
