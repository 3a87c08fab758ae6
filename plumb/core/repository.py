"""Repository wiring for Plumb."""

import logging
from collections import deque
from typing import Iterable, Iterator, List, Optional

from .config import Config
from .events import EventBus
from .graph import GraphAnalyzer, ObjectGraph, RepositoryStats
from .hash import is_valid_digest
from .history import RefChange, RefHistoryTracker
from .objects import Commit, PlumbObject, Tree
from .refs import RefManager
from .store import ObjectStore

logger = logging.getLogger(__name__)


class Repository:
    """
    Represents an in-memory Plumb repository.

    A repository owns one of each service and wires them together:
    - objects: ObjectStore
    - refs: RefManager, reporting changes to history
    - history: RefHistoryTracker, publishing to events
    - events: EventBus
    - analyzer: GraphAnalyzer over objects and refs

    The methods below are the surface a command layer needs. Each
    instance is independent; nothing is shared between repositories.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize repository.

        Args:
            config: Config used for commit identity (defaults to global config)
        """
        self.config = config or Config()
        self.events = EventBus()
        self.history = RefHistoryTracker(self.events)
        self.objects = ObjectStore(self.events)
        self.refs = RefManager(self.history)
        self.analyzer = GraphAnalyzer(self.objects, self.refs)

    def store(self, obj: PlumbObject) -> str:
        return self.objects.store(obj)

    def retrieve(self, sha: str) -> Optional[PlumbObject]:
        return self.objects.retrieve(sha)

    def exists(self, sha: str) -> bool:
        return self.objects.exists(sha)

    def delete(self, sha: str) -> bool:
        return self.objects.delete(sha)

    def resolve_ref(self, ref: str) -> Optional[str]:
        return self.refs.resolve_ref(ref)

    def create_branch(self, name: str, sha: str) -> bool:
        return self.refs.create_branch(name, sha)

    def create_tag(self, name: str, sha: str) -> bool:
        return self.refs.create_tag(name, sha)

    def update_head(self, sha: str) -> bool:
        return self.refs.update_head(sha)

    def record_change(self, ref_name: str, old_sha: str, new_sha: str, operation: str) -> RefChange:
        return self.history.record_change(ref_name, old_sha, new_sha, operation)

    def validate_object(self, sha: str) -> bool:
        return self.analyzer.validate_object(sha)

    def build_object_graph(self) -> ObjectGraph:
        return self.analyzer.build_object_graph()

    def repository_stats(self) -> RepositoryStats:
        return self.analyzer.repository_stats()

    def stage(self, mapping) -> str:
        """
        Store a snapshot of staged content.

        Args:
            mapping: {name: bytes | str | mapping}, as provided by the
                     virtual filesystem

        Returns:
            str: Digest of the stored root tree
        """
        tree = Tree.from_mapping(self.objects, mapping)
        return self.objects.store(tree)

    def commit(
        self,
        tree_hash: str,
        message: str,
        parents: Optional[Iterable[str]] = None,
        author: Optional[str] = None,
        branch: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> str:
        """
        Create a commit, store it and move HEAD to it.

        Args:
            tree_hash: Root tree of the snapshot
            message: Commit message
            parents: Parent digests; defaults to HEAD's target, if any
            author: Author and committer identity; defaults to config
            branch: Branch short name to move along with HEAD
            timestamp: Unix timestamp (defaults to current time)

        Returns:
            str: Digest of the new commit
        """
        if parents is None:
            head = self.refs.current_commit()
            parents = [head] if head else []

        identity = author or self.config.identity()
        commit = Commit.create(
            tree_hash=tree_hash,
            parent_hashes=parents,
            author=identity,
            committer=identity,
            message=message,
            timestamp=timestamp,
        )
        sha = self.objects.store(commit)

        self.refs.update_head(sha)
        if branch is not None and not self.refs.create_branch(branch, sha):
            logger.warning("Commit %s stored but branch %r was not updated", sha[:7], branch)

        return sha

    def walk_commits(self, start: str = 'HEAD') -> Iterator[Commit]:
        """
        Yield commits reachable from start through parent links.

        Commits are visited breadth-first, first parent first. Missing
        parents are skipped.
        """
        sha = start if is_valid_digest(start) else self.refs.resolve_ref(start)
        if sha is None:
            return

        visited = set()
        queue = deque([sha])

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)

            obj = self.objects.retrieve(current)
            if not isinstance(obj, Commit):
                continue

            yield obj
            queue.extend(obj.parents)

    def log(self, start: str = 'HEAD', limit: Optional[int] = None) -> List[Commit]:
        """
        Commit history from start (a ref name or a digest), in walk order.

        Raises:
            ValueError: If limit is negative
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        commits = []
        for commit in self.walk_commits(start):
            if limit is not None and len(commits) >= limit:
                break
            commits.append(commit)
        return commits

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(objects={self.objects.count()}, refs={len(self.refs.get_all_refs())})"
