"""Object graph analysis and integrity validation for Plumb."""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from .objects import Blob, Commit, PlumbObject, Tree


@dataclass
class ObjectGraph:
    """Every stored digest, plus one edge per link between objects."""
    nodes: Set[str] = field(default_factory=set)
    edges: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class RefReachability:
    """Objects reachable from a ref, and every stored object that is not."""
    ref_name: str
    reachable: Set[str] = field(default_factory=set)
    unreachable: Set[str] = field(default_factory=set)


@dataclass
class RepositoryStats:
    total_objects: int
    total_size: int
    blob_count: int
    tree_count: int
    commit_count: int
    dangling_objects: int


def object_links(obj: PlumbObject) -> List[str]:
    """
    Digests an object points at.

    Commits link to their tree, then their parents in order. Trees link
    to each entry. Blobs link to nothing.
    """
    if isinstance(obj, Commit):
        return [obj.tree, *obj.parents]
    if isinstance(obj, Tree):
        return [entry.hash for entry in obj.entries]
    return []


class GraphAnalyzer:
    """
    Derived views over an object store and its refs.

    Nothing is cached: every call reads the current state of the store,
    so deleting an object is reflected on the next validation.

    Covers:
    - Per-object and whole-repository validation
    - Object graph construction and dangling object detection
    - Reachability from refs and ref integrity
    - Repository statistics
    """

    def __init__(self, store, refs):
        """
        Initialize analyzer.

        Args:
            store: ObjectStore to analyze
            refs: RefManager whose refs are used as roots
        """
        self.store = store
        self.refs = refs

    def validate_object(self, sha: str) -> bool:
        """
        Check one object's structural integrity.

        - Blob: valid if its content is non-empty
        - Tree: valid if every entry points at a stored object
        - Commit: valid if its tree and all parents are stored

        Returns:
            False for invalid or missing objects
        """
        obj = self.store.retrieve(sha)

        if isinstance(obj, Blob):
            return len(obj.data) > 0
        if isinstance(obj, Tree):
            return all(self.store.exists(entry.hash) for entry in obj.entries)
        if isinstance(obj, Commit):
            return self.store.exists(obj.tree) and all(
                self.store.exists(parent) for parent in obj.parents
            )
        return False

    def validate_repository_integrity(self) -> Dict[str, bool]:
        return {sha: self.validate_object(sha) for sha in self.store.all_digests()}

    def build_object_graph(self) -> ObjectGraph:
        graph = ObjectGraph()

        for sha in self.store.all_digests():
            graph.nodes.add(sha)
            obj = self.store.retrieve(sha)
            if obj is None:
                continue
            graph.edges.extend((sha, target) for target in object_links(obj))

        return graph

    def find_dangling_objects(self) -> List[str]:
        """
        Stored objects that no other stored object points at.

        This is about links inside the store, not about refs: an
        unreferenced root commit is dangling here even if a branch
        points at it. See ref_reachability for the ref-based view.
        """
        graph = self.build_object_graph()
        referenced = {target for _, target in graph.edges}
        return [sha for sha in graph.nodes if sha not in referenced]

    def ref_reachability(self, ref_name: str) -> RefReachability:
        """
        Walk the graph breadth-first from a ref's target.

        Missing objects met along the way count as reachable (something
        links to them) but are not expanded.

        Args:
            ref_name: Anything RefManager.resolve_ref accepts

        Returns:
            RefReachability: empty reachable set if the ref doesn't resolve
        """
        all_digests = self.store.all_digests()
        start = self.refs.resolve_ref(ref_name)
        if start is None:
            return RefReachability(ref_name, set(), all_digests)

        reachable = set()
        queue = deque([start])

        while queue:
            current = queue.popleft()
            if current in reachable:
                continue
            reachable.add(current)

            obj = self.store.retrieve(current)
            if obj is not None:
                queue.extend(object_links(obj))

        return RefReachability(ref_name, reachable, all_digests - reachable)

    def find_orphan_commits(self) -> List[Commit]:
        """Commits with at least one parent missing from the store."""
        return [
            commit for commit in self.store.by_kind('commit')
            if any(not self.store.exists(parent) for parent in commit.parents)
        ]

    def validate_ref_integrity(self, ref_name: str) -> bool:
        """True if the ref resolves and its target is stored."""
        sha = self.refs.resolve_ref(ref_name)
        return sha is not None and self.store.exists(sha)

    def validate_all_refs(self) -> Dict[str, bool]:
        return {ref.name: self.validate_ref_integrity(ref.name) for ref in self.refs.get_all_refs()}

    def find_broken_refs(self) -> List[str]:
        """Names of refs that are unborn or point at a missing object."""
        return [name for name, ok in self.validate_all_refs().items() if not ok]

    def find_unreferenced_commits(self) -> List[str]:
        """Commits that no ref points at directly."""
        targets = {ref.target for ref in self.refs.get_all_refs() if ref.target}
        return [commit.hash for commit in self.store.by_kind('commit') if commit.hash not in targets]

    def repository_stats(self) -> RepositoryStats:
        digests = self.store.all_digests()
        total_size = sum(self.store.size_of(sha) or 0 for sha in digests)

        return RepositoryStats(
            total_objects=len(digests),
            total_size=total_size,
            blob_count=len(self.store.by_kind('blob')),
            tree_count=len(self.store.by_kind('tree')),
            commit_count=len(self.store.by_kind('commit')),
            dangling_objects=len(self.find_dangling_objects()),
        )
