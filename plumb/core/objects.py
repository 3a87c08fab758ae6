"""Plumb objects: blobs, trees and commits."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .hash import DIGEST_BYTES, digest_of

logger = logging.getLogger(__name__)

TREE_MODE = '040000'
FILE_MODE = '100644'


class PlumbObject(ABC):
    """
    Base class for all Plumb objects.

    Objects are immutable. The canonical payload and the digest are
    computed once, when the object is constructed.
    """

    type: str = ''

    def __init__(self, payload: bytes):
        self._payload = payload
        self._hash = digest_of(self.type, payload)

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Canonical payload (without the kind/size header)
        """
        pass

    @property
    def hash(self) -> str:
        """
        Get object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        return self._hash

    @property
    def size(self) -> int:
        """Length of the canonical payload in bytes."""
        return len(self._payload)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlumbObject):
            return NotImplemented
        return self.type == other.type and self._hash == other._hash

    def __hash__(self) -> int:
        return hash((self.type, self._hash))


class Blob(PlumbObject):
    """
    Represents file content.

    A blob stores raw content without any metadata like filename or
    permissions.
    """

    type = 'blob'

    def __init__(self, data: Optional[bytes] = None):
        """
        Initialize a blob.

        Args:
            data: File content as bytes
        """
        super().__init__(bytes(data or b''))

    @property
    def data(self) -> bytes:
        return self._payload

    def serialize(self) -> bytes:
        """Blobs serialize to their raw content."""
        return self._payload

    @classmethod
    def deserialize(cls, data: bytes) -> 'Blob':
        return cls(data)

    def as_text(self, encoding: str = 'utf-8') -> str:
        return self._payload.decode(encoding, errors='replace')

    def __repr__(self) -> str:
        """String representation of blob."""
        return f"Blob(hash={self.hash[:7]}, size={self.size})"


@dataclass(frozen=True)
class TreeEntry:
    """
    Represents a single entry in a tree.

    Each entry contains:
    - name: Filename or directory name
    - hash: Digest of the blob or sub-tree it points to
    - mode: Optional file mode (e.g. '100644', '040000'); not hashed
    """
    name: str
    hash: str
    mode: Optional[str] = None

    @property
    def is_tree(self) -> bool:
        return self.mode == TREE_MODE

    def __repr__(self) -> str:
        """String representation."""
        mode = f"{self.mode} " if self.mode else ''
        return f"TreeEntry({mode}{self.hash[:7]} {self.name})"


def _digest_to_bytes(digest: str) -> bytes:
    try:
        raw = bytes.fromhex(digest)
    except ValueError:
        raw = b''
    if len(raw) != DIGEST_BYTES:
        logger.warning("Tree entry digest %r is not a valid digest; encoding as zeros", digest)
        return b'\0' * DIGEST_BYTES
    return raw


def encode_tree(entries: Iterable[TreeEntry]) -> bytes:
    """
    Serialize tree entries.

    Format: <name>\\0<20-byte hash> per entry, ordered by name, with no
    global length prefix. Ordering makes the encoding independent of
    the order entries were supplied in.
    """
    return b''.join(
        entry.name.encode() + b'\0' + _digest_to_bytes(entry.hash)
        for entry in sorted(entries, key=lambda e: e.name)
    )


def decode_tree(data: bytes) -> List[TreeEntry]:
    """
    Parse serialized tree entries.

    Decoding is best-effort: a trailing entry without a NUL separator or
    without a full 20-byte digest is dropped instead of raising.
    """
    entries = []
    pos = 0

    while pos < len(data):
        null_pos = data.find(b'\0', pos)
        if null_pos == -1:
            break

        end = null_pos + 1 + DIGEST_BYTES
        if end > len(data):
            break

        name = data[pos:null_pos].decode(errors='replace')
        entries.append(TreeEntry(name, data[null_pos + 1:end].hex()))
        pos = end

    return entries


class Tree(PlumbObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories), always kept sorted by name.
    """

    type = 'tree'

    def __init__(self, entries: Optional[Iterable[TreeEntry]] = None):
        """
        Initialize tree.

        Entry digests are stored in the form they are encoded in:
        lowercase hex, or all zeros when the digest is not valid.

        Args:
            entries: Tree entries, in any order
        """
        self._entries: Tuple[TreeEntry, ...] = tuple(
            TreeEntry(entry.name, _digest_to_bytes(entry.hash).hex(), entry.mode)
            for entry in sorted(entries or (), key=lambda e: e.name)
        )
        super().__init__(encode_tree(self._entries))

    @property
    def entries(self) -> Tuple[TreeEntry, ...]:
        return self._entries

    def serialize(self) -> bytes:
        return self._payload

    @classmethod
    def deserialize(cls, data: bytes) -> 'Tree':
        """
        Deserialize tree from its canonical format.

        The given bytes are kept as the payload, so the digest matches
        the one the data was stored under even if a truncated tail was
        dropped while parsing.
        """
        tree = cls.__new__(cls)
        tree._entries = tuple(sorted(decode_tree(data), key=lambda e: e.name))
        PlumbObject.__init__(tree, bytes(data))
        return tree

    def get(self, name: str) -> Optional[TreeEntry]:
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    @classmethod
    def from_mapping(cls, store, mapping) -> 'Tree':
        """
        Build tree from a staging mapping.

        Blobs and sub-trees are written to the store as they are built;
        the returned tree itself is not stored.

        Args:
            store: ObjectStore (or anything with a store(obj) method)
            mapping: {name: bytes | str | mapping}; nested mappings are
                     directories

        Returns:
            Tree: New tree object
        """
        entries = []

        for name in sorted(mapping):
            value = mapping[name]

            if isinstance(value, (bytes, bytearray, str)):
                if isinstance(value, str):
                    value = value.encode()
                obj_hash = store.store(Blob(value))
                entries.append(TreeEntry(name, obj_hash, FILE_MODE))

            elif hasattr(value, 'items'):
                subtree = cls.from_mapping(store, value)
                obj_hash = store.store(subtree)
                entries.append(TreeEntry(name, obj_hash, TREE_MODE))

            else:
                raise TypeError(f"Cannot stage {name!r}: unsupported type {type(value).__name__}")

        return cls(entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"Tree(hash={self.hash[:7]}, entries={len(self._entries)})"


def encode_commit(
    tree_hash: str,
    parent_hashes: Iterable[str],
    author: str,
    committer: str,
    message: str,
    timestamp: int,
) -> bytes:
    """
    Serialize commit fields.

    Format:
    tree <tree-hash>
    parent <parent-hash>  (zero or more, in order)
    author <identity> <timestamp> +0000
    committer <identity> <timestamp> +0000

    <commit message>
    """
    lines = [f'tree {tree_hash}']

    for parent in parent_hashes:
        lines.append(f'parent {parent}')

    lines.append(f'author {author} {timestamp} +0000')
    lines.append(f'committer {committer} {timestamp} +0000')

    lines.append('')
    lines.append(message)

    return '\n'.join(lines).encode()


def _split_identity(value: str) -> Tuple[str, int]:
    parts = value.rsplit(' ', 2)
    if len(parts) == 3:
        try:
            return parts[0], int(parts[1])
        except ValueError:
            pass
    return value, 0


class Commit(PlumbObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history; the first parent is the mainline
    - Author and committer info
    - Timestamp
    - Commit message
    """

    type = 'commit'

    def __init__(
        self,
        tree: str,
        parents: Iterable[str] = (),
        author: str = '',
        committer: str = '',
        message: str = '',
        timestamp: int = 0,
    ):
        self._tree = tree
        self._parents = tuple(parents)
        self._author = author
        self._committer = committer
        self._message = message
        self._timestamp = int(timestamp)
        self._committer_timestamp = self._timestamp
        super().__init__(encode_commit(
            self._tree, self._parents, author, committer, message, self._timestamp
        ))

    @property
    def tree(self) -> str:
        return self._tree

    @property
    def parents(self) -> Tuple[str, ...]:
        return self._parents

    @property
    def author(self) -> str:
        return self._author

    @property
    def committer(self) -> str:
        return self._committer

    @property
    def message(self) -> str:
        return self._message

    @property
    def timestamp(self) -> int:
        """Author timestamp."""
        return self._timestamp

    @property
    def committer_timestamp(self) -> int:
        return self._committer_timestamp

    def serialize(self) -> bytes:
        return self._payload

    @classmethod
    def deserialize(cls, data: bytes) -> 'Commit':
        """
        Deserialize commit from its canonical format.

        Headers are read up to the first blank line. The message is
        everything after it, trimmed of surrounding whitespace. The
        given bytes are kept as the payload, so the decoded commit has
        the same digest as the data.

        Args:
            data: Serialized commit data
        """
        lines = data.decode(errors='replace').split('\n')

        tree = ''
        parents = []
        author = committer = ''
        timestamp = committer_timestamp = 0
        message_start = len(lines)

        for i, line in enumerate(lines):
            if not line:
                message_start = i + 1
                break

            if line.startswith('tree '):
                tree = line[5:]

            elif line.startswith('parent '):
                parents.append(line[7:])

            elif line.startswith('author '):
                author, timestamp = _split_identity(line[7:])

            elif line.startswith('committer '):
                committer, committer_timestamp = _split_identity(line[10:])

        commit = cls.__new__(cls)
        commit._tree = tree
        commit._parents = tuple(parents)
        commit._author = author
        commit._committer = committer
        commit._message = '\n'.join(lines[message_start:]).strip()
        commit._timestamp = timestamp
        commit._committer_timestamp = committer_timestamp
        PlumbObject.__init__(commit, bytes(data))
        return commit

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: Iterable[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: Parent commit hashes, first parent first
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)

        Returns:
            Commit: New commit object
        """
        if timestamp is None:
            timestamp = int(time.time())

        return cls(tree_hash, parent_hashes, author, committer, message, timestamp)

    def __repr__(self) -> str:
        """String representation."""
        parent_info = f", parents={len(self._parents)}" if self._parents else ""
        msg_preview = self._message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
}


def decode_object(kind: str, payload: bytes) -> Optional[PlumbObject]:
    """
    Rebuild an object from its kind and canonical payload.

    Returns:
        The decoded object, or None for an unknown kind
    """
    cls = OBJECT_TYPES.get(kind)
    if cls is None:
        return None
    return cls.deserialize(payload)
