"""Core functionality for Plumb.

This module contains the core data structures:
- Plumb objects (Blob, Tree, Commit) and their digests
- Object store
- Reference management and reference history
- Event bus for ref and object notifications
- Graph analysis and integrity validation
- Configuration management

For the command layer, see plumb.cli
"""

from plumb.core.hash import digest_of, hash_object, is_valid_digest
from plumb.core.objects import PlumbObject, Blob, Tree, TreeEntry, Commit, decode_object
from plumb.core.store import ObjectStore
from plumb.core.refs import Ref, RefManager, is_valid_ref_name
from plumb.core.history import RefChange, RefHistoryTracker
from plumb.core.events import EventBus, ReferenceEvent, ObjectStoreEvent
from plumb.core.graph import GraphAnalyzer, ObjectGraph, RefReachability, RepositoryStats
from plumb.core.config import Config, get_config
from plumb.core.repository import Repository

__all__ = [
    'PlumbObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'decode_object',
    'ObjectStore',
    'Ref',
    'RefManager',
    'is_valid_ref_name',
    'RefChange',
    'RefHistoryTracker',
    'EventBus',
    'ReferenceEvent',
    'ObjectStoreEvent',
    'GraphAnalyzer',
    'ObjectGraph',
    'RefReachability',
    'RepositoryStats',
    'Config',
    'get_config',
    'Repository',
    'digest_of',
    'hash_object',
    'is_valid_digest',
]
