"""Plumb - in-memory version-control plumbing implemented in Python."""

__version__ = '0.1.0'

from plumb.core.repository import Repository
from plumb.core.objects import PlumbObject, Blob, Tree, TreeEntry, Commit

__all__ = [
    'Repository',
    'PlumbObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
]
