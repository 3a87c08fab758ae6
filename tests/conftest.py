"""Shared pytest fixtures for Plumb tests."""

import pytest
from plumb.core.config import Config
from plumb.core.history import RefHistoryTracker
from plumb.core.objects import Blob, Tree, TreeEntry, Commit
from plumb.core.refs import RefManager
from plumb.core.repository import Repository
from plumb.core.store import ObjectStore

AUTHOR = "Test User <test@example.com>"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PLUMB_* variables from the outer environment out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith('PLUMB_'):
            monkeypatch.delenv(key)


@pytest.fixture
def config(tmp_path):
    """Config that ignores the real ~/.plumbconfig."""
    return Config(global_path=tmp_path / 'plumbconfig')


@pytest.fixture
def repo(config):
    """Create an empty repository."""
    return Repository(config)


@pytest.fixture
def store():
    return ObjectStore()


@pytest.fixture
def history():
    return RefHistoryTracker()


@pytest.fixture
def refs(history):
    return RefManager(history)


@pytest.fixture
def sha():
    """A well-formed digest that is not stored anywhere."""
    return 'a' * 40


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(store, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = store.store(sample_blob)
    return Tree([TreeEntry('test.txt', blob_hash, '100644')])


@pytest.fixture
def sample_commit(store, sample_tree):
    """Sample commit object."""
    tree_hash = store.store(sample_tree)
    return Commit.create(
        tree_hash=tree_hash,
        parent_hashes=[],
        author=AUTHOR,
        committer=AUTHOR,
        message="Test commit",
        timestamp=1700000000,
    )


@pytest.fixture
def linear_history(repo):
    """
    Repository with two commits on main.

    c1 (no parent) has tree1 -> blob1; c2 (parent c1) has
    tree2 -> blob1, blob2.
    """
    blob1 = repo.store(Blob(b"first file\n"))
    blob2 = repo.store(Blob(b"second file\n"))
    tree1 = repo.store(Tree([TreeEntry('file1.txt', blob1)]))
    tree2 = repo.store(Tree([TreeEntry('file1.txt', blob1), TreeEntry('file2.txt', blob2)]))

    c1 = repo.commit(tree1, "First commit", author=AUTHOR, branch='main', timestamp=1700000000)
    c2 = repo.commit(tree2, "Second commit", author=AUTHOR, branch='main', timestamp=1700000100)

    return {
        'repo': repo,
        'blob1': blob1,
        'blob2': blob2,
        'tree1': tree1,
        'tree2': tree2,
        'c1': c1,
        'c2': c2,
    }
