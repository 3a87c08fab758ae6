"""Hash utilities tests."""

import pytest
from plumb.core.hash import hash_object, digest_of, is_valid_digest


def test_hash_object_empty():
    """Test hashing empty bytes."""
    result = hash_object(b'')
    assert len(result) == 40
    assert isinstance(result, str)


def test_hash_object_deterministic():
    """Test hash consistency for same input."""
    assert hash_object(b'hello world') == hash_object(b'hello world')


def test_hash_object_different_data():
    """Test different data produces different hashes."""
    assert hash_object(b'hello') != hash_object(b'world')


def test_digest_of_matches_git_blob_format():
    """Blob digests use the '<kind> <size>\\0' header."""
    assert digest_of('blob', b'hello\n') == 'ce013625030ba8dba906f756967f9e9ca394464a'
    assert digest_of('blob', b'') == 'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'


def test_digest_of_empty_tree():
    assert digest_of('tree', b'') == '4b825dc642cb6eb9a060e54bf8d69288fbee4904'


def test_digest_of_kind_is_hashed():
    """Same payload under different kinds must not collide."""
    payload = b'same bytes'
    digests = {digest_of(kind, payload) for kind in ('blob', 'tree', 'commit')}
    assert len(digests) == 3


def test_digest_of_single_byte_change():
    assert digest_of('blob', b'abcdef') != digest_of('blob', b'abcdeg')


def test_digest_of_unknown_kind():
    with pytest.raises(ValueError):
        digest_of('tag', b'data')


@pytest.mark.parametrize('value', [
    'a' * 40,
    '0123456789abcdef0123456789abcdef01234567',
])
def test_is_valid_digest_accepts(value):
    assert is_valid_digest(value)


@pytest.mark.parametrize('value', [
    '',
    'a' * 39,
    'a' * 41,
    'A' * 40,
    'g' * 40,
    'a' * 40 + '\n',
    ' ' + 'a' * 39,
    None,
    1234,
])
def test_is_valid_digest_rejects(value):
    assert not is_valid_digest(value)
