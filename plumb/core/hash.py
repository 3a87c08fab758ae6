"""Hash utilities for Plumb."""

import hashlib
import re

DIGEST_LENGTH = 40
DIGEST_BYTES = 20

OBJECT_KINDS = ('blob', 'tree', 'commit')

_DIGEST_RE = re.compile(r'[0-9a-f]{40}')


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def digest_of(kind: str, payload: bytes) -> str:
    """
    Compute the content digest of an object.
    
    The kind and payload length are part of the hashed input, so two
    objects of different kinds never share a digest.
    Format: <kind> <size>\\0<payload>
    
    Args:
        kind: Object kind (blob, tree, commit)
        payload: Canonical serialized payload
        
    Returns:
        40-character hex string
        
    Raises:
        ValueError: If kind is not a known object kind
    """
    if kind not in OBJECT_KINDS:
        raise ValueError(f"Unknown object kind: {kind!r}")
    header = f"{kind} {len(payload)}\0".encode()
    return hash_object(header + payload)


def is_valid_digest(value) -> bool:
    """Check that value is exactly 40 lowercase hex characters."""
    return isinstance(value, str) and _DIGEST_RE.fullmatch(value) is not None
