"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

Digest function binding.

Every tree and proof in this package uses SHA-256. Mixing digest functions
between building a tree and verifying its proofs is not supported.
"""

import hashlib

DIGEST_SIZE = 32


def digest(data: bytes) -> bytes:
    """
    Hash data using SHA-256.

    Args:
        data: Data to hash

    Returns:
        32-byte SHA-256 digest of data
    """
    return hashlib.sha256(data).digest()


def hash_pair(left: bytes, right: bytes) -> bytes:
    """Hash the concatenation of two child digests, left first."""
    return digest(left + right)


def to_hex(value: bytes) -> str:
    return value.hex()


def from_hex(value: str) -> bytes:
    """
    Decode a hex-encoded digest.

    Args:
        value: Hex string, optionally prefixed with "0x"

    Returns:
        Decoded digest bytes

    Raises:
        ValueError: If value is not valid hex or does not decode to DIGEST_SIZE bytes
    """
    value = value.strip()
    if value.startswith(("0x", "0X")):
        value = value[2:]
    raw = bytes.fromhex(value)
    if len(raw) != DIGEST_SIZE:
        raise ValueError(f"Expected a {DIGEST_SIZE}-byte digest, got {len(raw)} bytes")
    return raw
