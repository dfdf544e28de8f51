"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

Merkle proof verification.

Verification is stateless: it needs only the raw leaf data and the proof
steps, and recomputes the root the proof commits to. Comparing that root
with a trusted one is the caller's job; `verify_proof` does both.
"""

import hmac
import time
from typing import Iterable, Tuple

from merkleproof.digest import digest, hash_pair
from merkleproof.logging_config import get_logger, log_merkle_verification
from merkleproof.merkle.tree import Side

logger = get_logger(__name__)


def verify(leaf_data: bytes, proof: Iterable[Tuple[bytes, int]]) -> bytes:
    """
    Recompute the Merkle root from leaf data and a proof.

    Never fails on a wrong proof or wrong data: those simply produce a
    digest that does not match the trusted root.

    Args:
        leaf_data: Original leaf data (will be hashed)
        proof: Ordered (sibling_digest, side) pairs from leaf to root, such as a MerkleProof

    Returns:
        The root digest implied by the proof
    """
    current_hash = digest(leaf_data)

    for sibling, side in proof:
        if side == Side.RIGHT:
            current_hash = hash_pair(current_hash, sibling)
        else:
            current_hash = hash_pair(sibling, current_hash)

    return current_hash


def verify_proof(
    leaf_data: bytes,
    proof: Iterable[Tuple[bytes, int]],
    expected_root: bytes,
) -> bool:
    """
    Verify a Merkle proof against a trusted root.

    Args:
        leaf_data: Original leaf data (will be hashed)
        proof: Ordered (sibling_digest, side) pairs from leaf to root
        expected_root: Trusted root digest

    Returns:
        True if the proof recomputes expected_root, False otherwise
    """
    start = time.perf_counter()

    computed_root = verify(leaf_data, proof)
    result = hmac.compare_digest(computed_root, expected_root)

    log_merkle_verification(
        logger,
        success=result,
        duration_ms=(time.perf_counter() - start) * 1000,
        failure_reason=None if result else "root_mismatch",
        computed_root=computed_root.hex(),
        expected_root=expected_root.hex(),
    )

    return result
