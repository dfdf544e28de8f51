"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

Merkleproof - binary Merkle trees with membership proofs.

Builds a hash tree over pre-computed leaf digests, publishes its root and
produces compact proofs that a single leaf belongs to the committed set.
"""

from merkleproof._version import __version__
from merkleproof.merkle import (
    MerkleProof,
    MerkleTree,
    MerkleTreeBuilder,
    ProofStep,
    Side,
    build,
    verify,
    verify_proof,
)

__all__ = [
    "__version__",
    "MerkleProof",
    "MerkleTree",
    "MerkleTreeBuilder",
    "ProofStep",
    "Side",
    "build",
    "verify",
    "verify_proof",
]
