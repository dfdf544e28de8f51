"""
Merkle tree implementation for membership proofs.

This module provides Merkle tree construction, proof generation, and proof
verification over pre-computed SHA-256 leaf digests.
"""

from merkleproof.merkle.node import Node, NodeArena, NodeKind
from merkleproof.merkle.tree import (
    MerkleProof,
    MerkleTree,
    MerkleTreeBuilder,
    ProofStep,
    Side,
    build,
)
from merkleproof.merkle.verifier import verify, verify_proof

__all__ = [
    "Node",
    "NodeArena",
    "NodeKind",
    "MerkleProof",
    "MerkleTree",
    "MerkleTreeBuilder",
    "ProofStep",
    "Side",
    "build",
    "verify",
    "verify_proof",
]
