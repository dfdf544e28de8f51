"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

Merkle tree implementation over pre-computed leaf digests.

This module implements a binary Merkle tree with SHA-256 hashing. It supports:
- Tree construction from 32-byte leaf digests
- Merkle proof generation for any leaf, looked up by digest
- Builder pattern for incremental tree construction

Odd-sized levels are padded by duplicating the last node's digest, so a
dangling node `x` gets the parent `H(x || x)`.
"""

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from merkleproof.digest import DIGEST_SIZE, digest, hash_pair
from merkleproof.exceptions import (
    DuplicateLeafError,
    EmptyTreeError,
    InvalidDigestError,
    LeafNotFoundError,
)
from merkleproof.logging_config import (
    get_logger,
    log_merkle_proof_generation,
    log_merkle_root_computation,
)
from merkleproof.merkle.node import NodeArena

logger = get_logger(__name__)


class Side(IntEnum):
    """Which side of the running hash a proof sibling goes on."""
    LEFT = 0
    RIGHT = 1


class ProofStep(NamedTuple):
    """One level of an inclusion proof."""
    sibling: bytes
    side: Side


@dataclass
class MerkleProof:
    """
    Proof that a leaf is included in a Merkle tree.

    Iterating a proof yields its steps as (sibling, side) pairs in
    leaf-to-root order, which is the form `verify` consumes.

    Attributes:
        leaf_digest: Digest of the leaf being proven
        steps: Sibling digests and sides from leaf to root
        root_digest: Root of the tree the proof was generated from
    """
    leaf_digest: bytes
    steps: List[ProofStep] = field(default_factory=list)
    root_digest: bytes = b""

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def sibling_digests(self) -> List[bytes]:
        return [step.sibling for step in self.steps]

    @property
    def sides(self) -> List[Side]:
        return [step.side for step in self.steps]


class MerkleTree:
    """
    Binary Merkle tree over pre-computed 32-byte leaf digests.

    The tree is built bottom-up. Each internal node's digest is the hash of
    its left child's digest followed by its right child's digest. If a level
    has an odd number of nodes, the last node is paired with itself.

    Leaf lookup uses first-match semantics: when the same digest appears more
    than once, proofs are generated for its first occurrence. Pass
    reject_duplicates=True to refuse such input instead.

    Example:
        >>> leaves = [digest(b"a"), digest(b"b"), digest(b"c")]
        >>> tree = MerkleTree(leaves)
        >>> proof = tree.generate_proof(leaves[0])
        >>> verify(b"a", proof) == tree.root_digest()
        True
    """

    def __init__(self, leaf_digests: Iterable[bytes], reject_duplicates: bool = False):
        """
        Build Merkle tree from leaf digests.

        Args:
            leaf_digests: Ordered 32-byte leaf digests (at least one)
            reject_duplicates: Raise instead of accepting repeated digests

        Raises:
            EmptyTreeError: If no leaf digests are given
            InvalidDigestError: If a leaf digest is not 32 bytes
            DuplicateLeafError: If reject_duplicates is set and a digest repeats
        """
        leaf_digests = [
            self._check_digest(d, f"Leaf digest at position {i}")
            for i, d in enumerate(leaf_digests)
        ]
        if not leaf_digests:
            raise EmptyTreeError("Cannot create Merkle tree from empty leaves list")

        start = time.perf_counter()

        self._arena = NodeArena()
        self._leaves: List[int] = []
        self._leaf_index: Dict[bytes, int] = {}

        for position, leaf in enumerate(leaf_digests):
            index = self._arena.add_leaf(leaf)
            self._leaves.append(index)
            if leaf in self._leaf_index:
                if reject_duplicates:
                    raise DuplicateLeafError(
                        f"Duplicate leaf digest {leaf.hex()} at position {position}"
                    )
                continue
            # First occurrence wins
            self._leaf_index[leaf] = index

        self._root, self._height = self._build_tree(self._leaves)

        log_merkle_root_computation(
            logger,
            leaf_count=len(self._leaves),
            height=self._height,
            merkle_root=self.root_digest().hex(),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    @staticmethod
    def _check_digest(value: bytes, label: str) -> bytes:
        # bytes(int) would silently produce a zero-filled buffer
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise InvalidDigestError(
                f"{label} must be bytes, got {type(value).__name__}"
            )
        value = bytes(value)
        if len(value) != DIGEST_SIZE:
            raise InvalidDigestError(
                f"{label} must be {DIGEST_SIZE} bytes, got {len(value)}"
            )
        return value

    def _build_tree(self, leaves: List[int]) -> Tuple[int, int]:
        """
        Combine levels pairwise until a single root remains.

        Parents are wired as soon as each internal node exists. A dangling
        last node gets an internal parent whose right slot is the placeholder.

        Args:
            leaves: Arena indices of the leaf level

        Returns:
            Tuple of (root index, tree height)
        """
        arena = self._arena
        current_level = leaves
        height = 0

        while len(current_level) > 1:
            next_level: List[int] = []

            for i in range(0, len(current_level), 2):
                left = current_level[i]
                left_digest = arena.digest(left)

                if i + 1 < len(current_level):
                    right: Optional[int] = current_level[i + 1]
                    parent = arena.add_internal(
                        hash_pair(left_digest, arena.digest(right)), left, right
                    )
                    arena.assign_parent(left, parent)
                    arena.assign_parent(right, parent)
                else:
                    # Odd level: duplicate the last digest
                    parent = arena.add_internal(hash_pair(left_digest, left_digest), left, None)
                    arena.assign_parent(left, parent)

                next_level.append(parent)

            current_level = next_level
            height += 1

        return current_level[0], height

    def __len__(self) -> int:
        return len(self._leaves)

    def __contains__(self, leaf_digest: object) -> bool:
        return leaf_digest in self._leaf_index

    @property
    def leaf_count(self) -> int:
        return len(self._leaves)

    @property
    def height(self) -> int:
        """Number of levels above the leaves; 0 for a single-leaf tree."""
        return self._height

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        """Leaf digests in the order they were supplied."""
        return tuple(self._arena.digest(index) for index in self._leaves)

    @property
    def arena(self) -> NodeArena:
        return self._arena

    @property
    def root_index(self) -> int:
        return self._root

    def root_digest(self) -> bytes:
        """
        Get the Merkle root digest.

        For a single-leaf tree this is the leaf digest itself.
        """
        return self._arena.digest(self._root)

    def generate_proof(self, target_digest: bytes) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf with the given digest.

        Walks parent links from the leaf to the root, recording at each level
        the sibling digest and the side it goes on. A leaf whose parent was
        built from a dangling node is its own sibling.

        Args:
            target_digest: Digest of the leaf to prove

        Returns:
            MerkleProof with one step per tree level, leaf-adjacent step first

        Raises:
            InvalidDigestError: If target_digest is not 32 bytes
            LeafNotFoundError: If no leaf has target_digest
        """
        start = time.perf_counter()

        target_digest = self._check_digest(target_digest, "Proof target digest")
        current = self._leaf_index.get(target_digest)
        if current is None:
            raise LeafNotFoundError(target_digest.hex())

        arena = self._arena
        steps: List[ProofStep] = []

        parent = arena.parent(current)
        while parent is not None:
            left = arena.left(parent)
            right = arena.right(parent)
            left_digest = arena.digest(left)

            if arena.digest(current) == left_digest:
                # Current is the left child, sibling goes on the right
                sibling = left_digest if right is None else arena.digest(right)
                steps.append(ProofStep(sibling, Side.RIGHT))
            else:
                steps.append(ProofStep(left_digest, Side.LEFT))

            current = parent
            parent = arena.parent(current)

        log_merkle_proof_generation(
            logger,
            leaf_digest=target_digest.hex(),
            proof_length=len(steps),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

        return MerkleProof(
            leaf_digest=target_digest,
            steps=steps,
            root_digest=self.root_digest(),
        )


def build(leaf_digests: Iterable[bytes], reject_duplicates: bool = False) -> MerkleTree:
    """
    Build a Merkle tree from ordered leaf digests.

    Args:
        leaf_digests: Ordered 32-byte leaf digests (at least one)
        reject_duplicates: Raise DuplicateLeafError on repeated digests

    Returns:
        The constructed MerkleTree
    """
    return MerkleTree(leaf_digests, reject_duplicates=reject_duplicates)


class MerkleTreeBuilder:
    """
    Builder class for constructing Merkle trees incrementally.

    Leaves can be added as ready-made digests or as raw data, which is hashed
    on the way in. The tree is built once all leaves are collected.

    Example:
        >>> builder = MerkleTreeBuilder()
        >>> builder.add_data(b"a").add_data(b"b").build_tree()
        >>> root = builder.get_root()
        >>> proof = builder.get_proof(digest(b"a"))
    """

    def __init__(self, reject_duplicates: bool = False):
        """
        Initialize the Merkle tree builder.

        Args:
            reject_duplicates: Passed through to MerkleTree
        """
        self.reject_duplicates = reject_duplicates
        self._tree: Optional[MerkleTree] = None
        self._digests: List[bytes] = []

    def add_digest(self, leaf_digest: bytes) -> 'MerkleTreeBuilder':
        """Queue a pre-computed leaf digest. Returns self for method chaining."""
        self._digests.append(leaf_digest)
        return self

    def add_data(self, data: bytes) -> 'MerkleTreeBuilder':
        """Hash raw leaf data and queue its digest. Returns self for method chaining."""
        self._digests.append(digest(data))
        return self

    def build_tree(self) -> MerkleTree:
        """
        Build the Merkle tree from the queued leaves.

        Returns:
            The constructed MerkleTree

        Raises:
            EmptyTreeError: If no leaves were added
        """
        self._tree = MerkleTree(self._digests, reject_duplicates=self.reject_duplicates)

        logger.debug(f"Built Merkle tree with {len(self._digests)} leaves")

        return self._tree

    @property
    def tree(self) -> MerkleTree:
        if self._tree is None:
            raise RuntimeError("Tree has not been built yet. Call build_tree() first.")
        return self._tree

    def get_root(self) -> bytes:
        """
        Get the Merkle root digest.

        Raises:
            RuntimeError: If tree has not been built yet
        """
        return self.tree.root_digest()

    def get_proof(self, leaf_digest: bytes) -> MerkleProof:
        """
        Generate Merkle proof for the leaf with the given digest.

        Raises:
            RuntimeError: If tree has not been built yet
            LeafNotFoundError: If no leaf has leaf_digest
        """
        return self.tree.generate_proof(leaf_digest)
