"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

Node model for Merkle trees.

Nodes live in a single growable arena and refer to their children and parent
by index. Parents own their children top-down; the upward link is only an
index, so the tree never forms a reference cycle.

A node is one of three kinds:
- LEAF: a supplied 32-byte digest
- INTERNAL: the hash of its left and right children
- PLACEHOLDER: the missing right child of a node built from a dangling
  element on an odd-sized level. It carries no digest and never gets a parent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from merkleproof.exceptions import ContractViolationError


class NodeKind(str, Enum):
    """Variant tag for arena nodes."""
    LEAF = "leaf"
    INTERNAL = "internal"
    PLACEHOLDER = "placeholder"


@dataclass
class Node:
    """
    A single arena slot.

    Attributes:
        kind: Node variant
        digest: 32-byte digest, None for the placeholder
        left: Index of the left child (internal nodes only)
        right: Index of the right child (internal nodes only, may be the placeholder)
        parent: Index of the parent, None for the root or before attachment
    """
    kind: NodeKind
    digest: Optional[bytes] = None
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    @property
    def is_internal(self) -> bool:
        return self.kind is NodeKind.INTERNAL

    @property
    def is_placeholder(self) -> bool:
        return self.kind is NodeKind.PLACEHOLDER


class NodeArena:
    """
    Index-addressed storage for every node of one tree.

    Example:
        >>> arena = NodeArena()
        >>> a = arena.add_leaf(digest_a)
        >>> p = arena.add_internal(hash_pair(digest_a, digest_a), a, None)
        >>> arena.assign_parent(a, p)
        >>> arena.right(p) is None
        True
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._placeholder: Optional[int] = None

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def add_leaf(self, digest: bytes) -> int:
        """
        Append a leaf node.

        Args:
            digest: 32-byte leaf digest

        Returns:
            Index of the new node
        """
        self._nodes.append(Node(kind=NodeKind.LEAF, digest=digest))
        return len(self._nodes) - 1

    def add_internal(self, digest: bytes, left: int, right: Optional[int]) -> int:
        """
        Append an internal node.

        Args:
            digest: Hash of the two children
            left: Index of the left child
            right: Index of the right child, or None to fill the slot with the placeholder

        Returns:
            Index of the new node
        """
        if right is None:
            right = self._placeholder_index()
        self._nodes.append(Node(kind=NodeKind.INTERNAL, digest=digest, left=left, right=right))
        return len(self._nodes) - 1

    def _placeholder_index(self) -> int:
        # One placeholder slot is shared by every dangling internal node
        if self._placeholder is None:
            self._nodes.append(Node(kind=NodeKind.PLACEHOLDER))
            self._placeholder = len(self._nodes) - 1
        return self._placeholder

    def digest(self, index: int) -> bytes:
        """
        Get the digest of a node.

        Raises:
            ContractViolationError: If the node is the placeholder
        """
        node = self._nodes[index]
        if node.is_placeholder:
            raise ContractViolationError("Placeholder node has no digest")
        return node.digest

    def left(self, index: int) -> Optional[int]:
        """Index of the left child, or None if the node is not internal."""
        node = self._nodes[index]
        if not node.is_internal:
            return None
        return node.left

    def right(self, index: int) -> Optional[int]:
        """Index of the right child, or None if absent or the node is not internal."""
        node = self._nodes[index]
        if not node.is_internal:
            return None
        if self._nodes[node.right].is_placeholder:
            return None
        return node.right

    def parent(self, index: int) -> Optional[int]:
        return self._nodes[index].parent

    def assign_parent(self, index: int, parent: int) -> None:
        """
        Link a node to its parent.

        Each node is attached exactly once, right after its parent is created.

        Args:
            index: Child node index
            parent: Parent node index

        Raises:
            ContractViolationError: If the node is the placeholder or already has a parent
        """
        node = self._nodes[index]
        if node.is_placeholder:
            raise ContractViolationError("Placeholder node cannot have a parent")
        if node.parent is not None:
            raise ContractViolationError(
                f"Node {index} already has parent {node.parent}"
            )
        node.parent = parent
