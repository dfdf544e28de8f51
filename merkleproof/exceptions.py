"""
Exception hierarchy for merkleproof.

All custom exceptions inherit from MerkleProofError base class.
"""


class MerkleProofError(Exception):
    """Base exception for all merkleproof errors."""
    pass


# Tree Errors
class TreeError(MerkleProofError):
    """Base exception for Merkle tree errors."""
    pass


class LeafNotFoundError(TreeError):
    """Raised when a proof is requested for a digest that is not a leaf of the tree."""

    def __init__(self, digest_hex: str):
        self.digest_hex = digest_hex
        super().__init__(f"Leaf not found in tree: {digest_hex}")


class InvalidInputError(TreeError, ValueError):
    """Raised when tree construction is called with invalid input."""
    pass


class EmptyTreeError(InvalidInputError):
    """Raised when building a tree from an empty leaf sequence."""
    pass


class InvalidDigestError(InvalidInputError):
    """Raised when a leaf digest is not a 32-byte value."""
    pass


class DuplicateLeafError(InvalidInputError):
    """Raised when duplicate leaf digests are rejected at build time."""
    pass


class ContractViolationError(MerkleProofError):
    """
    Raised on an internal invariant breach.

    Indicates a bug in the tree code rather than a caller error, e.g. reading
    the digest of a placeholder node or assigning a parent twice.
    """
    pass


# Configuration Errors
class ConfigurationError(MerkleProofError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
