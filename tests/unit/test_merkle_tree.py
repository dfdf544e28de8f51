"""
Unit tests for Merkle tree implementation.

Tests cover:
- Tree construction from leaf digests
- Root computation against known vectors
- Proof generation
- Edge cases (single leaf, power of 2, odd number of leaves)
"""

import pytest

from merkleproof.digest import digest
from merkleproof.exceptions import (
    DuplicateLeafError,
    EmptyTreeError,
    InvalidDigestError,
    InvalidInputError,
    LeafNotFoundError,
)
from merkleproof.merkle.tree import (
    MerkleProof,
    MerkleTree,
    MerkleTreeBuilder,
    ProofStep,
    Side,
    build,
)
from merkle_helpers import leaf_digests, reference_root, sha256


KNOWN_ROOTS = [
    (["Hello", "Hi", "Hey", "Hola"], "5f30cc80133b9394156e24b233f0c4be32b24e44bb3381f02c7ba52619d0febc"),
    (["a", "b", "c", "d"], "14ede5e8e97ad9372327728f5099b95604a39593cac3bd38a343ad76205213e7"),
    (["a", "b"], "e5a01fee14e0ed5c48714f22180f25ad8365b53f9779f79dc4a3d7e93963f94a"),
    (["a", "b", "c", "d", "e", "f"], "44205acec5156114821f1f71d87c72e0de395633cd1589def6d4444cc79f8103"),
    (["a", "b", "c"], "d31a37ef6ac14a2db1470c4316beb5592e6afd4465022339adafda76a18ffabe"),
]


class TestMerkleTreeConstruction:
    """Test Merkle tree construction."""

    @pytest.mark.parametrize("contents,expected_root", KNOWN_ROOTS)
    def test_known_roots(self, contents, expected_root):
        """Test roots against published reference vectors."""
        tree = build(leaf_digests(contents))

        assert tree.root_digest().hex() == expected_root

    def test_single_leaf(self):
        """Test tree with single leaf: the root is the leaf digest itself."""
        leaf = digest(b"single_leaf")
        tree = MerkleTree([leaf])

        assert tree.root_digest() == leaf
        assert tree.height == 0
        assert tree.leaf_count == 1

    def test_two_leaves(self):
        """Test tree with two leaves (perfect binary tree)."""
        a, b = leaf_digests(["a", "b"])
        tree = MerkleTree([a, b])

        assert tree.root_digest() == sha256(a + b)
        assert tree.height == 1

    def test_three_leaves_duplicates_last(self):
        """Test that an odd level pairs its last node with itself."""
        a, b, c = leaf_digests(["a", "b", "c"])
        tree = MerkleTree([a, b, c])

        expected = sha256(sha256(a + b) + sha256(c + c))
        assert tree.root_digest() == expected
        assert tree.height == 2

    def test_seven_leaves_duplicates_at_every_odd_level(self):
        """Test seven leaves: 7 -> 4 -> 2 -> 1 with one padded pair on the leaf level."""
        d = leaf_digests(["a", "b", "c", "d", "e", "f", "g"])
        tree = MerkleTree(d)

        left = sha256(sha256(d[0] + d[1]) + sha256(d[2] + d[3]))
        right = sha256(sha256(d[4] + d[5]) + sha256(d[6] + d[6]))
        assert tree.root_digest() == sha256(left + right)

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8, 9, 17, 100])
    def test_matches_reference_algorithm(self, count):
        """Test that node-based construction agrees with a level-list oracle."""
        digests = leaf_digests([f"leaf{i}" for i in range(count)])
        tree = MerkleTree(digests)

        assert tree.root_digest() == reference_root(digests)

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8, 9, 16, 17, 100])
    def test_height(self, count):
        """Test height is ceil(log2(n)), and 0 for a single leaf."""
        tree = MerkleTree(leaf_digests([f"leaf{i}" for i in range(count)]))

        assert tree.height == (count - 1).bit_length()

    def test_deterministic_root(self):
        """Test that same leaves produce same root."""
        digests = leaf_digests(["leaf1", "leaf2", "leaf3"])

        assert MerkleTree(digests).root_digest() == MerkleTree(digests).root_digest()

    def test_order_matters(self):
        """Test that leaf order affects root."""
        tree1 = MerkleTree(leaf_digests(["leaf1", "leaf2", "leaf3"]))
        tree2 = MerkleTree(leaf_digests(["leaf3", "leaf2", "leaf1"]))

        assert tree1.root_digest() != tree2.root_digest()

    def test_leaves_preserve_order(self):
        """Test that the tree reports leaves in supplied order."""
        digests = leaf_digests(["x", "y", "z"])
        tree = MerkleTree(digests)

        assert tree.leaves == tuple(digests)
        assert len(tree) == 3

    def test_accepts_generator(self):
        """Test construction from a one-shot iterable."""
        digests = leaf_digests(["a", "b", "c"])
        tree = MerkleTree(d for d in digests)

        assert tree.root_digest() == reference_root(digests)

    def test_empty_leaves_raises_error(self):
        """Test that empty leaves list raises EmptyTreeError."""
        with pytest.raises(EmptyTreeError, match="Cannot create Merkle tree from empty leaves list"):
            MerkleTree([])

    def test_empty_leaves_is_value_error(self):
        """Test that invalid input errors stay catchable as ValueError."""
        with pytest.raises(ValueError):
            build([])

    def test_wrong_digest_length_raises_error(self):
        """Test that a non-32-byte digest is rejected."""
        with pytest.raises(InvalidDigestError, match="position 1 must be 32 bytes"):
            MerkleTree([digest(b"a"), b"short"])

    def test_non_bytes_digest_raises_error(self):
        """Test that a str digest is rejected."""
        with pytest.raises(InvalidDigestError, match="must be bytes"):
            MerkleTree(["a" * 32])

    def test_duplicates_allowed_by_default(self):
        """Test that duplicate digests build a tree unless rejected."""
        a, b = leaf_digests(["a", "b"])
        tree = MerkleTree([a, b, a])

        assert tree.root_digest() == reference_root([a, b, a])

    def test_duplicates_rejected_when_requested(self):
        """Test reject_duplicates raises DuplicateLeafError."""
        a, b = leaf_digests(["a", "b"])

        with pytest.raises(DuplicateLeafError, match="position 2"):
            MerkleTree([a, b, a], reject_duplicates=True)

        assert issubclass(DuplicateLeafError, InvalidInputError)


class TestParentLinks:
    """Test the parent wiring produced during construction."""

    @pytest.mark.parametrize("count", [1, 2, 3, 6, 7])
    def test_only_root_has_no_parent(self, count):
        """Test every real node except the root is attached to a parent."""
        tree = MerkleTree(leaf_digests([f"leaf{i}" for i in range(count)]))
        arena = tree.arena

        orphans = [
            i for i in range(len(arena))
            if not arena.node(i).is_placeholder and arena.parent(i) is None
        ]
        assert orphans == [tree.root_index]

    def test_parent_digest_is_hash_of_children(self):
        """Test each internal node digest equals H(left || right-or-left)."""
        tree = MerkleTree(leaf_digests(["a", "b", "c", "d", "e"]))
        arena = tree.arena

        for i in range(len(arena)):
            if not arena.node(i).is_internal:
                continue
            left = arena.digest(arena.left(i))
            right_index = arena.right(i)
            right = left if right_index is None else arena.digest(right_index)
            assert arena.digest(i) == sha256(left + right)

    def test_placeholder_has_no_parent(self):
        """Test the placeholder slot is never linked upward."""
        tree = MerkleTree(leaf_digests(["a", "b", "c"]))
        arena = tree.arena

        placeholders = [i for i in range(len(arena)) if arena.node(i).is_placeholder]
        assert len(placeholders) == 1
        assert arena.parent(placeholders[0]) is None

    def test_even_tree_has_no_placeholder(self):
        """Test full levels never allocate the placeholder."""
        tree = MerkleTree(leaf_digests(["a", "b", "c", "d"]))
        arena = tree.arena

        assert not any(arena.node(i).is_placeholder for i in range(len(arena)))
        assert len(arena) == 7


class TestMerkleProofGeneration:
    """Test Merkle proof generation."""

    def test_generate_proof_single_leaf(self):
        """Test proof generation for single leaf tree."""
        leaf = digest(b"single_leaf")
        tree = MerkleTree([leaf])

        proof = tree.generate_proof(leaf)

        assert isinstance(proof, MerkleProof)
        assert proof.leaf_digest == leaf
        assert proof.root_digest == tree.root_digest()
        assert len(proof) == 0

    def test_generate_proof_two_leaves(self):
        """Test proof generation for two leaf tree."""
        a, b = leaf_digests(["a", "b"])
        tree = MerkleTree([a, b])

        proof0 = tree.generate_proof(a)
        assert proof0.steps == [ProofStep(b, Side.RIGHT)]

        proof1 = tree.generate_proof(b)
        assert proof1.steps == [ProofStep(a, Side.LEFT)]

    def test_side_markers_are_zero_and_one(self):
        """Test side markers compare equal to 0 (left) and 1 (right)."""
        assert Side.LEFT == 0
        assert Side.RIGHT == 1

    def test_dangling_leaf_is_its_own_sibling(self):
        """Test the last leaf of an odd level gets itself as right sibling."""
        a, b, c = leaf_digests(["a", "b", "c"])
        tree = MerkleTree([a, b, c])

        proof = tree.generate_proof(c)

        assert proof.steps == [
            ProofStep(c, Side.RIGHT),
            ProofStep(sha256(a + b), Side.LEFT),
        ]

    def test_generate_proof_four_leaves(self):
        """Test proof generation for four leaf tree."""
        digests = leaf_digests(["Hello", "Hi", "Hey", "Hola"])
        tree = MerkleTree(digests)

        for leaf in digests:
            proof = tree.generate_proof(leaf)
            assert proof.leaf_digest == leaf
            assert len(proof) == 2
            assert proof.root_digest == tree.root_digest()

        proof = tree.generate_proof(digests[2])
        assert proof.sides == [Side.RIGHT, Side.LEFT]
        assert proof.sibling_digests == [digests[3], sha256(digests[0] + digests[1])]

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 10, 33])
    def test_proof_length_equals_height(self, count):
        """Test every proof has one step per tree level."""
        digests = leaf_digests([f"leaf{i}" for i in range(count)])
        tree = MerkleTree(digests)

        for leaf in digests:
            assert len(tree.generate_proof(leaf)) == (count - 1).bit_length()

    def test_missing_leaf_raises_not_found(self):
        """Test that an unknown digest raises LeafNotFoundError."""
        tree = MerkleTree(leaf_digests(["a", "b", "c"]))
        missing = digest(b"z")

        with pytest.raises(LeafNotFoundError) as exc_info:
            tree.generate_proof(missing)

        assert exc_info.value.digest_hex == missing.hex()

    def test_root_digest_is_not_a_leaf(self):
        """Test that the root is never substituted for a missing leaf."""
        tree = MerkleTree(leaf_digests(["a", "b"]))

        with pytest.raises(LeafNotFoundError):
            tree.generate_proof(tree.root_digest())

    def test_integer_target_is_not_coerced(self):
        """Test an int target is rejected rather than read as a zero-filled digest."""
        zero_leaf = bytes(32)
        tree = MerkleTree([zero_leaf, digest(b"b")])

        with pytest.raises(InvalidDigestError, match="Proof target digest must be bytes, got int"):
            tree.generate_proof(32)

    def test_hex_string_target_raises_invalid_input(self):
        """Test a hex string target raises InvalidInputError, not TypeError."""
        tree = MerkleTree(leaf_digests(["a", "b"]))

        with pytest.raises(InvalidInputError, match="must be bytes, got str"):
            tree.generate_proof("a" * 64)

    def test_short_target_raises_invalid_digest(self):
        """Test a target of the wrong length is rejected before lookup."""
        tree = MerkleTree(leaf_digests(["a", "b"]))

        with pytest.raises(InvalidDigestError, match="must be 32 bytes, got 5"):
            tree.generate_proof(b"short")

    def test_contains(self):
        """Test membership checks against the leaf set."""
        a, b = leaf_digests(["a", "b"])
        tree = MerkleTree([a, b])

        assert a in tree
        assert digest(b"c") not in tree

    def test_duplicate_digest_uses_first_match(self):
        """Test that a repeated digest is proven at its first position."""
        a, b, c = leaf_digests(["a", "b", "c"])
        tree = MerkleTree([a, b, c, a])

        proof = tree.generate_proof(a)

        assert proof.steps[0] == ProofStep(b, Side.RIGHT)


class TestMerkleTreeBuilder:
    """Test the incremental builder."""

    def test_build_from_data_and_digests(self):
        """Test mixing raw data and pre-computed digests."""
        builder = MerkleTreeBuilder()
        builder.add_data(b"a").add_digest(digest(b"b"))

        tree = builder.build_tree()

        assert builder.get_root() == tree.root_digest()
        assert tree.root_digest() == reference_root(leaf_digests(["a", "b"]))

    def test_get_proof(self):
        """Test proofs are served by the built tree."""
        builder = MerkleTreeBuilder()
        for item in [b"a", b"b", b"c"]:
            builder.add_data(item)
        builder.build_tree()

        proof = builder.get_proof(digest(b"b"))

        assert proof.steps[0] == ProofStep(digest(b"a"), Side.LEFT)

    def test_not_built_raises(self):
        """Test accessing the tree before build_tree raises RuntimeError."""
        builder = MerkleTreeBuilder()

        with pytest.raises(RuntimeError, match="Tree has not been built yet"):
            builder.get_root()

        with pytest.raises(RuntimeError, match="Tree has not been built yet"):
            builder.get_proof(digest(b"a"))

    def test_empty_builder_raises(self):
        """Test building with no leaves raises EmptyTreeError."""
        with pytest.raises(EmptyTreeError):
            MerkleTreeBuilder().build_tree()

    def test_reject_duplicates_passthrough(self):
        """Test the builder forwards reject_duplicates."""
        builder = MerkleTreeBuilder(reject_duplicates=True)
        builder.add_data(b"a").add_data(b"a")

        with pytest.raises(DuplicateLeafError):
            builder.build_tree()
