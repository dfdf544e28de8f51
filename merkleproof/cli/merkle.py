"""
CLI commands for Merkle tree operations.

Provides commands for:
- Computing the Merkle root of a set of leaves
- Generating an inclusion proof for one leaf
- Verifying an inclusion proof against a root

Leaves are given as arguments or read line by line from a file. Each leaf
is encoded with the configured leaf encoding and hashed with SHA-256 to
form the leaf digest.
"""

import json
import sys
from typing import Any, Dict, List, Optional, Tuple

import click

from merkleproof.cli.context import CLIContext, pass_context
from merkleproof.config.settings import TreeConfig
from merkleproof.digest import digest, from_hex, to_hex
from merkleproof.exceptions import MerkleProofError
from merkleproof.logging_config import get_logger, set_correlation_id
from merkleproof.merkle import MerkleProof, MerkleTree, ProofStep, Side, verify, verify_proof

logger = get_logger(__name__)


def _tree_config(ctx: CLIContext) -> TreeConfig:
    if ctx.config is None:
        return TreeConfig()
    return ctx.config.tree


def _encode(value: str, encoding: str) -> bytes:
    try:
        return value.encode(encoding)
    except UnicodeEncodeError as e:
        raise click.BadParameter(f"Cannot encode {value!r} as {encoding}: {e}")


def _collect_leaves(leaves: Tuple[str, ...], leaf_file, encoding: str) -> List[bytes]:
    """
    Gather leaf data from arguments and an optional file.

    Args:
        leaves: Leaf strings given on the command line
        leaf_file: Open text file with one leaf per line, or None
        encoding: Encoding used to turn leaf strings into bytes

    Returns:
        Encoded leaf data in order (arguments first, then file lines)
    """
    values = list(leaves)
    if leaf_file is not None:
        values.extend(line.rstrip("\r\n") for line in leaf_file if line.strip())
    if not values:
        raise click.UsageError("No leaves given. Pass leaves as arguments or use --file.")
    return [_encode(value, encoding) for value in values]


def _build(ctx: CLIContext, leaves: Tuple[str, ...], leaf_file) -> MerkleTree:
    tree_config = _tree_config(ctx)
    data = _collect_leaves(leaves, leaf_file, tree_config.leaf_encoding)
    return MerkleTree(
        [digest(item) for item in data],
        reject_duplicates=tree_config.reject_duplicate_leaves,
    )


def proof_to_dict(proof: MerkleProof) -> Dict[str, Any]:
    """Render a proof as a JSON-compatible dict with hex digests."""
    return {
        "leaf": to_hex(proof.leaf_digest),
        "root": to_hex(proof.root_digest),
        "steps": [
            {"sibling": to_hex(step.sibling), "side": step.side.name.lower()}
            for step in proof.steps
        ],
    }


def _parse_side(value: Any) -> Side:
    if isinstance(value, str):
        try:
            return Side[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown side {value!r}, expected 'left' or 'right'")
    return Side(int(value))


def proof_from_dict(data: Dict[str, Any]) -> Tuple[List[ProofStep], Optional[bytes]]:
    """
    Parse a proof document produced by `proof_to_dict`.

    Returns:
        Tuple of (proof steps, root digest if the document carries one)

    Raises:
        ValueError: If the document is malformed
    """
    if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
        raise ValueError("Proof document must be an object with a 'steps' list")

    steps = []
    for position, step in enumerate(data["steps"]):
        try:
            steps.append(ProofStep(from_hex(step["sibling"]), _parse_side(step["side"])))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid proof step {position}: {e}")

    root = data.get("root")
    if root is not None and not isinstance(root, str):
        raise ValueError("Proof 'root' must be a hex string")
    return steps, from_hex(root) if root else None


leaf_file_option = click.option(
    "--file",
    "-f",
    "leaf_file",
    type=click.File("r"),
    default=None,
    help="Read additional leaves from a file, one per line",
)


@click.command("root")
@click.argument("leaves", nargs=-1)
@leaf_file_option
@pass_context
def root(ctx: CLIContext, leaves, leaf_file):
    """
    Compute the Merkle root of LEAVES.

    Examples:

        merkleproof root Hello Hi Hey Hola

        merkleproof root --file leaves.txt
    """
    set_correlation_id()
    try:
        tree = _build(ctx, leaves, leaf_file)
    except MerkleProofError as e:
        click.echo(f"Error: {e}", err=True)
        logger.warning("merkle_root_failed", error=str(e))
        sys.exit(1)

    click.echo(to_hex(tree.root_digest()))
    if ctx.verbose:
        click.echo(f"  Leaves: {tree.leaf_count}")
        click.echo(f"  Height: {tree.height}")


@click.command("proof")
@click.option("--leaf", "target", required=True, help="Leaf to prove (must be one of LEAVES)")
@click.argument("leaves", nargs=-1)
@leaf_file_option
@click.option(
    "--output",
    "-o",
    type=click.File("w"),
    default="-",
    help="Write the proof JSON to a file (default: stdout)",
)
@pass_context
def proof(ctx: CLIContext, target, leaves, leaf_file, output):
    """
    Generate an inclusion proof for one leaf of LEAVES.

    The proof is written as JSON with hex-encoded digests.

    Examples:

        merkleproof proof --leaf Hey Hello Hi Hey Hola

        merkleproof proof --leaf Hey --file leaves.txt -o proof.json
    """
    set_correlation_id()
    tree_config = _tree_config(ctx)
    try:
        tree = _build(ctx, leaves, leaf_file)
        merkle_proof = tree.generate_proof(digest(_encode(target, tree_config.leaf_encoding)))
    except MerkleProofError as e:
        click.echo(f"Error: {e}", err=True)
        logger.warning("merkle_proof_failed", error=str(e))
        sys.exit(1)

    output.write(json.dumps(proof_to_dict(merkle_proof), indent=2))
    output.write("\n")


@click.command("verify")
@click.option("--data", required=True, help="Raw leaf data the proof is for")
@click.option(
    "--proof",
    "proof_file",
    type=click.File("r"),
    required=True,
    help="Proof JSON file as written by 'merkleproof proof' ('-' for stdin)",
)
@click.option("--root", "expected_root", default=None, help="Trusted root digest (hex)")
@pass_context
def verify_command(ctx: CLIContext, data, proof_file, expected_root):
    """
    Verify an inclusion proof.

    Recomputes the root from --data and the proof. The result is checked
    against --root, or against the root recorded in the proof when --root
    is not given. Exits with status 1 if the roots differ.

    Examples:

        merkleproof verify --data Hey --proof proof.json

        merkleproof verify --data Hey --proof proof.json --root 5f30cc80...
    """
    set_correlation_id()
    tree_config = _tree_config(ctx)
    try:
        steps, recorded_root = proof_from_dict(json.load(proof_file))
        trusted_root = from_hex(expected_root) if expected_root else recorded_root
    except ValueError as e:
        click.echo(f"Error: Invalid proof: {e}", err=True)
        sys.exit(1)

    leaf_data = _encode(data, tree_config.leaf_encoding)

    if trusted_root is None:
        click.echo(to_hex(verify(leaf_data, steps)))
        return

    if verify_proof(leaf_data, steps, trusted_root):
        click.echo("✓ Proof is valid")
        click.echo(f"  Root: {to_hex(trusted_root)}")
    else:
        click.echo("✗ Proof is INVALID", err=True)
        click.echo(f"  Expected root: {to_hex(trusted_root)}", err=True)
        click.echo(f"  Computed root: {to_hex(verify(leaf_data, steps))}", err=True)
        sys.exit(1)
