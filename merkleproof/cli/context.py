"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merkleproof, a product of Garudex Labs

CLI context for merkleproof.

Provides shared context object and decorators for CLI commands.
"""

import click
from typing import Optional

from merkleproof.config.settings import MerkleProofConfig


# Global context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""

    def __init__(self):
        self.config: Optional[MerkleProofConfig] = None
        self.config_path: Optional[str] = None
        self.verbose = False


pass_context = click.make_pass_decorator(CLIContext, ensure=True)
