"""
Configuration management for merkleproof.

Handles loading and validation of configuration files.
"""

from merkleproof.config.settings import (
    LoggingConfig,
    MerkleProofConfig,
    TreeConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "MerkleProofConfig",
    "TreeConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
