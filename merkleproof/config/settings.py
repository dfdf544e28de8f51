"""
Configuration management for merkleproof.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import codecs
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from merkleproof.exceptions import InvalidConfigurationError
from merkleproof.logging_config import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLEPROOF_LOG_LEVEL}" -> value of MERKLEPROOF_LOG_LEVEL env var
        "${MERKLEPROOF_LOG_LEVEL:INFO}" -> value of MERKLEPROOF_LOG_LEVEL or "INFO" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_bool(value: Any, name: str) -> bool:
    # Environment expansion always yields strings
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "0", "off"):
        return False
    raise InvalidConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class TreeConfig:
    """Merkle tree construction configuration."""

    reject_duplicate_leaves: bool = False
    leaf_encoding: str = "utf-8"


@dataclass
class MerkleProofConfig:
    """Main merkleproof configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merkleproof/config.yaml")


def get_default_config() -> MerkleProofConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerkleProofConfig: Default configuration object
    """
    return MerkleProofConfig(
        logging=LoggingConfig(),
        tree=TreeConfig(),
    )


def load_config(config_path: Optional[str] = None) -> MerkleProofConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerkleProofConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.debug(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        logger.debug(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': top level must be a mapping"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        )

    logger.debug(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerkleProofConfig:
    """
    Build MerkleProofConfig from dictionary loaded from YAML.

    Merges user configuration with defaults. Every section is optional.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        MerkleProofConfig: Configuration object
    """
    default_config = get_default_config()

    logging_data = _section(config_data, 'logging')
    log_file = logging_data.get('file', default_config.logging.file) or ""
    if not isinstance(log_file, str):
        raise InvalidConfigurationError(
            f"logging.file must be a path string, got {log_file!r}"
        )
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)).upper(),
        file=os.path.expanduser(log_file),
        format=str(logging_data.get('format', default_config.logging.format)).lower(),
    )

    tree_data = _section(config_data, 'tree')
    tree = TreeConfig(
        reject_duplicate_leaves=_as_bool(
            tree_data.get('reject_duplicate_leaves', default_config.tree.reject_duplicate_leaves),
            'tree.reject_duplicate_leaves',
        ),
        leaf_encoding=tree_data.get('leaf_encoding', default_config.tree.leaf_encoding),
    )

    return MerkleProofConfig(logging=logging, tree=tree)


def _validate_config(config: MerkleProofConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.logging.level not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging level must be one of {VALID_LOG_LEVELS}, "
            f"got '{config.logging.level}'"
        )

    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"logging format must be one of {VALID_LOG_FORMATS}, "
            f"got '{config.logging.format}'"
        )

    if not isinstance(config.tree.leaf_encoding, str) or not config.tree.leaf_encoding:
        raise InvalidConfigurationError("leaf_encoding must be a non-empty string")
    try:
        codecs.lookup(config.tree.leaf_encoding)
    except LookupError:
        raise InvalidConfigurationError(
            f"leaf_encoding '{config.tree.leaf_encoding}' is not a known codec"
        )
