"""
CLI entry point for merkleproof.

Provides command-line interface for building Merkle trees over leaf data,
generating inclusion proofs and verifying them.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from merkleproof._version import __version__
from merkleproof.config.settings import get_default_config_path, load_config
from merkleproof.exceptions import InvalidConfigurationError
from merkleproof.logging_config import configure_bootstrap_logging, get_logger, setup_logging
from merkleproof.cli.context import CLIContext, pass_context


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (overrides configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='merkleproof')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    merkleproof - Merkle trees and inclusion proofs.

    Builds a SHA-256 Merkle tree over leaf data, prints its root and
    produces and checks membership proofs for single leaves.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    # Config loading logs before the configured handlers exist
    configure_bootstrap_logging()

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None

    try:
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=ctx.config.logging.format == "json",
        )
    except OSError as e:
        click.echo(f"Error: Failed to set up logging: {e}", err=True)
        sys.exit(1)

    if verbose:
        logger = get_logger("cli")
        logger.info("cli_started", config_path=ctx.config_path or "defaults", log_level=effective_log_level)


# Import and register merkle commands
from merkleproof.cli.merkle import proof, root, verify_command
cli.add_command(root)
cli.add_command(proof)
cli.add_command(verify_command, name='verify')


if __name__ == '__main__':
    cli()
