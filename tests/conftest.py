"""
Pytest configuration and shared fixtures for merkleproof tests.
"""

import logging
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest
import structlog


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def greeting_leaves() -> List[str]:
    return ["Hello", "Hi", "Hey", "Hola"]


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(f"""
logging:
  level: DEBUG
  file: {temp_dir}/merkleproof.log
  format: json

tree:
  reject_duplicate_leaves: true
  leaf_encoding: utf-8
""")
    return config_path


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging so streams from one test don't leak into the next."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)
    structlog.reset_defaults()
