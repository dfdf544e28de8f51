"""
Logging configuration for merkleproof.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs for
tracing a tree build and the proofs derived from it.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to log events if present in context.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary to modify

    Returns:
        Modified event dictionary with correlation_id if available
    """
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Optional correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from the current context."""
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context, or None if not set."""
    return correlation_id_var.get()


def configure_bootstrap_logging() -> None:
    """
    Route structlog through the standard library before setup_logging runs.

    Until handlers are installed, events below WARNING are dropped and the
    rest go to stderr through the logging module's last-resort handler, so
    nothing is written to stdout. Loggers are not cached, which lets a later
    setup_logging call take effect for every module.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for merkleproof.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if not name.startswith("merkleproof"):
        name = f"merkleproof.{name}"
    return structlog.get_logger(name)


# Convenience functions for common logging patterns

def log_merkle_root_computation(
    logger: structlog.stdlib.BoundLogger,
    leaf_count: int,
    height: int,
    merkle_root: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle root computation.

    Args:
        logger: Logger instance
        leaf_count: Number of leaves in the tree
        height: Height of the resulting tree
        merkle_root: Computed Merkle root (hex encoded)
        duration_ms: Computation duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_root_computation",
        "leaf_count": leaf_count,
        "height": height,
        "merkle_root": merkle_root,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.debug("merkle_root_computation", **log_data)


def log_merkle_proof_generation(
    logger: structlog.stdlib.BoundLogger,
    leaf_digest: str,
    proof_length: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log generation of an inclusion proof.

    Args:
        logger: Logger instance
        leaf_digest: Digest of the proven leaf (hex encoded)
        proof_length: Number of sibling steps in the proof
        duration_ms: Generation duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_proof_generation",
        "leaf_digest": leaf_digest,
        "proof_length": proof_length,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.debug("merkle_proof_generation", **log_data)


def log_merkle_verification(
    logger: structlog.stdlib.BoundLogger,
    success: bool,
    duration_ms: float,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle verification operation.

    Args:
        logger: Logger instance
        success: Whether verification succeeded
        duration_ms: Verification duration in milliseconds
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_verification",
        "success": success,
        "duration_ms": duration_ms,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.info("merkle_verification", **log_data)
    else:
        logger.warning("merkle_verification_failed", **log_data)
