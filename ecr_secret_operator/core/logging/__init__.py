# ecr_secret_operator/core/logging/__init__.py
"""Logging setup for the operator.

Modules log through ``logging.getLogger(__name__)``; the process entry point
calls ``setup_logging`` once to install a handler with the configured format.

Example usage:
    from ecr_secret_operator.core.logging import log_context, setup_logging

    setup_logging("INFO", "json")
    with log_context(namespace="default", secret="registry-secret"):
        logger.info("Secret needs renewal")
"""

import logging
import sys

from .context import ContextFilter, get_logging_context, log_context
from .formatters import JSONFormatter, StructuredFormatter

ROOT_LOGGER_NAME = "ecr_secret_operator"


def setup_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Log level name.
        fmt: "text" or "json".

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else StructuredFormatter())
    handler.addFilter(ContextFilter())
    logger.addHandler(handler)

    # Client libraries are chatty at DEBUG
    for noisy in ("botocore", "boto3", "urllib3", "kubernetes"):
        logging.getLogger(noisy).setLevel(max(logging.WARNING, logger.level))

    return logger


__all__ = [
    "ROOT_LOGGER_NAME",
    "ContextFilter",
    "JSONFormatter",
    "StructuredFormatter",
    "get_logging_context",
    "log_context",
    "setup_logging",
]
