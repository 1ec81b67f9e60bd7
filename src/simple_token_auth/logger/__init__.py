"""
simple-token-auth logger module

Usage:
    from simple_token_auth.logger import get_logger, create_logger

    logger = get_logger()
    logger.info("Token authentication registered", entity="user")

    logger = create_logger(level=logging.DEBUG, json_format=True)

Environment Variables:
    {PREFIX}_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    {PREFIX}_LOG_FILE: Optional file path for log output
    {PREFIX}_LOG_JSON: Set to "true" for JSON output format

    Where {PREFIX} is derived from the logger name
    ("simple-token-auth" -> "SIMPLE_TOKEN_AUTH").
"""

import logging
import os
from typing import Optional

from .interface import Logger, NullLogger
from .structured_logger import JsonFormatter, StructuredLogger, TextFormatter

DEFAULT_LOGGER_NAME = "simple-token-auth"


def _get_env_prefix(name: str) -> str:
    """Convert a logger name to its environment variable prefix."""
    return name.upper().replace("-", "_").replace(".", "_")


def create_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> Logger:
    """Create a logger, filling unset parameters from the environment.

    Args:
        name: Logger name
        level: Logging level (defaults to INFO or {PREFIX}_LOG_LEVEL)
        log_file: Optional file path ({PREFIX}_LOG_FILE)
        json_format: JSON output ({PREFIX}_LOG_JSON)

    Returns:
        A configured StructuredLogger
    """
    env_prefix = _get_env_prefix(name)

    if level is None:
        level_str = os.environ.get(f"{env_prefix}_LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_str, logging.INFO)

    if log_file is None:
        log_file = os.environ.get(f"{env_prefix}_LOG_FILE")

    if json_format is None:
        json_format = os.environ.get(f"{env_prefix}_LOG_JSON", "false").lower() == "true"

    return StructuredLogger(
        name=name,
        level=level,
        log_file=log_file,
        json_format=json_format,
    )


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> Logger:
    """Get a logger configured purely from environment variables."""
    return create_logger(name=name)


__all__ = [
    "Logger",
    "NullLogger",
    "StructuredLogger",
    "JsonFormatter",
    "TextFormatter",
    "DEFAULT_LOGGER_NAME",
    "create_logger",
    "get_logger",
]
