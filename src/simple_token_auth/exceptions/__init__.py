"""Common exceptions for simple-token-auth.

Usage:
    from simple_token_auth.exceptions import ConfigurationError, SimpleTokenAuthError
"""

from simple_token_auth.exceptions.base import (
    ConfigurationError,
    SimpleTokenAuthError,
)

# Codes used with ConfigurationError
INVALID_MODEL = "INVALID_MODEL"
INVALID_OPTIONS = "INVALID_OPTIONS"
INVALID_SETTINGS = "INVALID_SETTINGS"
GUARD_NAME_COLLISION = "GUARD_NAME_COLLISION"
DUPLICATE_HANDLER = "DUPLICATE_HANDLER"

__all__ = [
    "SimpleTokenAuthError",
    "ConfigurationError",
    "INVALID_MODEL",
    "INVALID_OPTIONS",
    "INVALID_SETTINGS",
    "GUARD_NAME_COLLISION",
    "DUPLICATE_HANDLER",
]
