"""Configuration module for simple-token-auth.

Example:
    from simple_token_auth.config import configure, get_settings

    configure(fallback="exception")
    settings = get_settings()
"""

from simple_token_auth.config.env_loader import EnvLoader
from simple_token_auth.config.settings import (
    DEFAULT_FALLBACK,
    DEFAULT_PREFIX,
    FALLBACK_DEVISE,
    FALLBACK_EXCEPTION,
    FALLBACK_MODES,
    FALLBACK_NONE,
    TokenAuthSettings,
    configure,
    get_settings,
    reset_settings,
)

__all__ = [
    "EnvLoader",
    "TokenAuthSettings",
    "DEFAULT_PREFIX",
    "DEFAULT_FALLBACK",
    "FALLBACK_DEVISE",
    "FALLBACK_EXCEPTION",
    "FALLBACK_NONE",
    "FALLBACK_MODES",
    "configure",
    "get_settings",
    "reset_settings",
]
