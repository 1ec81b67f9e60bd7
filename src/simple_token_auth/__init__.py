"""simple-token-auth - token authentication for model-backed actors.

Adds per-action token verification to controller types, alongside an
existing session-based authentication fallback:
- auth: provisioning, entities, guards, fallback handlers
- web: FastAPI/Starlette controller, session authenticator, dependencies
- config: process-wide settings with environment variable support
- logger: structured logging with text or JSON output
- exceptions: structured configuration errors
"""

__version__ = "1.0.0"

from simple_token_auth.auth import (
    AuthenticationFailure,
    AuthError,
    EntitiesManager,
    Entity,
    FallbackAuthenticationHandler,
    GuardPair,
    SessionAuthenticator,
    TokenAuthenticationHandler,
    TokenAuthenticationHandlerMixin,
    acts_as_token_authenticatable,
)
from simple_token_auth.config import (
    TokenAuthSettings,
    configure,
    get_settings,
    reset_settings,
)
from simple_token_auth.exceptions import (
    ConfigurationError,
    SimpleTokenAuthError,
)
from simple_token_auth.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

__all__ = [
    "__version__",
    # Auth
    "TokenAuthenticationHandler",
    "TokenAuthenticationHandlerMixin",
    "GuardPair",
    "Entity",
    "EntitiesManager",
    "FallbackAuthenticationHandler",
    "SessionAuthenticator",
    "acts_as_token_authenticatable",
    "AuthError",
    "AuthenticationFailure",
    # Config
    "TokenAuthSettings",
    "configure",
    "get_settings",
    "reset_settings",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
    # Exceptions
    "SimpleTokenAuthError",
    "ConfigurationError",
]
