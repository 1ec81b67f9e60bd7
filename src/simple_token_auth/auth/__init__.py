"""Token authentication for model-backed actors.

Provides per-action token verification alongside an existing session-based
authentication mechanism:
- Idempotent token storage provisioning on model classes
- Soft and strict guards per model, isolated per controller type
- Configurable fallback: session authentication, denial, or nothing
- Lazily created, shared coordination objects per controller type

Usage:
    from simple_token_auth.auth import TokenAuthenticationHandler

    class User:
        @classmethod
        def find_for_authentication(cls, **conditions): ...

    auth = TokenAuthenticationHandler(ArticlesController)
    auth.handle_token_authentication_for(User)
    auth.handle_token_authentication_for(SuperAdmin, {"fallback_to_devise": False, "only": ["destroy"]})
"""

from .entities_manager import EntitiesManager
from .entity import Entity, camelize, underscore
from .exceptions import AuthenticationFailure, AuthError
from .fallback import FallbackAuthenticationHandler
from .handler import (
    HOOK_SCOPE_KEYS,
    GuardPair,
    TokenAuthenticationHandler,
    TokenAuthenticationHandlerMixin,
    parse_options,
    soft_guard_name,
    strict_guard_name,
)
from .session import RequestAuthenticator, SessionAuthenticator, SignInHandler
from .token_authenticatable import (
    TOKEN_FIELD,
    acts_as_token_authenticatable,
    is_token_authenticatable,
)
from .tokens import TokenComparator, TokenGenerator

__all__ = [
    # Handler
    "TokenAuthenticationHandler",
    "TokenAuthenticationHandlerMixin",
    "GuardPair",
    "parse_options",
    "soft_guard_name",
    "strict_guard_name",
    "HOOK_SCOPE_KEYS",
    # Entities
    "Entity",
    "EntitiesManager",
    "underscore",
    "camelize",
    # Provisioning
    "acts_as_token_authenticatable",
    "is_token_authenticatable",
    "TOKEN_FIELD",
    "TokenGenerator",
    "TokenComparator",
    # Fallback and sessions
    "FallbackAuthenticationHandler",
    "SessionAuthenticator",
    "RequestAuthenticator",
    "SignInHandler",
    # Exceptions
    "AuthError",
    "AuthenticationFailure",
]
