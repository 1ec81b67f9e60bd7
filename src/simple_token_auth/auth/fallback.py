"""Fallback authentication handlers.

When token authentication does not sign an entity in, a strict guard asks
its FallbackAuthenticationHandler what to do next:

- "devise": defer to session authentication, which denies the request when
  no session user exists,
- "exception": deny the request unless an entity is already signed in,
- "none": do nothing; the action runs unauthenticated.
"""

from __future__ import annotations

from typing import Any, Optional

from simple_token_auth.config import (
    FALLBACK_DEVISE,
    FALLBACK_EXCEPTION,
    FALLBACK_MODES,
    FALLBACK_NONE,
)
from simple_token_auth.exceptions import INVALID_OPTIONS, ConfigurationError
from simple_token_auth.logger import Logger, NullLogger

from .entity import Entity
from .exceptions import AuthenticationFailure
from .session import SessionAuthenticator


class FallbackAuthenticationHandler:
    """Decides what happens after a token authentication attempt."""

    def __init__(
        self,
        mode: str,
        session_authenticator: SessionAuthenticator,
        logger: Optional[Logger] = None,
    ) -> None:
        if mode not in FALLBACK_MODES:
            raise ConfigurationError(
                INVALID_OPTIONS,
                f"Unknown fallback mode: {mode!r}",
                {"allowed": list(FALLBACK_MODES)},
            )
        self.mode = mode
        self.session_authenticator = session_authenticator
        self._logger = logger or NullLogger()

    def __repr__(self) -> str:
        return f"FallbackAuthenticationHandler(mode={self.mode!r})"

    def authenticate_entity(self, controller: Any, entity: Entity) -> Any:
        """Force session authentication for ``entity``.

        Raises:
            AuthenticationFailure: If no session user exists
        """
        return self.session_authenticator.authenticate(controller, entity.name_underscore)

    def fallback(self, controller: Any, entity: Entity) -> None:
        """Apply the configured fallback after a token authentication attempt.

        Raises:
            AuthenticationFailure: When the fallback denies the request
        """
        if self.mode == FALLBACK_NONE:
            return

        if self.mode == FALLBACK_DEVISE:
            try:
                self.authenticate_entity(controller, entity)
            except AuthenticationFailure:
                self._logger.warning("Session authentication denied", entity=entity.name_underscore)
                raise
            return

        if self.mode == FALLBACK_EXCEPTION:
            if self.session_authenticator.current(controller, entity.name_underscore) is None:
                self._logger.warning("Token authentication denied", entity=entity.name_underscore)
                raise AuthenticationFailure(
                    f"Token authentication required for {entity.name_underscore}",
                    scope=entity.name_underscore,
                )
