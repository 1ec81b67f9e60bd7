"""Starlette session-backed SessionAuthenticator.

Signed-in records are remembered for the request and, when asked to store
them (settings ``sign_in_token``), their id is written to the Starlette
session under "<scope>_id". Later requests reload the record with the
loader registered for that scope.

Example:
    app.add_middleware(SessionMiddleware, secret_key=...)

    authenticator = StarletteSessionAuthenticator(loaders={"user": User.get})
    TokenAuthenticationHandler(ArticlesController, session_authenticator=authenticator)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from simple_token_auth.auth import RequestAuthenticator


class StarletteSessionAuthenticator(RequestAuthenticator):
    """Session authentication on top of Starlette's SessionMiddleware."""

    def __init__(
        self,
        loaders: Optional[Mapping[str, Callable[[Any], Optional[Any]]]] = None,
        key_attribute: str = "id",
    ) -> None:
        """Initialize the authenticator.

        Args:
            loaders: Per-scope callables loading a record from its stored id
            key_attribute: Record attribute stored in the session
        """
        self._loaders: Dict[str, Callable[[Any], Optional[Any]]] = dict(loaders or {})
        self.key_attribute = key_attribute

    @staticmethod
    def session_key(scope: str) -> str:
        return f"{scope}_id"

    def current(self, controller: Any, scope: str) -> Optional[Any]:
        record = super().current(controller, scope)
        if record is not None:
            return record

        session = getattr(controller, "session", None)
        loader = self._loaders.get(scope)
        if not session or loader is None or self.session_key(scope) not in session:
            return None

        record = loader(session[self.session_key(scope)])
        if record is not None:
            super().sign_in(controller, scope, record)
        return record

    def sign_in(self, controller: Any, scope: str, record: Any, store: bool = False) -> None:
        super().sign_in(controller, scope, record, store=store)
        session = getattr(controller, "session", None)
        if store and session is not None:
            session[self.session_key(scope)] = getattr(record, self.key_attribute)

    def sign_out(self, controller: Any, scope: str) -> None:
        self._records(controller).pop(scope, None)
        session = getattr(controller, "session", None)
        if session is not None:
            session.pop(self.session_key(scope), None)
