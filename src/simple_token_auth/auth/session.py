"""Session authentication collaborator and sign-in handling.

The token guards do not manage sessions themselves. They rely on an existing
session-based authentication mechanism exposing the SessionAuthenticator
protocol: a way to read the current record, a way to force
(re-)authentication, and a way to sign a record in.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from .entity import Entity
from .exceptions import AuthenticationFailure


@runtime_checkable
class SessionAuthenticator(Protocol):
    """Protocol for the session-based authentication mechanism.

    ``scope`` is the entity's underscored name ("user", "super_admin").
    """

    def current(self, controller: Any, scope: str) -> Optional[Any]:
        """Return the record signed in for ``scope``, or None."""
        ...

    def authenticate(self, controller: Any, scope: str) -> Any:
        """Return the signed-in record or raise AuthenticationFailure."""
        ...

    def sign_in(self, controller: Any, scope: str, record: Any, store: bool = False) -> None:
        """Sign ``record`` in for this request, persisting it if ``store``."""
        ...


class SignInHandler:
    """Signs token-authenticated records in through the session authenticator."""

    def __init__(self, session_authenticator: SessionAuthenticator) -> None:
        self.session_authenticator = session_authenticator

    def sign_in(self, controller: Any, entity: Entity, record: Any, store: bool = False) -> None:
        self.session_authenticator.sign_in(controller, entity.name_underscore, record, store=store)


class RequestAuthenticator:
    """SessionAuthenticator that only remembers sign-ins for the current request.

    Records are kept on the controller instance under ``signed_in`` so
    nothing outlives the request. Used when no session mechanism is wired in.
    """

    attribute = "signed_in"

    def _records(self, controller: Any) -> dict:
        records = getattr(controller, self.attribute, None)
        if records is None:
            records = {}
            setattr(controller, self.attribute, records)
        return records

    def current(self, controller: Any, scope: str) -> Optional[Any]:
        return self._records(controller).get(scope)

    def authenticate(self, controller: Any, scope: str) -> Any:
        record = self.current(controller, scope)
        if record is None:
            raise AuthenticationFailure(f"Authentication required for {scope}", scope=scope)
        return record

    def sign_in(self, controller: Any, scope: str, record: Any, store: bool = False) -> None:
        self._records(controller)[scope] = record
