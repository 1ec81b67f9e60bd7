"""Runtime authentication exceptions.

Raised inside guards and fallback handlers while a request is processed.
Each carries an HTTP status code so the web layer can turn it into an
HTTPException without knowing the concrete class.

Hierarchy:
    AuthError (401)
    └── AuthenticationFailure (401)
"""


class AuthError(Exception):
    """Base exception for request-time authentication errors."""

    status_code: int = 401
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None, scope: str | None = None):
        """Initialize the exception.

        Args:
            message: Error message. Uses default_message if not provided.
            scope: Entity scope (e.g. "user") the failure relates to
        """
        self.message = message or self.default_message
        self.scope = scope
        super().__init__(self.message)


class AuthenticationFailure(AuthError):
    """Raised when neither the token nor the session authenticates the entity."""

    default_message = "Authentication required"


__all__ = [
    "AuthError",
    "AuthenticationFailure",
]
