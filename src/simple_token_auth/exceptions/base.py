"""Base exception classes for simple-token-auth.

Every configuration-time error carries structured information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging
"""

from typing import Any, Dict, Optional


class SimpleTokenAuthError(Exception):
    """Base exception for all simple-token-auth errors.

    Attributes:
        code: Machine-readable error code (e.g., "INVALID_MODEL")
        message: Human-readable error message
        details: Optional additional context for debugging
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(SimpleTokenAuthError):
    """Raised while wiring token authentication at application bootstrap.

    Covers unprovisionable models, guard name collisions, malformed
    registration options and invalid settings. Never retried.
    """

    pass
