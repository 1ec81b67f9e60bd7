"""
Logger interface for simple-token-auth.

Handlers, entity managers and fallback handlers only depend on this
contract, so applications can plug in their own logging backend.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract logging contract used across simple-token-auth.

    Every method takes a message plus arbitrary key-value context, e.g.:

        logger.info("Token authentication registered", entity="user")
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message.

        Args:
            message: The message to log
            **kwargs: Additional key-value pairs to include in the log
        """
        pass

    @abstractmethod
    def get_session_id(self) -> str:
        """Get the identifier shared by every record this logger emits."""
        pass


class NullLogger(Logger):
    """Logger that drops everything. Handy for tests and silent embedding."""

    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    def info(self, message: str, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    def error(self, message: str, **kwargs: Any) -> None:
        pass

    def get_session_id(self) -> str:
        return "null"
