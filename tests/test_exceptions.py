"""Tests for structured exceptions."""

import pytest

from simple_token_auth.auth import AuthenticationFailure, AuthError
from simple_token_auth.exceptions import (
    GUARD_NAME_COLLISION,
    ConfigurationError,
    SimpleTokenAuthError,
)


class TestSimpleTokenAuthError:
    """Test the base exception."""

    def test_attributes(self):
        error = SimpleTokenAuthError("SOME_CODE", "Something happened", {"key": "value"})

        assert error.code == "SOME_CODE"
        assert error.message == "Something happened"
        assert error.details == {"key": "value"}

    def test_str_without_details(self):
        assert str(SimpleTokenAuthError("SOME_CODE", "Something happened")) == "SOME_CODE: Something happened"

    def test_str_with_details(self):
        error = SimpleTokenAuthError("SOME_CODE", "Something happened", {"key": "value"})
        assert str(error) == "SOME_CODE: Something happened (details: {'key': 'value'})"

    def test_to_dict(self):
        error = ConfigurationError(GUARD_NAME_COLLISION, "Duplicate guard")
        assert error.to_dict() == {
            "code": "GUARD_NAME_COLLISION",
            "message": "Duplicate guard",
            "details": {},
        }

    def test_configuration_error_is_base(self):
        """Test that ConfigurationError can be caught as the base class."""
        with pytest.raises(SimpleTokenAuthError):
            raise ConfigurationError(GUARD_NAME_COLLISION, "Duplicate guard")


class TestAuthErrors:
    """Test runtime authentication errors."""

    def test_default_message(self):
        error = AuthenticationFailure()

        assert error.message == "Authentication required"
        assert error.status_code == 401
        assert error.scope is None

    def test_custom_message_and_scope(self):
        error = AuthenticationFailure("No token", scope="user")

        assert str(error) == "No token"
        assert error.scope == "user"

    def test_hierarchy(self):
        assert issubclass(AuthenticationFailure, AuthError)
        assert not issubclass(AuthError, SimpleTokenAuthError)
