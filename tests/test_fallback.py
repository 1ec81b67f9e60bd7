"""Tests for fallback authentication handlers and session collaborators."""

from unittest import mock

import pytest

from simple_token_auth.auth import (
    AuthenticationFailure,
    Entity,
    FallbackAuthenticationHandler,
    RequestAuthenticator,
    SessionAuthenticator,
    SignInHandler,
)
from simple_token_auth.config import TokenAuthSettings
from simple_token_auth.exceptions import INVALID_OPTIONS, ConfigurationError


@pytest.fixture
def entity(user_model):
    return Entity(user_model, TokenAuthSettings())


class TestFallbackAuthenticationHandler:
    """Tests for each fallback mode."""

    def test_unknown_mode_rejected(self):
        """Test that only known modes are accepted."""
        with pytest.raises(ConfigurationError) as exc_info:
            FallbackAuthenticationHandler("sometimes", RequestAuthenticator())
        assert exc_info.value.code == INVALID_OPTIONS

    def test_none_does_nothing(self, entity, controller_class):
        """Test that "none" never touches the session."""
        session = mock.Mock()
        FallbackAuthenticationHandler("none", session).fallback(controller_class(), entity)

        session.authenticate.assert_not_called()
        session.current.assert_not_called()

    def test_devise_authenticates_session(self, entity, controller_class):
        """Test that "devise" forces session authentication."""
        session = mock.Mock()
        controller = controller_class()
        FallbackAuthenticationHandler("devise", session).fallback(controller, entity)

        session.authenticate.assert_called_once_with(controller, "user")

    def test_devise_propagates_failure(self, entity, controller_class):
        """Test that a session denial propagates and is logged."""
        logger = mock.Mock()
        handler = FallbackAuthenticationHandler("devise", RequestAuthenticator(), logger=logger)

        with pytest.raises(AuthenticationFailure):
            handler.fallback(controller_class(), entity)
        logger.warning.assert_called_once_with("Session authentication denied", entity="user")

    def test_exception_denies_without_current(self, entity, controller_class):
        """Test that "exception" denies when nobody is signed in."""
        handler = FallbackAuthenticationHandler("exception", RequestAuthenticator())

        with pytest.raises(AuthenticationFailure) as exc_info:
            handler.fallback(controller_class(), entity)
        assert exc_info.value.scope == "user"

    def test_exception_allows_current(self, entity, controller_class, user_model):
        """Test that "exception" lets signed-in requests through."""
        session = RequestAuthenticator()
        controller = controller_class()
        session.sign_in(controller, "user", user_model(id=1))

        FallbackAuthenticationHandler("exception", session).fallback(controller, entity)

    def test_authenticate_entity_returns_record(self, entity, controller_class, user_model):
        """Test that authenticate_entity returns the session record."""
        session = RequestAuthenticator()
        controller = controller_class()
        record = user_model(id=1)
        session.sign_in(controller, "user", record)

        assert FallbackAuthenticationHandler("devise", session).authenticate_entity(controller, entity) is record

    def test_repr(self):
        assert repr(FallbackAuthenticationHandler("none", RequestAuthenticator())) == (
            "FallbackAuthenticationHandler(mode='none')"
        )


class TestRequestAuthenticator:
    """Tests for the per-request session authenticator."""

    def test_satisfies_protocol(self):
        assert isinstance(RequestAuthenticator(), SessionAuthenticator)

    def test_sign_in_is_per_controller(self, controller_class, user_model):
        """Test that sign-ins do not outlive the controller instance."""
        session = RequestAuthenticator()
        first, second = controller_class(), controller_class()
        session.sign_in(first, "user", user_model(id=1))

        assert session.current(first, "user") is not None
        assert session.current(second, "user") is None

    def test_authenticate_raises_without_record(self, controller_class):
        with pytest.raises(AuthenticationFailure, match="super_admin"):
            RequestAuthenticator().authenticate(controller_class(), "super_admin")


class TestSignInHandler:
    """Tests for SignInHandler."""

    def test_delegates_with_scope(self, entity, controller_class):
        """Test that the entity's scope and store flag are forwarded."""
        session = mock.Mock()
        controller = controller_class()
        record = object()

        SignInHandler(session).sign_in(controller, entity, record, store=True)

        session.sign_in.assert_called_once_with(controller, "user", record, store=True)
