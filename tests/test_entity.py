"""Tests for Entity naming and request lookups."""

import pytest

from simple_token_auth.auth import Entity, camelize, underscore
from simple_token_auth.config import TokenAuthSettings


class TestNaming:
    """Tests for name conversion helpers."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("User", "user"),
            ("SuperAdmin", "super_admin"),
            ("HTTPUser", "http_user"),
            ("Admin2Factor", "admin2_factor"),
        ],
    )
    def test_underscore(self, name, expected):
        assert underscore(name) == expected

    def test_camelize(self):
        assert camelize("email") == "Email"
        assert camelize("user_name") == "UserName"


class TestEntity:
    """Tests for Entity attributes."""

    def test_user_names(self, user_model):
        """Test the default names derived for User."""
        entity = Entity(user_model, TokenAuthSettings())

        assert entity.name == "User"
        assert entity.name_underscore == "user"
        assert entity.identifier == "email"
        assert entity.token_header_name == "X-User-Token"
        assert entity.identifier_header_name == "X-User-Email"
        assert entity.token_param_name == "user_token"
        assert entity.identifier_param_name == "user_email"
        assert entity.case_insensitive_identifier

    def test_super_admin_names(self, super_admin_model):
        """Test names derived for a multi-word model."""
        entity = Entity(super_admin_model, TokenAuthSettings())

        assert entity.name_underscore == "super_admin"
        assert entity.token_header_name == "X-SuperAdmin-Token"
        assert entity.token_param_name == "super_admin_token"

    def test_alias(self, super_admin_model):
        """Test that an alias replaces the class name."""
        entity = Entity(super_admin_model, TokenAuthSettings(), model_alias="Admin")

        assert entity.name_underscore == "admin"
        assert entity.token_header_name == "X-Admin-Token"
        assert entity.model is super_admin_model

    def test_custom_identifier(self, super_admin_model):
        """Test a per-entity identifier."""
        settings = TokenAuthSettings(identifiers={"super_admin": "user_name"})
        entity = Entity(super_admin_model, settings)

        assert entity.identifier == "user_name"
        assert entity.identifier_header_name == "X-SuperAdmin-UserName"
        assert entity.identifier_param_name == "super_admin_user_name"
        assert not entity.case_insensitive_identifier

    def test_custom_header_names(self, super_admin_model):
        """Test per-entity header overrides."""
        settings = TokenAuthSettings(
            header_names={"super_admin": {"authentication_token": "X-Admin-Auth-Token", "email": "X-Admin-Email"}}
        )
        entity = Entity(super_admin_model, settings)

        assert entity.token_header_name == "X-Admin-Auth-Token"
        assert entity.identifier_header_name == "X-Admin-Email"


class TestRequestLookup:
    """Tests for reading tokens and identifiers from a controller."""

    def test_reads_headers(self, user_model, controller_class):
        """Test header lookup."""
        entity = Entity(user_model, TokenAuthSettings())
        controller = controller_class(headers={"X-User-Token": "tok", "X-User-Email": "a@example.com"})

        assert entity.get_token_from_params_or_headers(controller) == "tok"
        assert entity.get_identifier_from_params_or_headers(controller) == "a@example.com"

    def test_params_win(self, user_model, controller_class):
        """Test that params take precedence over headers."""
        entity = Entity(user_model, TokenAuthSettings())
        controller = controller_class(params={"user_token": "from-params"}, headers={"X-User-Token": "from-headers"})

        assert entity.get_token_from_params_or_headers(controller) == "from-params"

    def test_blank_param_falls_back_to_header(self, user_model, controller_class):
        """Test that a blank param counts as absent."""
        entity = Entity(user_model, TokenAuthSettings())
        controller = controller_class(params={"user_token": "  "}, headers={"X-User-Token": "from-headers"})

        assert entity.get_token_from_params_or_headers(controller) == "from-headers"

    def test_missing_values(self, user_model, controller_class):
        """Test that nothing found yields None."""
        entity = Entity(user_model, TokenAuthSettings())
        controller = controller_class()

        assert entity.get_token_from_params_or_headers(controller) is None
        assert entity.get_identifier_from_params_or_headers(controller) is None

    def test_repeated_param_uses_last_value(self, user_model, controller_class):
        """Test multi-valued params."""
        entity = Entity(user_model, TokenAuthSettings())
        controller = controller_class(params={"user_token": ["first", "last"]})

        assert entity.get_token_from_params_or_headers(controller) == "last"
