"""Tests for EntitiesManager."""

from unittest import mock

import pytest

from simple_token_auth.auth import EntitiesManager, Entity, acts_as_token_authenticatable
from simple_token_auth.config import TokenAuthSettings, configure
from simple_token_auth.exceptions import INVALID_MODEL, ConfigurationError


class TestFindOrCreateEntity:
    """Tests for find_or_create_entity."""

    def test_creates_entity(self, user_model):
        """Test that the first call returns an Entity for the model."""
        entity = EntitiesManager().find_or_create_entity(user_model)

        assert isinstance(entity, Entity)
        assert entity.model is user_model

    def test_returns_same_entity(self, user_model):
        """Test that later calls return the recorded Entity."""
        manager = EntitiesManager()
        assert manager.find_or_create_entity(user_model) is manager.find_or_create_entity(user_model)
        assert len(manager) == 1

    def test_provisions_once(self, user_model):
        """Test that provisioning runs once per model."""
        provisioner = mock.Mock(wraps=acts_as_token_authenticatable)
        manager = EntitiesManager(provisioner=provisioner)

        manager.find_or_create_entity(user_model)
        manager.find_or_create_entity(user_model)
        manager.find_or_create_entity(user_model, "Member")

        provisioner.assert_called_once_with(user_model)
        assert user_model in manager

    def test_alias_gets_its_own_entity(self, user_model):
        """Test that each alias yields a distinct Entity."""
        manager = EntitiesManager()
        plain = manager.find_or_create_entity(user_model)
        aliased = manager.find_or_create_entity(user_model, "Member")

        assert plain is not aliased
        assert aliased.name == "Member"
        assert list(manager) == [plain, aliased]

    def test_uses_injected_settings(self, user_model):
        """Test that injected settings reach the Entity."""
        settings = TokenAuthSettings(identifiers={"user": "username"})
        entity = EntitiesManager(settings=settings).find_or_create_entity(user_model)

        assert entity.identifier == "username"

    def test_uses_process_wide_settings(self, user_model):
        """Test that configure() applies when no settings are injected."""
        configure(identifiers={"user": "username"})
        entity = EntitiesManager().find_or_create_entity(user_model)

        assert entity.identifier == "username"

    def test_non_class_rejected(self):
        """Test that a non-class is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            EntitiesManager().find_or_create_entity("User")  # type: ignore[arg-type]
        assert exc_info.value.code == INVALID_MODEL

    def test_provisioning_failure_records_nothing(self):
        """Test that a rejected model leaves the manager unchanged."""

        class Broken:
            pass

        manager = EntitiesManager()
        with pytest.raises(ConfigurationError):
            manager.find_or_create_entity(Broken)

        assert len(manager) == 0
        assert Broken not in manager

    def test_logs_provisioning(self, user_model):
        """Test that provisioning is logged at debug level."""
        logger = mock.Mock()
        EntitiesManager(logger=logger).find_or_create_entity(user_model)

        logger.debug.assert_called_once_with("Provisioned token storage", model="User")
