"""Shared fixtures for simple_token_auth tests."""

import os
from typing import Any, Dict, List, Optional
from unittest import mock

import pytest

from simple_token_auth.auth import TokenAuthenticationHandlerMixin
from simple_token_auth.config import reset_settings


class ModelBase:
    """In-memory stand-in for a persisted, authenticatable model."""

    records: List["ModelBase"] = []

    def __init__(
        self,
        id: int,
        email: Optional[str] = None,
        username: Optional[str] = None,
        authentication_token: Optional[str] = None,
    ):
        self.id = id
        self.email = email
        self.username = username
        self.authentication_token = authentication_token

    @classmethod
    def create(cls, **kwargs: Any) -> "ModelBase":
        record = cls(id=len(cls.records) + 1, **kwargs)
        cls.records.append(record)
        return record

    @classmethod
    def get(cls, record_id: Any) -> Optional["ModelBase"]:
        return next((r for r in cls.records if r.id == record_id), None)

    @classmethod
    def find_for_authentication(cls, **conditions: Any) -> Optional["ModelBase"]:
        for record in cls.records:
            if all(getattr(record, k, None) == v for k, v in conditions.items()):
                return record
        return None


def build_model(name: str) -> type:
    """Create a fresh model class so provisioning never leaks between tests."""
    return type(name, (ModelBase,), {"records": []})


class FakeController(TokenAuthenticationHandlerMixin):
    """Minimal controller: params and headers are plain dicts."""

    def __init__(
        self,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.params = params or {}
        self.headers = headers or {}


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from process-wide settings and SIMPLE_TOKEN_AUTH_* env vars."""
    for key in list(os.environ):
        if key.startswith("SIMPLE_TOKEN_AUTH_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def user_model() -> type:
    return build_model("User")


@pytest.fixture
def super_admin_model() -> type:
    return build_model("SuperAdmin")


@pytest.fixture
def controller_class() -> type:
    """A controller type with no before-action support."""
    return type("SomeController", (FakeController,), {})


@pytest.fixture
def hooked_controller_class() -> type:
    """A controller type whose before_action is a mock."""
    return type("HookedController", (FakeController,), {"before_action": mock.Mock()})


@pytest.fixture
def model_factory():
    """Build fresh model classes by name."""
    return build_model


@pytest.fixture
def make_controller_class():
    """Build fresh controller types by name."""

    def _make(name: str = "SomeController") -> type:
        return type(name, (FakeController,), {})

    return _make
