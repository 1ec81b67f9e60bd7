"""Provisioning of token storage on model classes.

``acts_as_token_authenticatable`` is the entity storage collaborator: it
gives a model class whatever it needs to hold an authentication token and to
be looked up by it. It is idempotent per class.

A provisionable model must:
- be a class,
- expose ``find_for_authentication(**conditions)`` returning one record or None,
- be able to hold an ``authentication_token`` attribute.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

from simple_token_auth.exceptions import INVALID_MODEL, ConfigurationError

from .tokens import TokenGenerator

TOKEN_FIELD = "authentication_token"

# Marker set on provisioned classes (checked in the class's own __dict__)
PROVISIONED_MARKER = "__token_authenticatable__"

_default_generator = TokenGenerator()


def _ensure_authentication_token(self: Any) -> None:
    if not getattr(self, TOKEN_FIELD, None):
        setattr(self, TOKEN_FIELD, self.generate_authentication_token())


def _generate_authentication_token(self: Any, token_generator: Optional[TokenGenerator] = None) -> str:
    generator = token_generator or type(self).token_generator
    while True:
        token = generator.generate_token()
        if self.token_suitable(token):
            return token


def _token_suitable(self: Any, token: str) -> bool:
    existing = type(self).find_for_authentication(**{TOKEN_FIELD: token})
    return existing is None or existing is self


def is_token_authenticatable(model: Any) -> bool:
    return isinstance(model, type) and vars(model).get(PROVISIONED_MARKER, False)


def _can_store_token(model: type) -> bool:
    # A slot or property for the field, or a per-instance __dict__
    attr = inspect.getattr_static(model, TOKEN_FIELD, None)
    if attr is not None and hasattr(type(attr), "__set__"):
        return True
    return any("__dict__" in vars(klass) for klass in model.__mro__)


def _check_prerequisites(model: Any) -> None:
    if not isinstance(model, type):
        raise ConfigurationError(
            INVALID_MODEL,
            f"Token authentication requires a model class, got {type(model).__name__}",
            {"model": repr(model)},
        )

    if not callable(getattr(model, "find_for_authentication", None)):
        raise ConfigurationError(
            INVALID_MODEL,
            f"{model.__name__} must define find_for_authentication(**conditions)",
            {"model": model.__qualname__},
        )

    if not _can_store_token(model):
        raise ConfigurationError(
            INVALID_MODEL,
            f"{model.__name__} cannot store an {TOKEN_FIELD} attribute",
            {"model": model.__qualname__},
        )


def acts_as_token_authenticatable(
    model: type,
    token_generator: Optional[TokenGenerator] = None,
) -> type:
    """Give ``model`` token storage and token helpers, once.

    Adds (without overriding anything the class already defines):
    ``authentication_token`` (default None), ``token_generator``,
    ``ensure_authentication_token()``, ``generate_authentication_token()``
    and ``token_suitable(token)``. If the class exposes a
    ``before_save(callback_name)`` hook, ``ensure_authentication_token`` is
    registered with it.

    Raises:
        ConfigurationError: If the model lacks the prerequisites
    """
    if is_token_authenticatable(model):
        return model

    _check_prerequisites(model)

    helpers = {
        "token_generator": token_generator or _default_generator,
        "ensure_authentication_token": _ensure_authentication_token,
        "generate_authentication_token": _generate_authentication_token,
        "token_suitable": _token_suitable,
    }
    if not hasattr(model, TOKEN_FIELD):
        helpers[TOKEN_FIELD] = None

    for name, value in helpers.items():
        if name not in vars(model):
            setattr(model, name, value)

    before_save = getattr(model, "before_save", None)
    if callable(before_save):
        before_save("ensure_authentication_token")

    setattr(model, PROVISIONED_MARKER, True)
    return model
