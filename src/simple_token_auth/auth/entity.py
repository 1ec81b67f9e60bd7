"""Registration-time view of an authenticatable model.

An Entity knows how a model is named in guards, headers and params, and how
to read its token and identifier from a controller's request.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from simple_token_auth.config import TokenAuthSettings

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def underscore(name: str) -> str:
    """Convert a CamelCase name to snake_case.

    Examples:
        "User" -> "user"
        "SuperAdmin" -> "super_admin"
        "HTTPUser" -> "http_user"
    """
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def camelize(name: str) -> str:
    """Convert a snake_case name to CamelCase ("user_name" -> "UserName")."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def _presence(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
        if value is None:
            return None
    value = str(value)
    return value if value.strip() else None


class Entity:
    """An authenticatable model as seen by one registration.

    Attributes:
        model: The model class
        name: Alias or class name, e.g. "SuperAdmin"
        name_underscore: e.g. "super_admin"; drives guard, param and session scope names
        identifier: Field used to find the record, e.g. "email"
    """

    def __init__(
        self,
        model: type,
        settings: TokenAuthSettings,
        model_alias: Optional[str] = None,
    ) -> None:
        self.model = model
        self.name = model_alias or model.__name__
        self.name_underscore = underscore(self.name)
        self._settings = settings

    def __repr__(self) -> str:
        return f"Entity({self.name!r}, model={self.model.__qualname__})"

    @property
    def identifier(self) -> str:
        return self._settings.identifier_for(self.name_underscore)

    @property
    def token_header_name(self) -> str:
        custom = self._settings.header_name_for(self.name_underscore, "authentication_token")
        return custom or f"X-{self.name}-Token"

    @property
    def identifier_header_name(self) -> str:
        custom = self._settings.header_name_for(self.name_underscore, self.identifier)
        return custom or f"X-{self.name}-{camelize(self.identifier)}"

    @property
    def token_param_name(self) -> str:
        return f"{self.name_underscore}_token"

    @property
    def identifier_param_name(self) -> str:
        return f"{self.name_underscore}_{self.identifier}"

    @property
    def case_insensitive_identifier(self) -> bool:
        return self.identifier in self._settings.case_insensitive_keys

    def _lookup(self, controller: Any, param_name: str, header_name: str) -> Optional[str]:
        params: Mapping[str, Any] = getattr(controller, "params", None) or {}
        headers: Mapping[str, Any] = getattr(controller, "headers", None) or {}
        value = _presence(params.get(param_name))
        if value is None:
            value = _presence(headers.get(header_name))
        return value

    def get_token_from_params_or_headers(self, controller: Any) -> Optional[str]:
        """Token from params, else from headers; blank counts as absent."""
        return self._lookup(controller, self.token_param_name, self.token_header_name)

    def get_identifier_from_params_or_headers(self, controller: Any) -> Optional[str]:
        """Identifier from params, else from headers; blank counts as absent."""
        return self._lookup(controller, self.identifier_param_name, self.identifier_header_name)
