"""Process-wide settings for token authentication.

Provides the defaults that every ``handle_token_authentication_for`` call
reads once at registration time. Applications override them either from the
environment (``TokenAuthSettings.from_env``) or programmatically
(``configure``).

Environment variables (prefix defaults to SIMPLE_TOKEN_AUTH):
    {prefix}_FALLBACK: "devise", "exception" or "none"
    {prefix}_SIGN_IN_TOKEN: "true" to persist token sign-ins in the session
    {prefix}_CASE_INSENSITIVE_KEYS: comma list of identifiers compared lower-cased
    {prefix}_IDENTIFIERS: "user=email,super_admin=username"
    {prefix}_HEADER_NAMES: JSON object, e.g.
        {"super_admin": {"authentication_token": "X-Admin-Auth-Token"}}
"""

import copy
import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from simple_token_auth.config.env_loader import EnvLoader
from simple_token_auth.exceptions import INVALID_SETTINGS, ConfigurationError

DEFAULT_PREFIX = "SIMPLE_TOKEN_AUTH"

FALLBACK_DEVISE = "devise"
FALLBACK_EXCEPTION = "exception"
FALLBACK_NONE = "none"
FALLBACK_MODES: Tuple[str, ...] = (FALLBACK_DEVISE, FALLBACK_EXCEPTION, FALLBACK_NONE)

DEFAULT_FALLBACK = FALLBACK_DEVISE


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_identifiers(value: str) -> Dict[str, str]:
    identifiers: Dict[str, str] = {}
    for pair in _parse_list(value):
        entity, sep, identifier = pair.partition("=")
        if not sep or not entity.strip() or not identifier.strip():
            raise ConfigurationError(
                INVALID_SETTINGS,
                f"Malformed identifier mapping: {pair!r}",
                {"expected": "entity=identifier"},
            )
        identifiers[entity.strip()] = identifier.strip()
    return identifiers


@dataclass
class TokenAuthSettings:
    """Token authentication configuration

    Attributes:
        fallback: What strict guards do when token authentication fails
        sign_in_token: Whether a token sign-in is stored in the session
        case_insensitive_keys: Identifiers whose values are lower-cased before lookup
        identifiers: Per-entity identifier field (default "email")
        header_names: Per-entity header overrides keyed by "authentication_token"
            or by the identifier name
    """

    fallback: str = DEFAULT_FALLBACK
    sign_in_token: bool = False
    case_insensitive_keys: List[str] = field(default_factory=lambda: ["email"])
    identifiers: Dict[str, str] = field(default_factory=dict)
    header_names: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.fallback not in FALLBACK_MODES:
            raise ConfigurationError(
                INVALID_SETTINGS,
                f"Unknown fallback mode: {self.fallback!r}",
                {"allowed": list(FALLBACK_MODES)},
            )
        for entity, headers in self.header_names.items():
            if not isinstance(headers, Mapping):
                raise ConfigurationError(
                    INVALID_SETTINGS,
                    f"Header names for {entity!r} must be a mapping",
                )

    def identifier_for(self, name_underscore: str) -> str:
        return self.identifiers.get(name_underscore, "email")

    def header_name_for(self, name_underscore: str, key: str) -> Optional[str]:
        return self.header_names.get(name_underscore, {}).get(key) or None

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_PREFIX,
        env_file: Optional[Path] = None,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> "TokenAuthSettings":
        """Load settings from the environment (and an optional .env file)

        Args:
            prefix: Environment variable prefix
            env_file: Optional .env file read before OS variables
            overrides: Highest-precedence raw values, keyed like the env vars
        """
        env = EnvLoader(prefix, env_file).load(overrides)
        kwargs: Dict[str, Any] = {}

        if "FALLBACK" in env:
            kwargs["fallback"] = env["FALLBACK"].strip().lower()
        if "SIGN_IN_TOKEN" in env:
            kwargs["sign_in_token"] = _parse_bool(env["SIGN_IN_TOKEN"])
        if "CASE_INSENSITIVE_KEYS" in env:
            kwargs["case_insensitive_keys"] = _parse_list(env["CASE_INSENSITIVE_KEYS"])
        if "IDENTIFIERS" in env:
            kwargs["identifiers"] = _parse_identifiers(env["IDENTIFIERS"])
        if "HEADER_NAMES" in env:
            try:
                kwargs["header_names"] = json.loads(env["HEADER_NAMES"])
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    INVALID_SETTINGS,
                    f"{prefix}_HEADER_NAMES is not valid JSON",
                    {"error": str(e)},
                ) from e

        return cls(**kwargs)


# Process-wide settings, created on first use
_global_settings: Optional[TokenAuthSettings] = None


def get_settings(reload: bool = False, prefix: str = DEFAULT_PREFIX) -> TokenAuthSettings:
    """Get (or load from the environment) the process-wide settings."""
    global _global_settings

    if _global_settings is None or reload:
        _global_settings = TokenAuthSettings.from_env(prefix=prefix)

    return _global_settings


def configure(**overrides: Any) -> TokenAuthSettings:
    """Override process-wide settings programmatically.

    Example:
        configure(fallback="exception", identifiers={"super_admin": "username"})
    """
    global _global_settings
    _global_settings = replace(copy.deepcopy(get_settings()), **overrides)
    return _global_settings


def reset_settings() -> None:
    """Forget the process-wide settings (primarily for testing)."""
    global _global_settings
    _global_settings = None
