"""Token authentication handler: registration and guard dispatch.

A TokenAuthenticationHandler is constructed once per controller type at
application bootstrap. Each ``handle_token_authentication_for(Model)`` call:

1. resolves the registration options against the process-wide fallback default,
2. provisions the model's token storage through the shared EntitiesManager,
3. looks up (or creates) the FallbackAuthenticationHandler for those options,
4. records a GuardPair under the entity's name,
5. installs a before-action hook on the controller type, if it supports one.

Example:
    class ArticlesController(Controller):
        pass

    auth = TokenAuthenticationHandler(ArticlesController)
    auth.handle_token_authentication_for(User, {"except": ["index"]})

    # in an action
    controller.authenticate_user_from_token()         # soft: record or None
    controller.authenticate_user_from_token_strict()  # strict: falls back
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Dict, Hashable, Mapping, Optional

from simple_token_auth.config import (
    FALLBACK_DEVISE,
    FALLBACK_MODES,
    FALLBACK_NONE,
    TokenAuthSettings,
    get_settings,
)
from simple_token_auth.exceptions import (
    DUPLICATE_HANDLER,
    GUARD_NAME_COLLISION,
    INVALID_OPTIONS,
    ConfigurationError,
)
from simple_token_auth.logger import Logger, NullLogger

from .entities_manager import EntitiesManager
from .entity import Entity
from .fallback import FallbackAuthenticationHandler
from .session import RequestAuthenticator, SessionAuthenticator, SignInHandler
from .token_authenticatable import TOKEN_FIELD
from .tokens import TokenComparator

# Options forwarded to the controller's before-action hook
HOOK_SCOPE_KEYS = ("only", "except", "if", "unless")

# Options that select a fallback handler
STRATEGY_KEYS = ("fallback",)

HANDLER_ATTRIBUTE = "token_authentication"


def soft_guard_name(entity: Entity) -> str:
    return f"authenticate_{entity.name_underscore}_from_token"


def strict_guard_name(entity: Entity) -> str:
    return f"{soft_guard_name(entity)}_strict"


def parse_options(
    options: Optional[Mapping[str, Any]],
    settings: TokenAuthSettings,
) -> Dict[str, Any]:
    """Resolve registration options.

    Caller keys win. ``fallback_to_devise`` is folded into ``fallback``
    (False -> "none", True -> "devise") and removed; when neither is given,
    ``fallback`` comes from ``settings``.

    Raises:
        ConfigurationError: If options are not a mapping, name an unknown
            fallback mode, or carry a non-string alias
    """
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise ConfigurationError(
            INVALID_OPTIONS,
            f"Registration options must be a mapping, got {type(options).__name__}",
        )

    resolved = dict(options)
    fallback_to_devise = resolved.pop("fallback_to_devise", None)

    if "fallback" not in resolved:
        if fallback_to_devise is None:
            resolved["fallback"] = settings.fallback
        else:
            resolved["fallback"] = FALLBACK_DEVISE if fallback_to_devise else FALLBACK_NONE

    if resolved["fallback"] not in FALLBACK_MODES:
        raise ConfigurationError(
            INVALID_OPTIONS,
            f"Unknown fallback mode: {resolved['fallback']!r}",
            {"allowed": list(FALLBACK_MODES)},
        )

    alias = resolved.get("as")
    if alias is not None and (not isinstance(alias, str) or not alias.strip()):
        raise ConfigurationError(INVALID_OPTIONS, f"Model alias must be a non-empty string, got {alias!r}")

    return resolved


def _freeze(value: Any) -> Hashable:
    """Turn nested option values into a hashable, equality-preserving key."""
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class GuardPair:
    """The two guards generated for one entity on one controller type.

    Attributes:
        entity: The entity the guards authenticate
        soft_name: e.g. "authenticate_user_from_token"
        strict_name: e.g. "authenticate_user_from_token_strict"
        soft: Callable(controller) -> record or None; never denies
        strict: Callable(controller) -> record or None; applies the fallback
        fallback_handler: The handler the strict guard defers to
    """

    entity: Entity
    soft_name: str
    strict_name: str
    soft: Callable[[Any], Optional[Any]]
    strict: Callable[[Any], Optional[Any]]
    fallback_handler: FallbackAuthenticationHandler


class TokenAuthenticationHandler:
    """Registers token authentication for model types on one controller type.

    The handler owns the controller's shared coordination objects: one
    EntitiesManager and one FallbackAuthenticationHandler per distinct
    strategy options, both created lazily and reused.

    Attributes:
        owner: The controller type the guards and hooks belong to
    """

    def __init__(
        self,
        owner: type,
        settings: Optional[TokenAuthSettings] = None,
        session_authenticator: Optional[SessionAuthenticator] = None,
        sign_in_handler: Optional[SignInHandler] = None,
        token_comparator: Optional[TokenComparator] = None,
        entities_manager_factory: Optional[Callable[..., EntitiesManager]] = None,
        fallback_handler_factory: Optional[Callable[..., FallbackAuthenticationHandler]] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialize the handler and link it to ``owner``.

        Args:
            owner: Controller type; gets a ``token_authentication`` attribute
            settings: Explicit settings (process-wide settings if omitted)
            session_authenticator: Session-based authentication collaborator
            sign_in_handler: Signs token-authenticated records in
            token_comparator: Compares stored and presented tokens
            entities_manager_factory: Builds the shared EntitiesManager
            fallback_handler_factory: Builds FallbackAuthenticationHandler instances
            logger: Optional logger

        Raises:
            ConfigurationError: If ``owner`` already has its own handler
        """
        if vars(owner).get(HANDLER_ATTRIBUTE) is not None:
            raise ConfigurationError(
                DUPLICATE_HANDLER,
                f"{owner.__name__} already has a token authentication handler",
                {"owner": owner.__qualname__},
            )

        self.owner = owner
        self._settings = settings
        self.session_authenticator = session_authenticator or RequestAuthenticator()
        self.sign_in_handler = sign_in_handler or SignInHandler(self.session_authenticator)
        self.token_comparator = token_comparator or TokenComparator()
        self._entities_manager_factory = entities_manager_factory
        self._fallback_handler_factory = fallback_handler_factory
        self._logger = logger or NullLogger()

        self._entities_manager: Optional[EntitiesManager] = None
        self._fallback_handlers: Dict[Hashable, FallbackAuthenticationHandler] = {}
        self._guards: Dict[str, GuardPair] = {}
        self._methods: Dict[str, Callable[[Any], Optional[Any]]] = {}
        self._hooks: Dict[str, str] = {}
        self._lock = threading.RLock()

        setattr(owner, HANDLER_ATTRIBUTE, self)

    def __repr__(self) -> str:
        return f"TokenAuthenticationHandler(owner={self.owner.__qualname__}, guards={sorted(self._guards)})"

    @property
    def settings(self) -> TokenAuthSettings:
        return self._settings or get_settings()

    @property
    def guards(self) -> Mapping[str, GuardPair]:
        """Read-only view of registered guards, keyed by entity name_underscore."""
        return MappingProxyType(dict(self._guards))

    # ------------------------------------------------------------------
    # Coordination objects
    # ------------------------------------------------------------------

    @property
    def entities_manager(self) -> EntitiesManager:
        """The shared EntitiesManager, created on first access."""
        with self._lock:
            if self._entities_manager is None:
                factory = self._entities_manager_factory or EntitiesManager
                self._entities_manager = factory(settings=self._settings, logger=self._logger)
            return self._entities_manager

    def fallback_authentication_handler(self, options: Mapping[str, Any]) -> FallbackAuthenticationHandler:
        """Return the cached fallback handler for ``options``, creating it once.

        Only strategy options (``fallback``) select the handler; equal values
        share one instance. A missing ``fallback`` uses the settings default.
        """
        strategy_options = {key: options[key] for key in STRATEGY_KEYS if key in options}
        strategy_options.setdefault("fallback", self.settings.fallback)
        key = _freeze(strategy_options)

        with self._lock:
            handler = self._fallback_handlers.get(key)
            if handler is None:
                factory = self._fallback_handler_factory or FallbackAuthenticationHandler
                handler = factory(
                    strategy_options["fallback"],
                    self.session_authenticator,
                    logger=self._logger,
                )
                self._fallback_handlers[key] = handler
            return handler

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def handle_token_authentication_for(
        self,
        model: type,
        options: Optional[Mapping[str, Any]] = None,
    ) -> GuardPair:
        """Require token authentication for ``model`` on the owner's actions.

        Args:
            model: Authenticatable model class (e.g. User)
            options: Registration options: ``fallback``, ``fallback_to_devise``,
                ``as``, and hook scoping keys ``only``/``except``/``if``/``unless``

        Returns:
            The GuardPair recorded for the model

        Raises:
            ConfigurationError: Invalid model or options, or a guard name
                collision; nothing is registered in that case
        """
        with self._lock:
            options = parse_options(options, self.settings)
            entity = self.entities_manager.find_or_create_entity(model, options.get("as"))
            fallback_handler = self.fallback_authentication_handler(options)
            previous = self._guards.get(entity.name_underscore)
            guards = self.define_token_authentication_helpers_for(entity, fallback_handler)
            try:
                hook = self.set_token_authentication_hooks(entity, options)
            except Exception:
                self._restore_guards(entity, previous)
                raise

        self._logger.info(
            "Token authentication registered",
            owner=self.owner.__qualname__,
            entity=entity.name_underscore,
            fallback=options["fallback"],
            hook=hook,
        )
        return guards

    def define_token_authentication_helpers_for(
        self,
        entity: Entity,
        fallback_handler: FallbackAuthenticationHandler,
    ) -> GuardPair:
        """Record the soft and strict guards for ``entity``.

        Raises:
            ConfigurationError: If another model already owns the entity's name
        """
        with self._lock:
            existing = self._guards.get(entity.name_underscore)
            if existing is not None and existing.entity.model is not entity.model:
                raise ConfigurationError(
                    GUARD_NAME_COLLISION,
                    f"{entity.model.__qualname__} and {existing.entity.model.__qualname__} "
                    f"both map to guard name {soft_guard_name(entity)!r}",
                    {"owner": self.owner.__qualname__, "entity": entity.name_underscore},
                )

            def soft(controller: Any) -> Optional[Any]:
                return self.authenticate_entity_from_token(controller, entity)

            def strict(controller: Any) -> Optional[Any]:
                record = self.authenticate_entity_from_token(controller, entity)
                fallback_handler.fallback(controller, entity)
                if record is None:
                    record = self.session_authenticator.current(controller, entity.name_underscore)
                return record

            guards = GuardPair(
                entity=entity,
                soft_name=soft_guard_name(entity),
                strict_name=strict_guard_name(entity),
                soft=soft,
                strict=strict,
                fallback_handler=fallback_handler,
            )
            self._restore_guards(entity, guards)
            return guards

    def _restore_guards(self, entity: Entity, guards: Optional[GuardPair]) -> None:
        self._methods.pop(soft_guard_name(entity), None)
        self._methods.pop(strict_guard_name(entity), None)
        if guards is None:
            self._guards.pop(entity.name_underscore, None)
            return
        self._guards[entity.name_underscore] = guards
        self._methods[guards.soft_name] = guards.soft
        self._methods[guards.strict_name] = guards.strict

    def set_token_authentication_hooks(self, entity: Entity, options: Mapping[str, Any]) -> Optional[str]:
        """Install the guard as a before-action hook on the owner.

        The strict guard is installed unless the fallback is "none". Only the
        hook scoping options are forwarded. Owners without ``before_action``
        (or ``before_filter``) are skipped silently.

        Re-registering an entity replaces its hook when the owner supports
        ``skip_before_action``; otherwise an identical hook is not added twice.

        Returns:
            The installed guard name, or None if the owner has no hook support
        """
        if options.get("fallback") == FALLBACK_NONE:
            method_name = soft_guard_name(entity)
        else:
            method_name = strict_guard_name(entity)

        install = getattr(self.owner, "before_action", None)
        if not callable(install):
            install = getattr(self.owner, "before_filter", None)
        if not callable(install):
            self._logger.debug(
                "Owner has no before-action hook, skipping",
                owner=self.owner.__qualname__,
                guard=method_name,
            )
            return None

        with self._lock:
            previous_hook = self._hooks.get(entity.name_underscore)
            if previous_hook is not None:
                remove = getattr(self.owner, "skip_before_action", None)
                if callable(remove):
                    remove(previous_hook)
                    del self._hooks[entity.name_underscore]
                elif previous_hook == method_name:
                    return method_name

            scope_options = {key: options[key] for key in HOOK_SCOPE_KEYS if key in options}
            install(method_name, scope_options)
            self._hooks[entity.name_underscore] = method_name
        return method_name

    # ------------------------------------------------------------------
    # Request-time authentication
    # ------------------------------------------------------------------

    def find_guard(self, method_name: str) -> Optional[Callable[[Any], Optional[Any]]]:
        return self._methods.get(method_name)

    def find_record_from_identifier(self, controller: Any, entity: Entity) -> Optional[Any]:
        identifier_value = entity.get_identifier_from_params_or_headers(controller)
        if identifier_value is None:
            return None
        if entity.case_insensitive_identifier:
            identifier_value = identifier_value.lower()
        return entity.model.find_for_authentication(**{entity.identifier: identifier_value})

    def token_correct(self, record: Any, entity: Entity, controller: Any) -> bool:
        if record is None:
            return False
        return self.token_comparator.compare(
            getattr(record, TOKEN_FIELD, None),
            entity.get_token_from_params_or_headers(controller),
        )

    def authenticate_entity_from_token(self, controller: Any, entity: Entity) -> Optional[Any]:
        """Sign the entity in if the request carries a matching identifier and token.

        Returns:
            The signed-in record, or None when token authentication failed
        """
        record = self.find_record_from_identifier(controller, entity)
        if not self.token_correct(record, entity, controller):
            self._logger.debug("Token authentication failed", entity=entity.name_underscore)
            return None

        self.sign_in_handler.sign_in(controller, entity, record, store=self.settings.sign_in_token)
        return record


class TokenAuthenticationHandlerMixin:
    """Exposes a controller type's registered guards on its instances.

    ``controller.authenticate_user_from_token()`` resolves through the
    handlers linked to ``type(controller)`` and its base classes, nearest
    first, so a subclass with its own handler still runs the guards its
    parents registered. Guards registered on unrelated controller types are
    not visible.
    """

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("__"):
            for klass in type(self).__mro__:
                handler = vars(klass).get(HANDLER_ATTRIBUTE)
                if handler is None:
                    continue
                guard = handler.find_guard(name)
                if guard is not None:
                    return partial(guard, self)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
