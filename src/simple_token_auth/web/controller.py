"""Request controller with before-action hooks.

Controller is the request pipeline the token guards plug into: a class per
group of actions, with hooks that run before an action and can deny it.
Guards registered through a TokenAuthenticationHandler are available as
instance methods.

Example:
    class ArticlesController(Controller):
        pass

    TokenAuthenticationHandler(ArticlesController).handle_token_authentication_for(User)

    @app.get("/articles")
    def list_articles(controller: Controller = Depends(controller_dependency(ArticlesController, "index"))):
        return {"user": controller.current("user").email}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Mapping, Optional, Tuple, Union

from fastapi import HTTPException, Request

from simple_token_auth.auth import AuthError, TokenAuthenticationHandlerMixin
from simple_token_auth.exceptions import INVALID_OPTIONS, ConfigurationError

Condition = Union[str, Callable[[Any], bool]]


def _action_set(value: Any) -> Optional[FrozenSet[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return frozenset({value})
    return frozenset(str(v) for v in value)


@dataclass(frozen=True)
class BeforeAction:
    """A hook run before matching actions.

    Attributes:
        method_name: Controller method to call
        only: Actions the hook is limited to (None = all)
        except_: Actions the hook skips
        if_: Condition (method name or callable) that must hold
        unless: Condition that must not hold
    """

    method_name: str
    only: Optional[FrozenSet[str]] = None
    except_: Optional[FrozenSet[str]] = None
    if_: Optional[Condition] = None
    unless: Optional[Condition] = None

    @staticmethod
    def _check(controller: Any, condition: Condition) -> bool:
        if callable(condition):
            return bool(condition(controller))
        return bool(getattr(controller, condition)())

    def applies_to(self, controller: Any, action: str) -> bool:
        if self.only is not None and action not in self.only:
            return False
        if self.except_ is not None and action in self.except_:
            return False
        if self.if_ is not None and not self._check(controller, self.if_):
            return False
        if self.unless is not None and self._check(controller, self.unless):
            return False
        return True


class Controller(TokenAuthenticationHandlerMixin):
    """Base class for FastAPI/Starlette request controllers."""

    _before_actions: ClassVar[Tuple[BeforeAction, ...]] = ()

    def __init__(self, request: Request) -> None:
        self.request = request
        self.action: Optional[str] = None

    @classmethod
    def before_action(cls, method_name: str, options: Optional[Mapping[str, Any]] = None) -> None:
        """Run ``method_name`` before actions, scoped by only/except/if/unless.

        Hooks are inherited by subclasses; adding one never affects the parent.

        Raises:
            ConfigurationError: If ``options`` has keys other than the scoping keys
        """
        options = dict(options or {})
        unknown = set(options) - {"only", "except", "if", "unless"}
        if unknown:
            raise ConfigurationError(
                INVALID_OPTIONS,
                f"Unknown before_action options: {sorted(unknown)}",
                {"controller": cls.__qualname__, "method": method_name},
            )
        hook = BeforeAction(
            method_name=method_name,
            only=_action_set(options.get("only")),
            except_=_action_set(options.get("except")),
            if_=options.get("if"),
            unless=options.get("unless"),
        )
        cls._before_actions = cls._before_actions + (hook,)

    @classmethod
    def skip_before_action(cls, method_name: str) -> None:
        cls._before_actions = tuple(h for h in cls._before_actions if h.method_name != method_name)

    @classmethod
    def before_actions(cls) -> Tuple[BeforeAction, ...]:
        return cls._before_actions

    @property
    def params(self) -> Dict[str, Any]:
        """Query parameters overlaid with path parameters."""
        params: Dict[str, Any] = dict(self.request.query_params)
        params.update(self.request.path_params)
        return params

    @property
    def headers(self) -> Mapping[str, str]:
        return self.request.headers

    @property
    def session(self) -> Optional[Dict[str, Any]]:
        """The Starlette session, or None when SessionMiddleware is not installed."""
        if "session" not in self.request.scope:
            return None
        return self.request.session

    def current(self, scope: str) -> Optional[Any]:
        """The record signed in for ``scope`` ("user", "super_admin"), if any."""
        handler = getattr(type(self), "token_authentication", None)
        if handler is None:
            return None
        return handler.session_authenticator.current(self, scope)

    def process_action(self, action: str) -> None:
        """Run the before-action hooks that apply to ``action``.

        Raises:
            HTTPException: With the failure's status code when a hook denies access
        """
        self.action = action
        for hook in type(self).before_actions():
            if not hook.applies_to(self, action):
                continue
            try:
                getattr(self, hook.method_name)()
            except AuthError as e:
                raise HTTPException(
                    status_code=e.status_code,
                    detail=e.message,
                    headers={"WWW-Authenticate": "Token"},
                )
