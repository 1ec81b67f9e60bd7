"""Registry of the entities a controller authenticates.

One EntitiesManager is shared by every registration made through a
TokenAuthenticationHandler. It provisions each model's token storage the
first time the model is seen and hands back the same Entity afterwards.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Iterator, Optional, Set, Tuple

from simple_token_auth.config import TokenAuthSettings, get_settings
from simple_token_auth.exceptions import INVALID_MODEL, ConfigurationError
from simple_token_auth.logger import Logger, NullLogger

from .entity import Entity
from .token_authenticatable import acts_as_token_authenticatable

Provisioner = Callable[[type], object]


class EntitiesManager:
    """Find-or-create registry of Entity objects, keyed by model class.

    Example:
        manager = EntitiesManager()
        user = manager.find_or_create_entity(User)
        assert manager.find_or_create_entity(User) is user
    """

    def __init__(
        self,
        settings: Optional[TokenAuthSettings] = None,
        provisioner: Provisioner = acts_as_token_authenticatable,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            settings: Settings handed to each Entity (process-wide settings if omitted)
            provisioner: Entity storage collaborator; raises ConfigurationError
                for models it cannot provision
            logger: Optional logger
        """
        self._settings = settings
        self._provisioner = provisioner
        self._logger = logger or NullLogger()
        self._entities: Dict[Tuple[type, Optional[str]], Entity] = {}
        self._provisioned: Set[type] = set()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __contains__(self, model: object) -> bool:
        return model in self._provisioned

    def find_or_create_entity(self, model: type, model_alias: Optional[str] = None) -> Entity:
        """Return the Entity for ``model``, provisioning the model on first use.

        Each (model, alias) pair gets its own Entity; provisioning happens
        once per model whatever the alias.

        Raises:
            ConfigurationError: If the model cannot be provisioned
        """
        if not isinstance(model, type):
            raise ConfigurationError(
                INVALID_MODEL,
                f"Token authentication requires a model class, got {type(model).__name__}",
                {"model": repr(model)},
            )

        key = (model, model_alias)
        with self._lock:
            entity = self._entities.get(key)
            if entity is not None:
                return entity

            if model not in self._provisioned:
                self._provisioner(model)
                self._provisioned.add(model)
                self._logger.debug(
                    "Provisioned token storage",
                    model=getattr(model, "__qualname__", repr(model)),
                )

            entity = Entity(model, self._settings or get_settings(), model_alias=model_alias)
            self._entities[key] = entity
            return entity
