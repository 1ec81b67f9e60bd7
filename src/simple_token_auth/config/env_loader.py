"""Prefixed settings loader with optional .env support.

Only ``{prefix}_*`` keys are collected, and they are returned with the prefix
stripped (``SIMPLE_TOKEN_AUTH_FALLBACK`` -> ``FALLBACK``). Sources are merged
lowest precedence first:
1) .env file (if provided, or ./.env when it exists)
2) OS environment variables
3) Explicit overrides, keyed like the environment variables
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values


class EnvLoader:
    """Collect one prefix's settings from .env, the environment and overrides.

    Example:
        EnvLoader("SIMPLE_TOKEN_AUTH").load()
        # {"FALLBACK": "exception", "SIGN_IN_TOKEN": "true"}
    """

    def __init__(self, prefix: str, env_file: Optional[Path | str] = None) -> None:
        self.prefix = prefix
        self.env_file = Path(env_file) if env_file else None

    @property
    def env_path(self) -> Path:
        return self.env_file or Path.cwd() / ".env"

    def _scoped(self, values: Mapping[str, Optional[object]]) -> Dict[str, str]:
        marker = f"{self.prefix}_"
        return {
            key[len(marker):]: str(value)
            for key, value in values.items()
            if key.startswith(marker) and len(key) > len(marker) and value is not None
        }

    def load(self, overrides: Optional[Mapping[str, object]] = None) -> Dict[str, str]:
        data: Dict[str, str] = {}

        if self.env_path.exists():
            data.update(self._scoped(dotenv_values(self.env_path)))

        data.update(self._scoped(os.environ))

        if overrides:
            data.update(self._scoped(overrides))

        return data


__all__ = ["EnvLoader"]
