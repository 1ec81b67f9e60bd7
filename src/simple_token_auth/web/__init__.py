"""FastAPI/Starlette integration for simple-token-auth.

Provides the request controller the guards run on, a session-backed
authenticator, and a dependency factory for FastAPI routes.
"""

from simple_token_auth.web.controller import BeforeAction, Controller
from simple_token_auth.web.dependencies import controller_dependency
from simple_token_auth.web.session import StarletteSessionAuthenticator

__all__ = [
    "BeforeAction",
    "Controller",
    "StarletteSessionAuthenticator",
    "controller_dependency",
]
