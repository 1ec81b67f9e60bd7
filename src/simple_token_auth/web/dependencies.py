"""FastAPI dependencies for controllers."""

from typing import Callable, Type, TypeVar

from fastapi import Request

from simple_token_auth.web.controller import Controller

C = TypeVar("C", bound=Controller)


def controller_dependency(controller_cls: Type[C], action: str) -> Callable[[Request], C]:
    """Create a dependency that builds ``controller_cls`` and runs its hooks for ``action``.

    Example:
        @app.delete("/articles/{article_id}")
        def destroy(controller: ArticlesController = Depends(
            controller_dependency(ArticlesController, "destroy")
        )):
            ...
    """

    def _controller(request: Request) -> C:
        controller = controller_cls(request)
        controller.process_action(action)
        return controller

    return _controller
