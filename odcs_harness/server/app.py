"""
Deployment wrapper.

Mounts the application under test below its deployment path, the way a
servlet container serves a web archive under its context path. Lifespan
events go straight to the application so its own startup and shutdown hooks
still run.
"""

from __future__ import annotations

from typing import Any, Union

from starlette.applications import Starlette
from starlette.routing import Mount
from starlette.types import ASGIApp, Receive, Scope, Send
from uvicorn.importer import ImportFromStringError, import_from_string

from odcs_harness.core.errors import StartupError


def load_application(app: Union[str, ASGIApp]) -> ASGIApp:
    """Resolve an import string such as ``"package.module:app"`` to the ASGI app."""
    if not isinstance(app, str):
        return app
    try:
        return import_from_string(app)
    except ImportFromStringError as e:
        raise StartupError(f"Unable to load application {app!r}: {e}") from e


class DeploymentApp:
    """ASGI app serving ``app`` under ``/<deployment_path>``."""

    def __init__(self, app: ASGIApp, deployment_path: str) -> None:
        self.app = app
        self.deployment_path = deployment_path.strip("/")
        if self.deployment_path:
            self._routed: Any = Starlette(routes=[Mount(f"/{self.deployment_path}", app=app)])
        else:
            self._routed = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self.app(scope, receive, send)
        else:
            await self._routed(scope, receive, send)


def build_deployment(app: Union[str, ASGIApp], deployment_path: str) -> DeploymentApp:
    return DeploymentApp(load_application(app), deployment_path)
