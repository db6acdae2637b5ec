"""
Embedded server lifecycle.

``ServerLifecycleManager`` runs one uvicorn server per test run on a daemon
thread. The listening socket is bound by the manager itself on port 0 so the
OS picks a free port; the resolved port is read back after the bind and only
then handed to uvicorn.
"""

from __future__ import annotations

import os
import socket
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

import uvicorn
from starlette.types import ASGIApp

from odcs_harness.core.config import DbType, ServerConfig
from odcs_harness.core.errors import ConfigurationError, StartupError
from odcs_harness.core.logging_config import get_logger
from odcs_harness.environment import DRIVER_CLASS_PROPERTY, driver_class_for

from .app import build_deployment

logger = get_logger(__name__)

_STARTUP_POLL_INTERVAL = 0.01


def _run_server(server: uvicorn.Server, sock: socket.socket) -> None:
    """Thread target for uvicorn. A failed startup ends in ``sys.exit``; keep it on this thread."""
    try:
        server.run(sockets=[sock])
    except SystemExit as e:
        logger.error(f"Embedded server exited with code {e.code}")


@dataclass(frozen=True)
class BaseUri:
    """Where tests send their requests."""

    scheme: str
    host: str
    port: int
    base_path: str

    @property
    def url(self) -> str:
        path = f"/{self.base_path.strip('/')}" if self.base_path.strip("/") else ""
        return f"{self.scheme}://{self.host}:{self.port}{path}"

    def __str__(self) -> str:
        return self.url


@dataclass
class ServerInstance:
    """The live embedded server of a test run."""

    server: uvicorn.Server
    thread: threading.Thread
    sock: socket.socket
    bound_port: int
    deployment_path: str
    db_type: DbType

    @property
    def running(self) -> bool:
        return self.thread.is_alive() and self.server.started and not self.server.should_exit


class ServerLifecycleManager:
    """Starts the embedded server once and hands the same instance back afterwards."""

    def __init__(self, config: Optional[ServerConfig] = None, app: Union[str, ASGIApp, None] = None) -> None:
        self.config = config or ServerConfig()
        self._app = app if app is not None else self.config.app
        self._instance: Optional[ServerInstance] = None
        self.start_count = 0

    @property
    def instance(self) -> Optional[ServerInstance]:
        return self._instance

    @property
    def base_uri(self) -> Optional[BaseUri]:
        if self._instance is None:
            return None
        return BaseUri(
            scheme=self.config.scheme,
            host=self.config.public_host,
            port=self._instance.bound_port,
            base_path=self._instance.deployment_path,
        )

    def start(self, deployment_path: str, db_type: DbType) -> ServerInstance:
        """Start the server, or return the one already running.

        Args:
            deployment_path: Base path the application is mounted under
            db_type: Database type the environment was prepared for

        Returns:
            The live server instance

        Raises:
            StartupError: Binding, loading the application or starting uvicorn failed
        """
        if self._instance is not None and self._instance.running:
            logger.debug(f"Reusing embedded server on port {self._instance.bound_port}")
            return self._instance
        if self._instance is not None:
            logger.warning(f"Embedded server on port {self._instance.bound_port} is no longer running")
            self.stop()

        expected_driver = driver_class_for(db_type)
        if os.environ.get(DRIVER_CLASS_PROPERTY) != expected_driver:
            raise StartupError(
                f"{DRIVER_CLASS_PROPERTY} must be set to {expected_driver!r} before the server starts, "
                f"found {os.environ.get(DRIVER_CLASS_PROPERTY)!r}"
            )
        if self._app is None:
            raise ConfigurationError("No application configured for the embedded server")

        deployment = build_deployment(self._app, deployment_path)
        sock = self._bind()
        port = sock.getsockname()[1]
        try:
            instance = self._serve(sock, port, deployment_path.strip("/"), db_type, deployment)
        except BaseException:
            sock.close()
            raise

        self._instance = instance
        self.start_count += 1
        logger.info(f"Embedded server started on port {port} serving /{instance.deployment_path}")
        return instance

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind((self.config.bind_host, 0))
        except OSError as e:
            sock.close()
            raise StartupError(f"Unable to bind to {self.config.bind_host}: {e}") from e
        sock.set_inheritable(True)
        return sock

    def _serve(
        self,
        sock: socket.socket,
        port: int,
        deployment_path: str,
        db_type: DbType,
        deployment: ASGIApp,
    ) -> ServerInstance:
        server = uvicorn.Server(
            uvicorn.Config(
                deployment,
                log_level=self.config.log_level,
                lifespan="auto",
                access_log=False,
                log_config=None,
            )
        )
        thread = threading.Thread(
            target=_run_server,
            args=(server, sock),
            name=f"odcs-harness-server-{port}",
            daemon=True,
        )
        thread.start()

        deadline = time.monotonic() + self.config.startup_timeout
        while not server.started:
            if not thread.is_alive():
                raise StartupError("Embedded server exited during startup", port=port)
            if time.monotonic() > deadline:
                server.should_exit = True
                thread.join(self.config.shutdown_timeout)
                raise StartupError(
                    f"Embedded server did not start within {self.config.startup_timeout}s", port=port
                )
            time.sleep(_STARTUP_POLL_INTERVAL)

        return ServerInstance(
            server=server,
            thread=thread,
            sock=sock,
            bound_port=port,
            deployment_path=deployment_path,
            db_type=db_type,
        )

    def stop(self) -> None:
        """Shut the server down at the end of the run. No-op when nothing runs."""
        instance = self._instance
        if instance is None:
            return
        self._instance = None
        instance.server.should_exit = True
        instance.thread.join(self.config.shutdown_timeout)
        if instance.thread.is_alive():
            logger.warning(f"Embedded server on port {instance.bound_port} did not stop in time")
        instance.sock.close()
        logger.info(f"Embedded server on port {instance.bound_port} stopped")
