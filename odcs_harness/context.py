"""
Test run context.

One ``TestRunContext`` exists per test run. It owns the shared, stateful test
infrastructure (configuration, environment, embedded server, fixtures) and is
handed to whatever needs it instead of being looked up through module
globals. Tests are assumed to run sequentially; nothing here is locked.
"""

from __future__ import annotations

from typing import Optional, Union

import httpx
from starlette.types import ASGIApp

from odcs_harness.configuration import Configuration
from odcs_harness.core.config import DbType, HarnessSettings
from odcs_harness.core.logging_config import get_logger
from odcs_harness.environment import EnvironmentBridge
from odcs_harness.fixtures import DatabaseFixtures
from odcs_harness.readiness import ReadinessProber
from odcs_harness.server.lifecycle import BaseUri, ServerInstance, ServerLifecycleManager

logger = get_logger(__name__)


class TestRunContext:
    """Process-wide state of one test run."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        settings: HarnessSettings,
        configuration: Configuration,
        *,
        app: Union[str, ASGIApp, None] = None,
        environment: Optional[EnvironmentBridge] = None,
        server_manager: Optional[ServerLifecycleManager] = None,
        prober: Optional[ReadinessProber] = None,
    ) -> None:
        self.settings = settings
        self.configuration = configuration
        self.environment = environment or EnvironmentBridge()
        self.server_manager = server_manager or ServerLifecycleManager(settings.server, app=app)
        self.prober = prober or ReadinessProber()
        self.base_uri: Optional[BaseUri] = None
        self.configuration_started = False
        self.ready = False
        self._fixtures: Optional[DatabaseFixtures] = None

    @property
    def deployment_path(self) -> str:
        return self.settings.deployment_path

    @property
    def current_db_type(self) -> DbType:
        return self.settings.db_type

    @property
    def current_server(self) -> Optional[ServerInstance]:
        return self.server_manager.instance

    @property
    def fixtures(self) -> DatabaseFixtures:
        if self._fixtures is None:
            self._fixtures = DatabaseFixtures(self.configuration.get_tsdb())
        return self._fixtures

    def client(self, **kwargs) -> httpx.Client:
        """Return an ``httpx.Client`` whose base URL is the current base URI."""
        if self.base_uri is None:
            raise RuntimeError("The embedded server has not been started for this run")
        kwargs.setdefault("timeout", self.settings.probe.request_timeout)
        return httpx.Client(base_url=self.base_uri.url, **kwargs)

    def close(self) -> None:
        """Tear the run down: stop the server, restore the environment, stop the configuration."""
        try:
            self.server_manager.stop()
        finally:
            self.environment.restore()
            if self.configuration_started:
                self.configuration.stop()
                self.configuration_started = False
            self.base_uri = None
            self.ready = False
            self._fixtures = None
        logger.info("Test run context closed")
