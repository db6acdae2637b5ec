"""
Per-test lifecycle hook.

``TestLifecycleHook.before_each`` runs before every test. The first call of a
run brings the environment up in a fixed order: start the configuration,
apply its environment, start the embedded server, wait for readiness. Later
calls only re-affirm the base URI on the run context.
"""

from __future__ import annotations

from odcs_harness.context import TestRunContext
from odcs_harness.core.errors import StartupError
from odcs_harness.core.logging_config import get_logger
from odcs_harness.readiness import TimedOut, http_probe
from odcs_harness.server.lifecycle import BaseUri

logger = get_logger(__name__)


class TestLifecycleHook:
    """Lazily brings the shared server up and points tests at it."""

    __test__ = False  # not a pytest test class

    def __init__(self, context: TestRunContext) -> None:
        self.context = context

    def before_each(self) -> BaseUri:
        context = self.context
        instance = context.server_manager.instance
        if instance is None or not instance.running or not context.ready:
            self._bring_up()
        base_uri = context.server_manager.base_uri
        if base_uri is None:
            raise StartupError("Embedded server has no base URI after startup")
        context.base_uri = base_uri
        return base_uri

    def _bring_up(self) -> None:
        context = self.context
        settings = context.settings

        env_vars = context.configuration.start()
        context.configuration_started = True
        context.environment.apply({**settings.passthrough, **env_vars}, settings.db_type)

        context.server_manager.start(settings.deployment_path, settings.db_type)
        context.base_uri = context.server_manager.base_uri

        probe_config = settings.probe
        with context.client() as client:
            probe, predicate = http_probe(
                client,
                probe_config.method,
                probe_config.path,
                probe_config.expected_status,
                probe_config.fatal_statuses,
            )
            result = context.prober.poll(probe, predicate, probe_config.max_attempts, probe_config.interval)
        if isinstance(result, TimedOut):
            result.raise_error(f"Server at {context.base_uri}")
        context.ready = True
        logger.info(f"Test environment ready at {context.base_uri}")
