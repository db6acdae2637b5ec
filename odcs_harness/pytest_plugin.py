"""
pytest integration.

Enable it from a ``conftest.py``::

    pytest_plugins = ["odcs_harness.pytest_plugin"]

and override ``harness_app`` (or set ``ODCS_HARNESS_SERVER__APP``) to name the
application under test. Tests then request ``odcs_api`` for an HTTP client
bound to the running deployment, and ``db_fixtures`` for fixture rows.
"""

from __future__ import annotations

from typing import Iterator, Optional, Union

import httpx
import pytest
from starlette.types import ASGIApp

from odcs_harness.configuration import Configuration, DatabaseUrlConfiguration, SqliteConfiguration
from odcs_harness.context import TestRunContext
from odcs_harness.core.config import HarnessSettings, get_settings
from odcs_harness.core.logging_config import setup_logging
from odcs_harness.fixtures import DatabaseFixtures
from odcs_harness.hook import TestLifecycleHook
from odcs_harness.server.lifecycle import BaseUri


def pytest_configure(config: pytest.Config) -> None:
    setup_logging(get_settings().log_level)


@pytest.fixture(scope="session")
def harness_settings() -> HarnessSettings:
    """Settings of this test run."""
    return get_settings()


@pytest.fixture(scope="session")
def harness_app() -> Union[str, ASGIApp, None]:
    """Application under test; ``None`` falls back to ``settings.server.app``."""
    return None


@pytest.fixture(scope="session")
def harness_configuration(
    harness_settings: HarnessSettings, tmp_path_factory: pytest.TempPathFactory
) -> Configuration:
    """Database configuration; a throwaway SQLite file unless a database URL is configured."""
    if harness_settings.database_url:
        return DatabaseUrlConfiguration.from_settings(harness_settings)
    return SqliteConfiguration(tmp_path_factory.mktemp("odcs-harness") / "odcs.db")


@pytest.fixture(scope="session")
def harness_context(
    harness_settings: HarnessSettings,
    harness_configuration: Configuration,
    harness_app: Optional[Union[str, ASGIApp]],
) -> Iterator[TestRunContext]:
    context = TestRunContext(harness_settings, harness_configuration, app=harness_app)
    try:
        yield context
    finally:
        context.close()


@pytest.fixture(scope="session")
def harness_hook(harness_context: TestRunContext) -> TestLifecycleHook:
    return TestLifecycleHook(harness_context)


@pytest.fixture
def odcs_base_uri(harness_hook: TestLifecycleHook) -> BaseUri:
    """Runs the lifecycle hook for the current test and returns the base URI."""
    return harness_hook.before_each()


@pytest.fixture
def odcs_api(odcs_base_uri: BaseUri, harness_context: TestRunContext) -> Iterator[httpx.Client]:
    with harness_context.client() as client:
        yield client


@pytest.fixture
def db_fixtures(odcs_base_uri: BaseUri, harness_context: TestRunContext) -> DatabaseFixtures:
    return harness_context.fixtures
