"""ODCS test harness.

This package runs an embedded application server for integration tests and
keeps the shared test infrastructure in a known state.

High-level architecture
-----------------------

- ``odcs_harness.environment``: re-exports the configuration environment and
  derives the database driver selection before the server starts.
- ``odcs_harness.server``: starts one uvicorn server per test run on an
  OS-assigned port, with the application mounted under a deployment path.
- ``odcs_harness.readiness``: bounded polling of a liveness endpoint.
- ``odcs_harness.fixtures``: single-operation helpers that write or delete
  fixture rows through scoped DAO handles.
- ``odcs_harness.hook`` / ``odcs_harness.context``: the per-test entry point
  and the run context it shares between tests.

Typical workflow
----------------

Most test suites only need the pytest plugin::

    pytest_plugins = ["odcs_harness.pytest_plugin"]

    def test_list_platforms(odcs_api):
        response = odcs_api.get("/platformrefs")
        assert response.status_code == 200
"""

__version__ = "0.1.0"
