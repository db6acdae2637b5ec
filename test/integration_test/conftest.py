"""
Integration fixtures: a small FastAPI application standing in for the OpenDCS
REST API. At startup it records the driver selection and database URL it finds
in the process environment, the same way the real service would read them.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import List, Optional

import pytest
from fastapi import FastAPI, HTTPException, Request, Response

from odcs_harness.configuration import DATABASE_URL_KEY
from odcs_harness.core.config import DbType, HarnessSettings, ProbeConfig, ServerConfig
from odcs_harness.core.database.tsdb import TimeSeriesDatabase
from odcs_harness.environment import DRIVER_CLASS_PROPERTY


def build_demo_app(fail_startup: bool = False) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if fail_startup:
            raise RuntimeError("Database connection refused")
        app.state.driver_class = os.environ.get(DRIVER_CLASS_PROPERTY)
        database_url = os.environ.get(DATABASE_URL_KEY)
        app.state.tsdb = TimeSeriesDatabase.from_url(database_url) if database_url else None
        yield
        if app.state.tsdb is not None:
            app.state.tsdb.dispose()

    app = FastAPI(title="OpenDCS REST API (test double)", lifespan=lifespan)

    @app.delete("/logout", status_code=204)
    def logout() -> Response:
        return Response(status_code=204)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/driver")
    def driver(request: Request):
        return {"driver_class": request.app.state.driver_class}

    @app.get("/schedulestatus")
    def schedule_status(scheduleentryid: int, request: Request) -> List[dict]:
        tsdb: Optional[TimeSeriesDatabase] = request.app.state.tsdb
        if tsdb is None:
            raise HTTPException(status_code=503, detail="No database configured")
        with tsdb.make_schedule_entry_dao() as dao:
            rows = dao.get_schedule_status_for(scheduleentryid)
        return [{"id": row.id, "run_status": row.run_status, "hostname": row.hostname} for row in rows]

    return app


@pytest.fixture(scope="session")
def harness_settings() -> HarnessSettings:
    return HarnessSettings(
        deployment_path="odcsapi",
        db_type=DbType.OPENTSDB,
        database_url=None,
        server=ServerConfig(startup_timeout=20),
        probe=ProbeConfig(max_attempts=50, interval=0.05),
    )


@pytest.fixture(scope="session")
def harness_app() -> FastAPI:
    return build_demo_app()


@pytest.fixture
def demo_app_factory():
    return build_demo_app
