"""
Configuration Settings.

This module defines the harness configuration using Pydantic's BaseSettings.
Only the options the harness itself understands are modelled explicitly
(deployment path, database type, server and probe tuning); anything else the
external configuration produces travels through the ``passthrough`` bag and is
re-exported verbatim.

Environment variables use the ``ODCS_HARNESS_`` prefix and double underscore
(``__``) as delimiter for nested properties. For example
``ODCS_HARNESS_PROBE__MAX_ATTEMPTS`` maps to ``settings.probe.max_attempts``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DEPLOYMENT_PATH = "odcsapi"


class DbType(str, Enum):
    """Database vendor the server under test talks to."""

    CWMS = "cwms"
    OPENTSDB = "opentsdb"

    @classmethod
    def parse(cls, value: Any) -> "DbType":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown database type: {value!r}")


# =====================================================================
# Nested Configuration Models
# =====================================================================


class ServerConfig(BaseModel):
    """Embedded server configuration."""

    app: Optional[str] = Field(
        default=None,
        description="ASGI application import string, e.g. 'package.module:app'",
    )
    bind_host: str = Field(default="127.0.0.1", description="Interface the listening socket binds to")
    public_host: str = Field(default="localhost", description="Host name used in the client base URI")
    scheme: str = Field(default="http", description="Scheme used in the client base URI")
    startup_timeout: float = Field(default=10.0, gt=0, description="Seconds to wait for uvicorn to report started")
    shutdown_timeout: float = Field(default=5.0, gt=0, description="Seconds to wait for the serving thread to exit")
    log_level: str = Field(default="warning", description="uvicorn log level")


class ProbeConfig(BaseModel):
    """Readiness probe configuration."""

    method: str = Field(default="DELETE", description="HTTP method of the liveness request")
    path: str = Field(default="/logout", description="Path of the liveness request, relative to the base URI")
    expected_status: int = Field(default=204, description="Status code that means the server is ready")
    max_attempts: int = Field(default=15, ge=1, description="Total number of probe attempts")
    interval: float = Field(default=0.1, ge=0, description="Seconds to wait between attempts")
    request_timeout: float = Field(default=1.0, gt=0, description="Per-request timeout in seconds")
    fatal_statuses: List[int] = Field(
        default_factory=list,
        description="Response statuses that abort polling instead of being retried",
    )

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


# =====================================================================
# Main Settings Class
# =====================================================================


class HarnessSettings(BaseSettings):
    """
    Harness settings model.

    All properties are bound from environment variables and an optional
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ODCS_HARNESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    deployment_path: str = Field(
        default=DEFAULT_DEPLOYMENT_PATH,
        validation_alias=AliasChoices("warContext", "ODCS_HARNESS_DEPLOYMENT_PATH", "deployment_path"),
        description="Base path the application is mounted under",
    )
    db_type: DbType = Field(default=DbType.OPENTSDB, description="Database vendor selector")
    database_url: Optional[str] = Field(default=None, description="SQLAlchemy URL of the fixture database")
    log_level: str = Field(default="INFO", description="Harness log level")

    server: ServerConfig = Field(default_factory=ServerConfig, description="Embedded server configuration")
    probe: ProbeConfig = Field(default_factory=ProbeConfig, description="Readiness probe configuration")
    passthrough: Dict[str, str] = Field(
        default_factory=dict,
        description="Unrecognized keys re-exported verbatim into the process environment",
    )

    @field_validator("deployment_path")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")

    @field_validator("db_type", mode="before")
    @classmethod
    def _parse_db_type(cls, value: Any) -> DbType:
        return DbType.parse(value)


_settings_instance: Optional[HarnessSettings] = None


def get_settings() -> HarnessSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = HarnessSettings()
    return _settings_instance


def reset_settings() -> None:
    """Forget the cached settings so the next ``get_settings`` re-reads the environment."""
    global _settings_instance
    _settings_instance = None
