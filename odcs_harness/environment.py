"""
Environment bridge.

Re-exports the environment produced by the external configuration into the
process environment and derives the database driver selection from the
database type. The embedded server reads both while it initializes, so
``apply`` has to finish before the server starts.
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, MutableMapping, Optional

from odcs_harness.core.config import DbType
from odcs_harness.core.logging_config import get_logger

logger = get_logger(__name__)

DRIVER_CLASS_PROPERTY = "DB_DRIVER_CLASS"

VENDOR_DRIVER_CLASS = "oracle+oracledb"
DEFAULT_DRIVER_CLASS = "postgresql+psycopg"


def driver_class_for(db_type: DbType) -> str:
    """Map a database type to the driver identifier the server loads."""
    if db_type is DbType.CWMS:
        return VENDOR_DRIVER_CLASS
    return DEFAULT_DRIVER_CLASS


class EnvironmentBridge:
    """Applies configuration output to the process environment and can undo it."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ
        self._previous: Dict[str, Optional[str]] = {}
        self.applied = False

    def _set(self, key: str, value: str) -> None:
        if key not in self._previous:
            self._previous[key] = self._environ.get(key)
        self._environ[key] = value

    def apply(self, env_vars: Mapping[str, str], db_type: DbType) -> None:
        """Copy every entry of ``env_vars`` verbatim, then set the driver property.

        The driver property is written last so a stray ``DB_DRIVER_CLASS`` in
        ``env_vars`` cannot contradict ``db_type``.
        """
        for key, value in env_vars.items():
            self._set(key, str(value))
        driver = driver_class_for(db_type)
        self._set(DRIVER_CLASS_PROPERTY, driver)
        self.applied = True
        logger.info(f"Applied {len(env_vars)} environment entries, {DRIVER_CLASS_PROPERTY}={driver}")

    def restore(self) -> None:
        """Put back every value ``apply`` overwrote and drop the keys it added."""
        for key, value in self._previous.items():
            if value is None:
                self._environ.pop(key, None)
            else:
                self._environ[key] = value
        logger.debug(f"Restored {len(self._previous)} environment entries")
        self._previous.clear()
        self.applied = False
