"""
Logging Configuration Module.

This module provides centralized logging configuration for the harness.
Harness modules log at their own levels while the chatty third-party
libraries used underneath (uvicorn, httpx, SQLAlchemy) are turned down so the
test output stays readable.
"""

import logging
import os
from pathlib import Path
from typing import Optional

# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

# Module-specific log levels
MODULE_LOG_LEVELS = {
    "odcs_harness": "INFO",
    "odcs_harness.readiness": "INFO",
    "odcs_harness.server": "INFO",
    "odcs_harness.fixtures": "DEBUG",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "uvicorn": "WARNING",
    "uvicorn.error": "WARNING",
    "uvicorn.access": "WARNING",
}

_HANDLER_NAME = "odcs_harness.console"


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure logging for the harness.

    Handlers installed by a previous call are replaced, handlers owned by the
    test framework (e.g. pytest's capture handler) are left alone.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``ODCS_HARNESS_LOG_LEVEL`` or INFO.
        log_format: One of simple, detailed, json. Defaults to
            ``ODCS_HARNESS_LOG_FORMAT`` or detailed.
        log_file: Optional file receiving DEBUG and above.
    """
    level = (log_level or os.getenv("ODCS_HARNESS_LOG_LEVEL", "INFO")).upper()
    fmt = log_format or os.getenv("ODCS_HARNESS_LOG_FORMAT", "detailed")
    formatter = logging.Formatter(FORMATS.get(fmt, DETAILED_FORMAT), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.get_name() in (_HANDLER_NAME, f"{_HANDLER_NAME}.file"):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.set_name(f"{_HANDLER_NAME}.file")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.debug(f"Logging configured: level={level}, format={fmt}, file={log_file}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
