"""formsense package."""

from formsense.async_runner import run_async
from formsense.exceptions import (
    AsyncExecutionError,
    DependencyError,
    PackageError,
    ParsingError,
    ServiceError,
    SettingsError,
    TemplateStoreError,
)
from formsense.logging import configure_logging, get_logger
from formsense.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("formsense")

__all__ = [
    "AsyncExecutionError",
    "DependencyError",
    "PackageError",
    "ParsingError",
    "ServiceError",
    "Settings",
    "SettingsError",
    "TemplateStoreError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
