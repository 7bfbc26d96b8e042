from __future__ import annotations

import pytest

from formsense.exceptions import (
    AsyncExecutionError,
    DependencyError,
    PackageError,
    ParsingError,
    ServiceError,
    SettingsError,
    TemplateStoreError,
)


@pytest.mark.parametrize(
    "error_type",
    [SettingsError, AsyncExecutionError, ParsingError, ServiceError, DependencyError, TemplateStoreError],
)
def test_root_exception_hierarchy(error_type: type[Exception]) -> None:
    assert issubclass(error_type, PackageError)


def test_parsing_error_reports_stage() -> None:
    assert str(ParsingError(stage="input", message="Document is empty")) == "[input] Document is empty"


def test_service_error_is_distinct_from_parsing_error() -> None:
    error = ServiceError(message="timed out", service="openai-compatible")

    assert not isinstance(error, ParsingError)
    assert str(error) == "openai-compatible service error: timed out"


def test_dependency_error_lists_missing_packages() -> None:
    error = DependencyError(missing_package=["openai", "httpx"], message="map")

    assert str(error) == "Missing runtime dependencies for 'map': openai, httpx"
