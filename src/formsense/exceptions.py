"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class ParsingError(PackageError):
    """Raised when input bytes cannot be parsed as a document.

    The ``stage`` names the pipeline step that rejected the input so callers
    can report where the document failed.
    """

    stage: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"[{self.stage}] {self.message}"


@dataclass(frozen=True)
class ServiceError(PackageError):
    """Raised when the reasoning service is unreachable, times out or errors."""

    message: str
    service: str = "reasoning"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.service} service error: {self.message}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass
class TemplateStoreError(PackageError):
    """Raised when template catalog files cannot be loaded or saved."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
