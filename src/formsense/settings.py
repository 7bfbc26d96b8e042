"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import ipaddress
import logging
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import certifi
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from formsense.exceptions import SettingsError

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "formsense"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY", description="HTTP proxy URL.")
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )
    no_proxy: str | None = Field(
        default=None,
        validation_alias="NO_PROXY",
        description="Comma-separated list of hosts or CIDR ranges to bypass proxy.",
    )
    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to a CA bundle. Defaults to the certifi bundle.",
    )
    timeout: float = Field(
        default=30.0,
        validation_alias="TIMEOUT",
        description="HTTP request timeout in seconds.",
    )
    max_connections: int = Field(
        default=20,
        validation_alias="MAX_CONNECTIONS",
        description="Maximum number of concurrent connections.",
    )

    openai_base_url: str | None = Field(
        default=None,
        validation_alias="OPENAI_BASE_URL",
        description="Base URL of the OpenAI-compatible reasoning endpoint.",
    )
    openai_api_key: str | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
        description="API key for the reasoning endpoint.",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="OPENAI_MODEL",
        description="Model used for field mapping.",
    )
    reasoning_timeout: float = Field(
        default=60.0,
        gt=0,
        validation_alias="REASONING_TIMEOUT",
        description="Timeout in seconds applied to one reasoning call.",
    )
    max_prompt_chars: int = Field(
        default=12000,
        gt=0,
        validation_alias="MAX_PROMPT_CHARS",
        description="Upper bound on the mapping prompt length.",
    )

    template_confidence_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        validation_alias="TEMPLATE_CONFIDENCE_THRESHOLD",
        description="Minimum confidence for a template match to be reported.",
    )
    manual_review_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        validation_alias="MANUAL_REVIEW_THRESHOLD",
        description="Mappings below this confidence always require manual review.",
    )
    rules_fallback_enabled: bool = Field(
        default=True,
        validation_alias="RULES_FALLBACK_ENABLED",
        description="Fall back to exact-name mapping when the reasoning service fails.",
    )
    detection_workers: int = Field(
        default=1,
        ge=1,
        validation_alias="DETECTION_WORKERS",
        description="Threads used for per-page field detection.",
    )
    max_file_size_mb: float = Field(
        default=50.0,
        gt=0,
        validation_alias="MAX_FILE_SIZE_MB",
        description="Largest accepted input document.",
    )
    template_store_dir: str | None = Field(
        default=None,
        validation_alias="TEMPLATE_STORE_DIR",
        description="Directory holding extra template files.",
    )

    @field_validator("openai_base_url")
    @classmethod
    def _validate_openai_base_url(cls, value: str | None) -> str | None:
        """Require https for remote reasoning endpoints.

        Args:
            value (str | None): Configured base URL.

        Raises:
            ValueError: If a non-local endpoint uses plain http.

        Returns:
            str | None: The unchanged URL.
        """
        if not value:
            return value
        parsed = urlparse(value)
        if parsed.scheme == "http" and (parsed.hostname or "") not in _LOCAL_HOSTS:
            raise ValueError("OPENAI_BASE_URL must use https outside local development")
        return value

    @property
    def max_file_size_bytes(self) -> int:
        """Return the input size limit in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def should_bypass_proxy(self, target_url: str | None) -> bool:
        """Return whether the URL should bypass proxies."""
        return _is_no_proxy_target(target_url, self.no_proxy)


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path or certifi.where())
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def _iter_no_proxy_entries(no_proxy: str | None) -> list[str]:
    """Split NO_PROXY into normalized entries.

    Args:
        no_proxy (str | None): Raw NO_PROXY value.

    Returns:
        list[str]: Normalized entries.
    """
    if not no_proxy:
        return []
    return [entry.strip().lower() for entry in no_proxy.split(",") if entry.strip()]


def _is_no_proxy_target(target_url: str | None, no_proxy: str | None) -> bool:
    """Return whether the target URL matches a NO_PROXY entry.

    Host entries match the host and its subdomains, `*` matches everything and
    CIDR entries match IP hosts inside the range.

    Args:
        target_url (str | None): Target request URL.
        no_proxy (str | None): Raw NO_PROXY value.

    Returns:
        bool: True when proxy must be bypassed.
    """
    if not target_url:
        return False
    hostname = urlparse(target_url).hostname
    if not hostname:
        return False
    host = hostname.lower().strip("[]")

    for entry in _iter_no_proxy_entries(no_proxy):
        if entry == "*":
            return True
        try:
            network = ipaddress.ip_network(entry, strict=False)
        except ValueError:
            suffix = entry.removeprefix(".")
            if host == suffix or host.endswith(f".{suffix}"):
                return True
            continue
        try:
            if ipaddress.ip_address(host) in network:
                return True
        except ValueError:
            continue
    return False


def build_httpx_client_kwargs(
    settings: Settings,
    *,
    target_url: str | None = None,
) -> dict[str, Any]:
    """Build kwargs used for `httpx.AsyncClient`.

    Args:
        settings (Settings): Runtime settings.
        target_url (str | None): Optional target URL used for NO_PROXY evaluation.

    Returns:
        dict[str, Any]: Arguments for client constructors.
    """
    proxy_url = settings.https_proxy or settings.http_proxy

    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
    }
    if proxy_url and not settings.should_bypass_proxy(target_url):
        kwargs["proxy"] = proxy_url
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
