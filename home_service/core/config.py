"""
Configuration helpers for the home service.

Exposes a frozen Settings object built from environment variables so that
routers/services/db helpers do not fetch os.environ directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    service_name: str
    database_url: str
    sql_echo: bool
    api_prefix: str
    log_level: str
    cors_origins: tuple[str, ...]
    create_schema_on_startup: bool
    metrics_enabled: bool
    otlp_endpoint: str


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(value: str | None) -> tuple[str, ...]:
    return tuple(item.strip() for item in (value or "").split(",") if item.strip())


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    prefix = (os.getenv("API_PREFIX") or "/api/v1").strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        service_name=os.getenv("SERVICE_NAME", "template-home-service"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./home_service.db"),
        sql_echo=_bool(os.getenv("SQL_ECHO"), False),
        api_prefix=prefix,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
        create_schema_on_startup=_bool(os.getenv("CREATE_SCHEMA_ON_STARTUP"), True),
        metrics_enabled=_bool(os.getenv("METRICS_ENABLED"), True),
        otlp_endpoint=(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip(),
    )
