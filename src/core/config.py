"""Pydantic settings loaded from YAML configuration and environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

# Severity levels that warrant an alert. Fixed; not part of AlertsConfig.
ALERT_SEVERITIES: tuple[str, ...] = ("error", "fatal", "panic")


class LogSourceConfig(BaseModel):
    """Supabase analytics (log query) API configuration."""

    api_base: str = "https://api.supabase.com"
    project_ref: str = ""
    access_token: SecretStr = SecretStr("")
    table: str = "edge_logs"
    timeout_secs: float = 10.0


class EmailConfig(BaseModel):
    """Amazon SES delivery configuration."""

    region: str = "us-east-1"
    access_key_id: str = ""
    secret_access_key: SecretStr = SecretStr("")
    from_email: str = "alerts@yourcompany.com"
    to_emails: list[str] = ["admin@yourcompany.com"]
    timeout_secs: float = 10.0


class AlertsConfig(BaseModel):
    """Filtering and dispatch policy."""

    allowed_origin_ids: list[str] = []
    check_interval_minutes: int = 15
    fail_on_delivery_error: bool = True


class ServerConfig(BaseModel):
    """HTTP trigger endpoint configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    path: str = "/"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    log_source: LogSourceConfig = LogSourceConfig()
    email: EmailConfig = EmailConfig()
    alerts: AlertsConfig = AlertsConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()


# Environment variable → (section, key). Comma-list keys are split.
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "AWS_REGION": ("email", "region"),
    "AWS_ACCESS_KEY_ID": ("email", "access_key_id"),
    "AWS_SECRET_ACCESS_KEY": ("email", "secret_access_key"),
    "FROM_EMAIL": ("email", "from_email"),
    "ALERT_EMAILS": ("email", "to_emails"),
    "SUPABASE_PROJECT_REF": ("log_source", "project_ref"),
    "SUPABASE_ACCESS_TOKEN": ("log_source", "access_token"),
    "ALLOWED_FUNCTION_IDS": ("alerts", "allowed_origin_ids"),
    "CHECK_INTERVAL_MINUTES": ("alerts", "check_interval_minutes"),
}

_LIST_KEYS = {"to_emails", "allowed_origin_ids"}


def split_csv(value: str) -> list[str]:
    """Split a comma-separated value, dropping blank items."""
    return [part.strip() for part in value.split(",") if part.strip()]


def apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Overlay recognised environment variables onto raw settings data.

    Args:
        data: Raw settings mapping (as parsed from YAML). Not mutated.
        environ: Environment to read. Defaults to ``os.environ``.

    Returns:
        A new mapping with overrides applied.
    """
    env = os.environ if environ is None else environ
    merged: dict[str, Any] = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in data.items()
    }
    for var, (section, key) in _ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        value: Any = split_csv(raw) if key in _LIST_KEYS else raw
        target = merged.get(section)
        if not isinstance(target, dict):
            target = {}
            merged[section] = target
        target[key] = value
    return merged


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file plus environment and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.
        environ: Environment mapping for overrides. Defaults to ``os.environ``.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**apply_env_overrides(data, environ))
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
