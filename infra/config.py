"""Centralized application configuration with schema validation.

Environment names come in two spellings:
- flat names (for example ``ZABBIX_URL``)
- nested names (for example ``ZABBIX__URL``), which win when both are set

A local ``.env`` file is read before process env values.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ZabbixConfig(BaseModel):
    """Connection settings for the Zabbix JSON-RPC endpoint."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default="", description="Full api_jsonrpc.php URL")
    api_token: SecretStr = Field(default=SecretStr(""))
    timeout: int = Field(default=30, ge=1, le=300)
    verify_tls: bool = Field(default=True)

    @field_validator("url", mode="before")
    @classmethod
    def _normalize_url(cls, value: object) -> str:
        text = str(value or "").strip()
        if text and not text.startswith(("http://", "https://")):
            raise ValueError("zabbix.url must start with http:// or https://")
        return text

    @field_validator("verify_tls", mode="before")
    @classmethod
    def _normalize_verify_tls(cls, value: object) -> bool:
        if value is None:
            return True
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in {"0", "false", "no", "off"}:
            return False
        return True

    def is_configured(self) -> bool:
        return bool(self.url) and bool(self.api_token.get_secret_value())


class LoggingSettings(BaseModel):
    """Repository-wide logging settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)
    override_root_handlers: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        text = str(value or "").strip().upper()
        if text in _LOG_LEVELS:
            return text
        return "INFO"


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    zabbix: ZabbixConfig = Field(default_factory=ZabbixConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_env(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        env_file: str = ".env",
    ) -> Settings:
        """Build settings from `.env` then environment variables."""
        runtime_env = os.environ if env is None else env
        merged_env = _merge_env(_load_dotenv(Path(env_file)), runtime_env)
        payload = _build_payload(merged_env)
        return cls.model_validate(payload)


def _load_dotenv(path: Path) -> dict[str, str]:
    """Parse a minimal `.env` file format."""
    if not path.exists() or not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        value = raw_value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def _merge_env(dotenv_values: Mapping[str, str], runtime_env: Mapping[str, str]) -> dict[str, str]:
    """Return env map where process env overrides `.env` values."""
    merged = {str(k): str(v) for k, v in dotenv_values.items()}
    for key, value in runtime_env.items():
        merged[str(key)] = str(value)
    return merged


def _first_non_empty(env: Mapping[str, str], *keys: str) -> str | None:
    """Return the first non-empty value for the provided keys."""
    for key in keys:
        value = str(env.get(key, "")).strip()
        if value:
            return value
    return None


def _build_payload(env: Mapping[str, str]) -> dict[str, object]:
    """Build nested settings payload from env values."""
    zabbix = {
        "url": _first_non_empty(env, "ZABBIX__URL", "ZABBIX_URL"),
        "api_token": _first_non_empty(env, "ZABBIX__API_TOKEN", "ZABBIX_API_TOKEN"),
        "timeout": _first_non_empty(env, "ZABBIX__TIMEOUT", "ZABBIX_TIMEOUT"),
        "verify_tls": _first_non_empty(env, "ZABBIX__VERIFY_TLS", "ZABBIX_VERIFY_TLS"),
    }
    logging_settings = {
        "level": _first_non_empty(env, "LOGGING__LEVEL", "ZBXACT_LOG_LEVEL"),
        "json_logs": _first_non_empty(env, "LOGGING__JSON_LOGS", "ZBXACT_LOG_JSON"),
        "override_root_handlers": _first_non_empty(
            env, "LOGGING__OVERRIDE_ROOT_HANDLERS", "ZBXACT_LOG_OVERRIDE"
        ),
    }
    return {
        "zabbix": {k: v for k, v in zabbix.items() if v is not None},
        "logging": {k: v for k, v in logging_settings.items() if v is not None},
    }


_SETTINGS_LOCK = Lock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, reload: bool = False) -> Settings:
    """Return cached settings, optionally forcing reload from env."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        if reload or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings.from_env()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear in-process settings cache."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


__all__ = [
    "LoggingSettings",
    "Settings",
    "ZabbixConfig",
    "get_settings",
    "clear_settings_cache",
    "ValidationError",
]
