"""Client settings via Pydantic BaseSettings."""

from __future__ import annotations

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opsmgmt.exceptions import ConfigError

DEFAULT_LOGIN_ROUTE = "/login"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OPSMGMT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # API
    api_base_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 30.0

    # Identity provider (Keycloak-style realm/client)
    identity_provider_url: str | None = None
    identity_realm: str | None = None
    identity_client_id: str | None = None
    login_route: str = DEFAULT_LOGIN_ROUTE

    # Retry policy, applied to GET requests only
    retry_max_attempts: int = 3
    retry_delay_ms: int = 500
    retry_backoff_factor: float = 2.0

    # Query cache
    query_stale_seconds: float = 300.0

    # Persisted client state (tokens, active tenant)
    state_dir: str = "~/.opsmgmt"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("api_base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            msg = f"api_base_url must be an http(s) URL, got {value!r}"
            raise ValueError(msg)
        return value.rstrip("/")

    @field_validator("retry_max_attempts")
    @classmethod
    def _check_attempts(cls, value: int) -> int:
        if value < 1:
            msg = "retry_max_attempts must be at least 1"
            raise ValueError(msg)
        return value

    @property
    def state_path(self) -> Path:
        return Path(self.state_dir).expanduser()

    @property
    def tokens_file(self) -> Path:
        return self.state_path / "tokens.json"

    @property
    def tenant_file(self) -> Path:
        return self.state_path / "tenant.json"

    @property
    def identity_configured(self) -> bool:
        return bool(self.identity_provider_url and self.identity_realm and self.identity_client_id)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    try:
        settings = Settings()
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc
    identity_fields = (
        settings.identity_provider_url,
        settings.identity_realm,
        settings.identity_client_id,
    )
    if any(identity_fields) and not all(identity_fields):
        warnings.warn(
            "Identity provider is partially configured. "
            "Set OPSMGMT_IDENTITY_PROVIDER_URL, OPSMGMT_IDENTITY_REALM and "
            "OPSMGMT_IDENTITY_CLIENT_ID together.",
            UserWarning,
            stacklevel=2,
        )
    return settings
