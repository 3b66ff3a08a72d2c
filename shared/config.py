"""
Shared configuration management for the DNS gateway.
"""

from typing import Optional
from urllib.parse import quote

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9501)
    metrics_port: int = Field(default=0, ge=0)


class GatewaySettings(BaseConfig):
    """Settings for the DNS gateway.

    ``api_token`` authenticates callers. ``provider`` and ``api_key`` are the
    provider identity injected into every record operation.
    """

    api_token: str = Field(min_length=1)
    provider: str = Field(min_length=1)
    api_key: str = Field(min_length=1)

    # ClouDNS credentials
    auth_id: Optional[str] = Field(default=None)
    auth_password: Optional[str] = Field(default=None)

    # Database: either a full DSN or the discrete DB_* variables
    postgres_dsn: Optional[str] = Field(default=None)
    db_type: str = Field(default="pgsql")
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_name: Optional[str] = Field(default=None)
    db_user: Optional[str] = Field(default=None)
    db_pass: Optional[str] = Field(default=None)
    db_pool_min_size: int = Field(default=1, ge=0)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=30.0, gt=0)

    @model_validator(mode="after")
    def _check_settings(self) -> "GatewaySettings":
        if self.provider == "ClouDNS" and not (self.auth_id and self.auth_password):
            raise ValueError("Missing ClouDNS credentials (AUTH_ID and AUTH_PASSWORD)")
        if self.db_pool_max_size < self.db_pool_min_size:
            raise ValueError("DB_POOL_MAX_SIZE must be >= DB_POOL_MIN_SIZE")
        if not self.postgres_dsn:
            self.postgres_dsn = self._build_dsn()
        return self

    def _build_dsn(self) -> str:
        if self.db_type != "pgsql":
            raise ValueError(f"Unsupported database type: {self.db_type}")
        if not (self.db_name and self.db_user and self.db_pass):
            raise ValueError(
                "Missing required database configuration "
                "(POSTGRES_DSN or DB_NAME, DB_USER and DB_PASS)"
            )
        return (
            f"postgresql://{quote(self.db_user, safe='')}:{quote(self.db_pass, safe='')}"
            f"@{self.db_host}:{self.db_port}/{quote(self.db_name, safe='')}"
        )


def get_config(**overrides) -> GatewaySettings:
    """Load gateway settings from the environment, applying explicit overrides."""
    return GatewaySettings(**overrides)
