"""
Shared configuration management for the starter service.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parent.parent


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="STARTER_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    log_format: str = Field(default="json")

    # JWT
    jwt_key_dir: Path = Field(default=PROJECT_ROOT / "JWT")
    token_ttl_seconds: int = Field(default=300)
    token_leeway_seconds: int = Field(default=0)

    # Sessions
    session_secret: str = Field(default="secret")
    session_cookie: str = Field(default="MySession")
    raw_session_cookie: str = Field(default="Raw-cookie")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
