"""Configuration management for helmhistory."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """helmhistory configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="HELMHISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="dev", description="Environment: dev, prod")

    # Helm Configuration
    helm_binary: str = Field(
        default="helm",
        description="Helm executable name or path"
    )
    namespace: str = Field(
        default="dev",
        description="Namespace every history query is scoped to"
    )
    kubeconfig_path: Optional[str] = Field(
        default=None,
        description="Kubeconfig passed to helm; helm's own lookup applies when unset"
    )

    # Timeouts
    helm_timeout: Optional[float] = Field(
        default=300.0,
        description="Seconds to wait for helm before killing it (None waits forever)"
    )

    # Error policy
    strict_errors: bool = Field(
        default=False,
        description="Raise on helm failures instead of returning no revisions"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="console",
        description="Log format: json, console"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (for testing)."""
    global _settings
    _settings = None
