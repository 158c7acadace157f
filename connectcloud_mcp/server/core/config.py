"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CDATA_API_URL = "https://cloud.cdata.com/api"

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class ConnectCloudConfig(BaseModel):
    """CData Connect Cloud API configuration."""

    username: Optional[str] = Field(default=None, alias="CDATA_USERNAME", description="Connect Cloud username")
    pat: Optional[str] = Field(default=None, alias="CDATA_PAT", description="Connect Cloud personal access token")
    api_url: str = Field(default=DEFAULT_CDATA_API_URL, alias="CDATA_API_URL", description="Connect Cloud API base URL")
    timeout: float = Field(default=60.0, alias="CDATA_HTTP_TIMEOUT", description="HTTP timeout in seconds")

    model_config = {"populate_by_name": True}

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.pat)


class InstructionsConfig(BaseModel):
    """Driver instruction resolver configuration."""

    api_url: Optional[str] = Field(
        default=None,
        alias="CDATA_INSTRUCTIONS_API_URL",
        description="Base URL of the remote driver instruction service (remote tier is skipped when unset)",
    )
    api_token: Optional[str] = Field(
        default=None,
        alias="CDATA_INSTRUCTIONS_API_TOKEN",
        description="Bearer token for the remote driver instruction service",
    )
    remote_timeout: float = Field(
        default=10.0, alias="INSTRUCTIONS_REMOTE_TIMEOUT", description="Remote instruction fetch timeout in seconds"
    )
    cache_ttl: float = Field(
        default=15 * 60, alias="INSTRUCTIONS_CACHE_TTL", description="Default cache TTL in seconds"
    )
    generic_ttl: float = Field(
        default=5 * 60, alias="INSTRUCTIONS_GENERIC_TTL", description="Cache TTL for generic instructions in seconds"
    )
    sweep_interval: float = Field(
        default=5 * 60, alias="INSTRUCTIONS_SWEEP_INTERVAL", description="Background cache sweep interval in seconds"
    )

    model_config = {"populate_by_name": True}

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_url and self.api_token)


class TransportConfig(BaseModel):
    """MCP transport configuration."""

    type: str = Field(default="stdio", alias="TRANSPORT_TYPE", description="MCP transport type (stdio or http)")
    host: str = Field(default="localhost", alias="HOST", description="HTTP transport host address")
    port: int = Field(default=3000, alias="PORT", description="HTTP transport port number")

    model_config = {"populate_by_name": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(default=False, alias="LOG_ENABLED", description="Enable logging")
    level: str = Field(default="INFO", alias="LOG_LEVEL", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="detailed", alias="LOG_FORMAT", description="Log format (simple, detailed, json)")
    file_dir: str = Field(default="logs", alias="LOG_FILE_DIR", description="Directory for log files")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Connect Cloud API
    # =====================================================================
    cdata_username: Optional[str] = Field(default=None, alias="CDATA_USERNAME")
    cdata_pat: Optional[str] = Field(default=None, alias="CDATA_PAT")
    cdata_api_url: str = Field(default=DEFAULT_CDATA_API_URL, alias="CDATA_API_URL")
    cdata_http_timeout: float = Field(default=60.0, alias="CDATA_HTTP_TIMEOUT")

    # =====================================================================
    # Driver Instructions
    # =====================================================================
    instructions_api_url: Optional[str] = Field(default=None, alias="CDATA_INSTRUCTIONS_API_URL")
    instructions_api_token: Optional[str] = Field(default=None, alias="CDATA_INSTRUCTIONS_API_TOKEN")
    instructions_remote_timeout: float = Field(default=10.0, alias="INSTRUCTIONS_REMOTE_TIMEOUT")
    instructions_cache_ttl: float = Field(default=15 * 60, alias="INSTRUCTIONS_CACHE_TTL")
    instructions_generic_ttl: float = Field(default=5 * 60, alias="INSTRUCTIONS_GENERIC_TTL")
    instructions_sweep_interval: float = Field(default=5 * 60, alias="INSTRUCTIONS_SWEEP_INTERVAL")

    # =====================================================================
    # Transport
    # =====================================================================
    transport_type: str = Field(
        default="stdio",
        alias="TRANSPORT_TYPE",
        description="MCP transport: 'stdio' or 'http' (streamable HTTP)",
    )
    host: str = Field(default="localhost", alias="HOST")
    port: int = Field(default=3000, alias="PORT")

    # =====================================================================
    # Logging
    # =====================================================================
    log_enabled: bool = Field(default=False, alias="LOG_ENABLED")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="detailed", alias="LOG_FORMAT")
    log_file_dir: str = Field(default="logs", alias="LOG_FILE_DIR")

    @field_validator("transport_type")
    @classmethod
    def _normalize_transport(cls, value: str) -> str:
        normalized = value.strip().lower().replace("_", "-")
        if normalized == "stdio":
            return "stdio"
        if normalized in {"http", "streamable-http", "streamablehttp"}:
            return "http"
        raise ValueError(f"Unsupported transport type: {value!r} (expected 'stdio' or 'http')")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def connect_cloud(self) -> ConnectCloudConfig:
        """Get Connect Cloud API configuration from environment variables."""
        return ConnectCloudConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def instructions(self) -> InstructionsConfig:
        """Get driver instruction resolver configuration from environment variables."""
        return InstructionsConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def transport(self) -> TransportConfig:
        """Get transport configuration from environment variables."""
        return TransportConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
