"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

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
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="ExpertPress server host address to bind to",
        alias="EXPERTPRESS_SERVER_HOST",
    )
    server_port: int = Field(
        default=2368,
        description="ExpertPress server port number",
        alias="EXPERTPRESS_SERVER_PORT",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="EXPERTPRESS_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="Log format (simple, detailed, json)", alias="LOG_FORMAT")
    log_file_dir: str = Field(default="logs", description="Directory for the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Whether to also log to a file", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./expertpress.db",
        description="Async connection URL for the application database",
        alias="DATABASE_URL",
    )

    # =====================================================================
    # Site Configuration
    # =====================================================================
    site_url: str = Field(
        default="http://localhost:2368/",
        description="Public URL of the site, including any subdirectory",
        alias="EXPERTPRESS_SITE_URL",
    )
    members_enabled: bool = Field(
        default=False,
        description="Labs flag enabling members content gating",
        alias="EXPERTPRESS_MEMBERS_ENABLED",
    )
    theme_dir: Optional[str] = Field(
        default=None,
        description="Directory holding the active theme templates (defaults to the bundled theme)",
        alias="EXPERTPRESS_THEME_DIR",
    )

    # =====================================================================
    # Monitoring Configuration (Logfire, opt-in)
    # =====================================================================
    logfire_enabled: bool = Field(default=False, description="Send traces and logs to Logfire", alias="LOGFIRE_ENABLED")
    logfire_token: str = Field(default="", description="Logfire write token", alias="LOGFIRE_TOKEN")
    logfire_environment: str = Field(default="development", alias="LOGFIRE_ENVIRONMENT")
    logfire_service_name: str = Field(default="expertpress-server", alias="LOGFIRE_SERVICE_NAME")
    logfire_sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Share of traces kept (head sampling)", alias="LOGFIRE_SAMPLE_RATE"
    )
    logfire_trace_sqlalchemy: bool = Field(default=True, alias="LOGFIRE_TRACE_SQLALCHEMY")
    logfire_trace_fastapi: bool = Field(default=True, alias="LOGFIRE_TRACE_FASTAPI")
    slow_request_ms: float = Field(
        default=1000.0, description="Requests slower than this are logged as warnings", alias="SLOW_REQUEST_MS"
    )

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
