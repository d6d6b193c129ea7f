"""
Application settings and configuration.
"""

import logging
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = "You are an expert at writing corporate purpose statements."


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="PROMPTLOG_",
        env_file=".env",
        populate_by_name=True,
        extra="ignore",
    )

    # Completion service
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PROMPTLOG_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="Credential for the completion service",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", description="Completion API base URL"
    )
    completion_model: str = Field(
        default="gpt-3.5-turbo", description="Model used for every completion"
    )
    completion_max_tokens: int = Field(
        default=300, ge=1, description="Maximum output tokens per completion"
    )
    completion_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Upper bound for one completion call"
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT, description="Fixed system preamble"
    )

    # Storage
    database_url: str = Field(
        default="postgresql://localhost:5432/promptlog",
        validation_alias=AliasChoices("PROMPTLOG_DATABASE_URL", "DATABASE_URL"),
        description="PostgreSQL connection string",
    )
    database_ssl: bool = Field(
        default=False,
        description="Connect over TLS without certificate verification",
    )
    database_pool_min_size: int = Field(default=1, description="Minimum pool size")
    database_pool_max_size: int = Field(default=10, description="Maximum pool size")

    # Chat
    require_user_email: bool = Field(
        default=False, description="Reject chat requests without an email tag"
    )

    # Export
    export_dir: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()) / "promptlog-exports",
        description="Directory for transient CSV export files",
    )
    export_grace_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Maximum lifetime of an export file that was never streamed",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("PROMPTLOG_PORT", "PORT"),
        description="Server port",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Log level")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging with development-friendly structured output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    from ..utils.logging import create_development_formatter

    log_level = getattr(logging, level.upper())

    # Configure only our application logger (promptlog.*)
    app_logger = logging.getLogger("promptlog")
    app_logger.setLevel(log_level)

    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(create_development_formatter())
    app_logger.addHandler(console_handler)

    # Prevent propagation to root logger to avoid duplication
    app_logger.propagate = False

    logging.getLogger().setLevel(log_level)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
