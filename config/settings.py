"""Centralized application settings using pydantic-settings."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration settings.

    Settings can be overridden via environment variables prefixed with HNREADER_.
    Example: HNREADER_RATE_LIMIT_SECONDS=2.0
    """

    model_config = SettingsConfigDict(
        env_prefix="HNREADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Base paths
    state_path: Path = Field(
        default_factory=lambda: Path.home() / ".hnreader.db",
        description="SQLite file holding the last listed stories and the login token",
    )
    schema_path: Optional[Path] = Field(
        default=None,
        description="SQL schema for the state database (the packaged schema if unset)",
    )

    # Scraping settings
    base_url: str = Field(
        default="https://news.ycombinator.com",
        description="Base URL for Hacker News",
    )
    rate_limit_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum seconds between requests",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Maximum number of retry attempts",
    )
    request_timeout: int = Field(
        default=15,
        description="Request timeout in seconds",
    )
    user_agent: str = Field(
        default="hnreader/0.1 (+https://news.ycombinator.com)",
        description="User-Agent header for requests",
    )

    # Comment tree settings
    indent_gap_policy: Literal["drop", "clamp", "reject"] = Field(
        default="drop",
        description="How comments nested deeper than their predecessor allows are handled",
    )

    # Terminal output
    text_width: int = Field(
        default=80,
        ge=20,
        description="Column width used when wrapping story and comment text",
    )

    # GraphQL server
    host: str = Field(
        default="0.0.0.0",
        description="Interface the GraphQL server binds to",
    )
    port: int = Field(
        default=8080,
        validation_alias=AliasChoices("HNREADER_PORT", "PORT"),
        description="Port the GraphQL server listens on",
    )


# Global settings instance
settings = Settings()
