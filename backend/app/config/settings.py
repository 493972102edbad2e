"""
Application configuration and settings.

This module uses pydantic-settings for configuration management with environment variables.
.env files from both the repository root and backend directories are loaded first.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.env_loader import load_env

# Load environment variables first (before creating Settings instance)
load_env()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "PartSelect Assistant API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # LLM settings (no key = deterministic mode)
    llm_provider: str = "deepseek"
    llm_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "deepseek_api_key"),
    )
    llm_model: str = "deepseek-chat"
    llm_base_url: str = "https://api.deepseek.com/v1"
    llm_timeout: float = 15.0  # Seconds per HTTP attempt
    llm_max_retries: int = 2
    llm_synthesis_enabled: bool = True  # Let the LLM rephrase templated answers

    # Search settings
    search_default_limit: int = Field(default=5, ge=1)
    search_max_limit: int = Field(default=20, ge=5, le=50)  # Rule-based searches ask for up to 5

    # Conversation settings
    context_window: int = 10  # Exchanges kept per session
    session_ttl_seconds: int = 3600

    # Rate limiting (per client address)
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 900

    # CORS settings
    allow_origins: list = ["*"]
    allow_credentials: bool = True
    allow_methods: list = ["*"]
    allow_headers: list = ["*"]


# Global settings instance
settings = Settings()
