"""
Application settings loaded from environment variables.

This module uses Pydantic Settings v2 for type validation and environment variable loading.
Every credential is optional here; which routes can be served is decided by the
startup validation pass in ``validation.py``.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Handle both running from project root and backend directory
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields can be overridden via environment variables (case-insensitive).
    """

    # Search provider credentials
    # Serper covers the web, news and scholar routes
    serper_api_key: Optional[str] = None
    bing_api_key: Optional[str] = None
    mojeek_api_key: Optional[str] = None

    # The DuckDuckGo scrape fallback needs no credential, so it is opt-in
    enable_duckduckgo: bool = False

    # Chat completion credentials (at least one is required)
    deepseek_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None

    # Frontend
    frontend_url: str = "http://localhost:3000"

    # Environment
    environment: str = "development"

    # Upper bound on the total duration of one completion stream (seconds)
    completion_timeout: int = 60

    # Per-request timeouts for search upstreams (seconds)
    search_timeout: float = 30.0
    scraper_timeout: float = 10.0

    @field_validator(
        "serper_api_key",
        "bing_api_key",
        "mojeek_api_key",
        "deepseek_api_key",
        "openai_api_key",
        "groq_api_key",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings from .env files as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Create settings instance
settings = Settings()
