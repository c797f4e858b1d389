"""
Configuration management for JobPrep.
"""

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # LLM
    deepseek_api_key: str = ""
    llm_model: str = "deepseek-chat"
    llm_temperature: float = 0.3
    llm_timeout: float = 60.0
    llm_max_retries: int = 0

    # Search APIs
    tavily_api_key: str = ""
    firecrawl_api_key: str = ""
    search_provider: str = "tavily"  # tavily/firecrawl
    max_search_results: int = 10
    search_timeout: float = 30.0

    # Database
    database_url: str = ""

    # Resume storage
    upload_dir: str = ".uploads"
    max_upload_size: int = 5 * 1024 * 1024  # 5 MB

    # API
    cors_origins: str = "http://localhost:5173"
    rate_limit: str = "5/minute"
    rate_limit_enabled: bool = True

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


settings = Settings()


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the API and CLI."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
