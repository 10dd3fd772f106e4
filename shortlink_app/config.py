from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Short Link Redirector"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # Database
    database_url: str = "sqlite:///./shortlink.db"

    # Public URLs
    base_url: str = "http://localhost:8080"
    frontend_url: Optional[str] = None  # CORS origin outside development

    # Header carrying the real client IP behind a proxy (e.g. "CF-Connecting-IP")
    client_ip_header: Optional[str] = None

    # Short name generation
    short_name_length: int = 8
    short_name_max_retries: int = 5

    # Visit recording (fire-and-forget pool)
    visit_recorder_workers: int = 4
    visit_recorder_shutdown_timeout: float = 2.0

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process and shared by reference."""
    return Settings()


settings = get_settings()
