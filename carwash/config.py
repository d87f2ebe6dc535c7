"""
Configuration settings for the CaX car wash admin.
Values come from the environment or a .env file.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "CaX Car Wash"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend API
    api_url: str = "http://localhost:5000/api"
    api_asset_url: str = "http://localhost:5000"
    api_timeout_seconds: float = 15.0

    # Web sessions
    database_url: str = "sqlite+aiosqlite:///./carwash_sessions.db"
    session_cookie_name: str = "carwash_session"
    session_ttl_minutes: int = 1440  # 24 hours
    secure_cookies: bool = False

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "http://localhost:8000/auth/google/callback"

    # Pages
    activities_per_page: int = 10

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
