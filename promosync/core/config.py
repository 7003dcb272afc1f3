"""
Application configuration settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Project metadata
    PROJECT_NAME: str = "PromoSync"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database - SQLite locally, Postgres (asyncpg) in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./promosync.db"
    DB_ECHO: bool = False
    # Hosted Postgres often serves a self-signed chain
    DB_SSL_VERIFY: bool = False

    # CORS - dashboard origins
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
        "https://goldstargamingtv-droid.github.io",
    ]

    # Plans
    DEFAULT_TIER: str = "free"

    # Rate calculator history shown to the user
    SAVED_RATES_LIMIT: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
