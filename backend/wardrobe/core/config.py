"""
Application configuration management using Pydantic Settings.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Wardrobe Ingestion API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = ""
    STARTUP_TASKS_ENABLED: bool = True

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_STATEMENT_TIMEOUT_MS: int = 10000

    # Redis (sessions + rate limit counters)
    REDIS_URL: str = "redis://localhost:6379/0"
    SESSION_EXPIRY_SECONDS: int = 86400  # 24 hours

    # Storage
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str
    MINIO_SECRET_KEY: str
    MINIO_BUCKET: str = "photos"
    MINIO_SECURE: bool = False
    STORAGE_TIMEOUT_SECONDS: float = 10.0
    # Staged photo removal may outlive an exhausted request budget by this much
    STORAGE_CLEANUP_GRACE_SECONDS: float = 2.0

    # Analysis provider (Google Cloud Vision)
    VISION_TIMEOUT_SECONDS: float = 15.0
    COLOR_MODE: str = "whole_image"  # or "per_item"
    CLOTHING_KEYWORDS: List[str] = [
        "shirt",
        "pants",
        "dress",
        "jacket",
        "shoes",
        "footwear",
        "top",
        "jeans",
        "coat",
        "sweater",
    ]

    # Upload limits
    MAX_UPLOAD_SIZE_BYTES: int = 5 * 1024 * 1024  # 5 MiB
    ALLOWED_IMAGE_TYPES: List[str] = ["image/jpeg", "image/png"]
    MAX_IMAGE_WIDTH: int = 800
    JPEG_QUALITY: int = 90

    # Whole-request budget shared by every remote call
    REQUEST_DEADLINE_SECONDS: float = 30.0

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 900  # 15 minutes
    RATE_LIMIT_MAX_REQUESTS: int = 100


settings = Settings()
