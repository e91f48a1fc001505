import os
import secrets
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "WatchTrack Playback API"
    API_V1_STR: str = "/api/v1"
    FRONTEND_URL: str = Field(
        "http://localhost:3000",
        description="Frontend application URL, allowed by CORS"
    )

    # MongoDB Configuration
    MONGODB_URI: str = Field(
        "mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    MONGODB_DB_NAME: str = Field(
        "watchtrack",
        description="MongoDB database name"
    )
    MONGODB_POOL_SIZE: int = 10
    MONGODB_CONNECT_TIMEOUT_MS: int = 5000
    MONGODB_SOCKET_TIMEOUT_MS: int = 10000

    @field_validator("MONGODB_URI")
    @classmethod
    def validate_mongodb_uri(cls, v):
        if not v.startswith("mongodb://") and not v.startswith("mongodb+srv://"):
            raise ValueError("MongoDB URI must start with mongodb:// or mongodb+srv://")
        return v

    # Redis Configuration
    REDIS_URL: str = Field(
        "redis://localhost:6379/0",
        description="Full Redis connection URL including credentials"
    )
    REDIS_TIMEOUT: int = 5
    HOME_FEED_CACHE_TTL: int = Field(
        120,
        description="Seconds the shared home feed rows stay cached"
    )

    # Security
    SECRET_KEY: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        min_length=32
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # API Configuration
    API_RATE_LIMIT: str = "120/minute"

    # Accounts & profiles
    MAX_PROFILES_PER_ACCOUNT: int = 5
    DEFAULT_AVATAR_URL: str = "https://res.cloudinary.com/demo/image/upload/avatar-default.png"

    # Playback
    PLAYBACK_ERROR_HISTORY_LIMIT: int = Field(
        50,
        description="Most recent playback errors kept on a session"
    )
    DEFAULT_CDN: str = "cloudflare"

    # Discovery
    DISCOVERY_DEFAULT_LIMIT: int = 10
    RELATED_WATCHLIST_CAP_PER_TYPE: int = 5
    CONTINUE_WATCHING_LIMIT: int = 10
    HOME_FEED_GENRES: List[str] = ["Action", "Comedy"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        # Set env_file only if it exists to avoid warnings
        env_file=".env" if os.path.isfile(".env") else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        validate_assignment=True,
    )


settings = Settings()
