"""
Configuration settings for the TaskFlow API.
All sensitive values are loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional


# Fallback used only when TOKEN_SECRET is not provided. Refused in production.
INSECURE_TOKEN_SECRET = "taskflow-dev-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "TaskFlow API"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False)
    environment: str = Field(default="development")
    api_prefix: str = Field(default="/api")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    cors_origins: List[str] = Field(default=["*"])

    # Database (PostgreSQL in deployment, SQLite for local runs and tests)
    database_url: str = Field(default="postgresql://localhost:5432/taskflow")
    database_echo: bool = Field(default=False)
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(default=30)
    db_pool_recycle: int = Field(default=3600)

    # Auth
    token_secret: str = Field(default=INSECURE_TOKEN_SECRET)
    token_ttl_days: int = Field(default=30)
    bcrypt_rounds: int = Field(default=10)

    # Encryption of stored bot tokens (Fernet key, optional)
    encryption_key: Optional[str] = Field(default=None)

    # Telegram
    telegram_api_base: str = Field(default="https://api.telegram.org")
    telegram_timeout_seconds: float = Field(default=30.0)
    timezone: str = Field(default="Europe/Moscow")

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    auth_rate_limit: str = Field(default="10/minute")
    rate_limit_storage_uri: str = Field(default="memory://")
    # Only enable behind a proxy that overwrites X-Forwarded-For
    trust_forwarded_for: bool = Field(default=False)

    @property
    def uses_insecure_token_secret(self) -> bool:
        return self.token_secret == INSECURE_TOKEN_SECRET


# Global settings instance
settings = Settings()