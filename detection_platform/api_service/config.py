"""
Configuration management for the detection platform API service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """API service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 0
    DB_POOL_TIMEOUT: int = 2
    DB_ECHO: bool = False

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    # Credential authority
    AUTH_SECRET: str = "change-this-secret-in-prod"
    AUTH_TOKEN_ALGORITHM: str = "HS256"
    SESSION_EXPIRES_IN_DAYS: int = 7

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


# Global settings instance
settings = Settings()
