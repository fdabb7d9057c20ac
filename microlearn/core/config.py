"""
Application configuration loaded from the environment (and `.env`).
"""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True)

    # ============= Application Settings =============
    APP_NAME: str = "Micro-Learning API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # ============= Database Settings =============
    DATABASE_URL: str = Field(default="sqlite:///./sqlite.db")
    DATABASE_ECHO: bool = False

    # CORS Settings
    CORS_ORIGINS: str = "*"

    # ============= Quiz / Analytics Settings =============
    DEFAULT_PASSING_SCORE: int = 75
    AT_RISK_THRESHOLD: int = 60
    LEADERBOARD_SIZE: int = 10
    HARDEST_QUESTIONS_LIMIT: int = 5
    RECENT_REFLECTIONS_LIMIT: int = 5

    # ============= Logging Settings =============
    LOG_LEVEL: str = "INFO"

    def cors_origins(self) -> List[str]:
        """Comma-separated CORS_ORIGINS as a list."""
        return [i.strip() for i in self.CORS_ORIGINS.split(",") if i.strip()]

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
