# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./tickets.db")
    APP_NAME: str = "Ticket Board API"
    APP_DESC: str = "Single-board ticket tracker with ordered workflow steps"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # CORS origins, comma separated ("*" when unset)
    CORS_ORIGINS: str | None = None

    # Board client
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 10.0
    NOTES_DEBOUNCE_SECONDS: float = Field(default=0.4, ge=0)
    SEQUENTIAL_NUMBERING: bool = False
    RANDOM_NUMBER_ATTEMPTS: int = Field(default=500, ge=1)
    ROLLBACK_ON_FAILURE: bool = False

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
