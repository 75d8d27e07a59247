from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Daily Briefing Service"
    DEBUG: bool = False

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    # Cache settings
    CACHE_TTL: int = 3600  # seconds

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Outbound HTTP
    HTTP_TIMEOUT: float = 10.0  # seconds

    # Weather provider (OpenWeatherMap)
    WEATHER_API_KEY: Optional[str] = None
    WEATHER_API_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    WEATHER_LOCATION: str = "Los Angeles,US"
    WEATHER_UNITS: str = "imperial"

    # Stock quote provider (Alpha Vantage)
    STOCK_API_KEY: Optional[str] = None
    STOCK_API_URL: str = "https://www.alphavantage.co/query"
    STOCK_CALLS_PER_MINUTE: int = 5

    # News search (Anthropic Messages API with web search)
    NEWS_MODEL: str = "claude-sonnet-4-20250514"
    NEWS_MAX_TOKENS: int = 4000
    NEWS_TIMEOUT: float = 120.0
    NEWS_FALLBACK_POLICY: str = "placeholder"

    # Google Calendar
    GOOGLE_CREDENTIALS: Optional[str] = None
    CALENDAR_ID: str = "primary"
    CALENDAR_MAX_RESULTS: int = 50
    FREE_TIME_WINDOW_DAYS: int = 7

    @field_validator("NEWS_FALLBACK_POLICY")
    @classmethod
    def check_fallback_policy(cls, v: str) -> str:
        """Only 'placeholder' and 'error' are understood by the news adaptor."""
        v = v.strip().lower()
        if v not in ("placeholder", "error"):
            raise ValueError(f"Unsupported news fallback policy: {v}")
        return v

    @field_validator("STOCK_CALLS_PER_MINUTE")
    @classmethod
    def check_calls_per_minute(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("STOCK_CALLS_PER_MINUTE must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
