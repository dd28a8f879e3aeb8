"""
Library configuration.

Centralized configuration management with environment variables.
Every setting can be overridden with a ``FUZZYNUM_`` prefixed variable
or from a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings"""

    model_config = SettingsConfigDict(
        env_prefix="FUZZYNUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "fuzzynum"
    APP_VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None

    # Comparison
    DEFAULT_CONFIDENCE: float = 0.5
    FUZZ_EPSILON: float = 1e-17

    # Series evaluation
    SERIES_EPSILON: float = 1e-15
    SERIES_MAX_TERMS: int = 1000
    SERIES_CONVERGENCE_RATE: float = 0.001

    # Relative fuzz attached to results that had to be rounded to a double
    DOUBLE_PRECISION: float = 2.0 ** -53


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
