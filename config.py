"""
Configuration management for the transaction ledger.
Uses pydantic-settings for type-safe, centralized configuration.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'  # Allow extra fields in .env for flexibility
    )

    # Database
    database_url: str = "sqlite:///ledger.db"
    db_echo: bool = False
    db_timeout_seconds: float = 5.0

    # Cache (in-process memory cache when cache_url is unset)
    cache_url: Optional[str] = None
    cache_ttl_seconds: int = 10 * 60
    cache_timeout_seconds: float = 0.5

    # Logging
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def is_redis_configured(self) -> bool:
        """Check if a shared Redis cache should be used."""
        return bool(self.cache_url)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
