"""
Configuration Management for Farm Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The store itself only needs a storage key and a data directory; the
insights agent needs Gemini credentials. Both are validated on first use.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_KEY = "agri-finance-pro-data"


class StoreSettings(BaseSettings):
    """Local state store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FARMLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Key under which the whole app state is persisted"
    )
    data_dir: Path = Field(
        default=Path(".farmledger"),
        description="Directory used by the file storage backend"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for structured logs"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (False renders for the console)"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any casing, reject unknown levels."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration for financial insights."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=64,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )

    # Retry policy for the generate call
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts before falling back to the no-data message"
    )
    retry_wait_min: float = Field(
        default=2.0,
        ge=0.0,
        description="Minimum seconds between attempts"
    )
    retry_wait_max: float = Field(
        default=10.0,
        ge=0.0,
        description="Maximum seconds between attempts"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the store works without Gemini keys

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    "<name>_error" entry for each failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.store
        results["store"] = True
    except Exception as e:
        results["store"] = False
        results["store_error"] = str(e)

    try:
        _ = settings.gemini
        results["gemini"] = True
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    return results
