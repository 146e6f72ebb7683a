"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """SQLite price table location."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    path: str = "data/pricing.db"


class CacheSettings(BaseSettings):
    """Repository query cache.

    Entries expire a fixed time after they are written. A TTL of 0 turns
    caching off and every request reads the database.
    """

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    ttl_seconds: float = 1.0


class SeedSettings(BaseSettings):
    """One-time load of the price table from a CSV extract.

    The extract holds several price dates; a single date is loaded. When
    price_date is unset one of the dates in the file is chosen at random.
    """

    model_config = SettingsConfigDict(env_prefix="SEED_")

    enabled: bool = True
    data_file: str = "data/prices.csv.gz"
    price_date: str | None = None  # ISO date, e.g. "2024-01-02"


class ServerSettings(BaseSettings):
    """HTTP server bind settings."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8083


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
