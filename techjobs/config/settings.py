from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """
    Configuration settings for the ingestion pipeline.
    Values come from the environment or a .env file at the project root.
    """

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Browser settings
    HEADLESS: bool = True
    # Some networks break TLS verification on job boards' CDNs; navigation
    # should keep going rather than fail the whole source.
    IGNORE_HTTPS_ERRORS: bool = True
    LOCALE: str = "en-GB"
    TIMEZONE_ID: str = "Europe/London"

    # Timeouts
    LISTING_TIMEOUT: int = 60000  # ms, search results page
    DETAIL_TIMEOUT: int = 30000  # ms, job detail page
    SELECTOR_TIMEOUT: int = 15000  # ms, waiting for listing containers

    # Retries (search page navigation only)
    MAX_RETRIES: int = 2
    RETRY_BASE_DELAY: float = 5.0  # seconds
    RETRY_MAX_DELAY: float = 10.0  # seconds

    # Politeness
    REQUEST_DELAY: float = 2.0  # seconds between listings
    MAX_LISTINGS: int = 15

    # Diagnostics
    DEBUG_DIR: Path = BASE_DIR / "debug"

    # Storage
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'techjobs.db'}"

    # Search cache
    CACHE_ENABLED: bool = True
    CACHE_TTL: int = 3600  # seconds
    CACHE_PREFIX: str = "jobs:"
    CACHE_MAX_ENTRIES: int = 500

    # Scheduling (crontab syntax, evaluated in TIMEZONE_ID)
    CRON_SCHEDULE: str = "0 0 * * *"

    LOG_LEVEL: str = "INFO"


settings = Settings()
