# meeting_governance/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings drive:
    - DB connection
    - Logging mode and level
    - Open-meetings notice rules (lead time, holidays, jurisdiction timezone)
    - The optional notice publication endpoint
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Meeting Governance Engine"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")
    LOG_LEVEL: str = Field("INFO", description="Standard logging level name.")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./meeting_governance.db",
        description="SQLAlchemy-compatible async database URL",
    )

    # --- Open-meetings notice rules ---
    NOTICE_LEAD_TIME_HOURS: int = Field(
        default=48,
        ge=0,
        description=(
            "Default number of business hours of advance notice required for "
            "regular, special and executive-only meetings. Governing bodies and "
            "individual meetings may override it."
        ),
    )
    JURISDICTION_TIMEZONE: str = Field(
        default="America/Indiana/Indianapolis",
        description=(
            "IANA timezone used to decide which calendar date a UTC instant "
            "falls on when classifying weekends and holidays."
        ),
    )
    HOLIDAY_CALENDAR: str = Field(
        default="indiana",
        description="Built-in holiday calendar: 'indiana' or 'none'.",
    )
    EXTRA_HOLIDAYS: str | None = Field(
        default=None,
        description="Comma-separated list of additional holiday dates (YYYY-MM-DD).",
    )

    # --- Notice publication ---
    NOTICE_PUBLICATION_URL: AnyHttpUrl | None = Field(
        default=None,
        description=(
            "Endpoint that receives public notice artifacts after a notice "
            "posting is recorded. Publication is skipped when unset."
        ),
    )
    NOTICE_PUBLICATION_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout applied to the notice publication HTTP call.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
