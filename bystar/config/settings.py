"""Environment configuration and validation.

This module defines strongly-typed library settings loaded from environment variables (optionally via
a local `.env` file).

It enforces the invariants finders rely on, such as locking the DB session timezone to UTC so range
boundaries compare deterministically.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bystar.temporal.schema import DEFAULT_FIELD, IDENTIFIER_RE


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_timezone: str = Field(default="UTC", alias="DB_TIMEZONE")

    default_field: str = Field(default=DEFAULT_FIELD, alias="BYSTAR_DEFAULT_FIELD")
    languages: str = Field(default="en", alias="BYSTAR_LANGUAGES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("db_timezone")
    @classmethod
    def validate_db_timezone_is_utc(cls, value: str) -> str:
        """Validate that the DB timezone is locked to UTC.

        Boundary pairs are UTC instants; any other session timezone would shift `timestamp`
        comparisons, so it is rejected at startup.
        """

        if value.upper() != "UTC":
            raise ValueError("DB_TIMEZONE must be UTC")
        return "UTC"

    @field_validator("default_field")
    @classmethod
    def validate_default_field(cls, value: str) -> str:
        if not IDENTIFIER_RE.match(value.strip()):
            raise ValueError("BYSTAR_DEFAULT_FIELD must be a plain column name")
        return value.strip()

    @property
    def language_list(self) -> tuple[str, ...]:
        """dateparser languages, e.g. `"en,de"` -> `("en", "de")`."""

        return tuple(lang.strip() for lang in self.languages.split(",") if lang.strip()) or ("en",)


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
