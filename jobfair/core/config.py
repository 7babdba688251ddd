"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "jobfair_user"
    postgres_password: str = "password"
    postgres_db: str = "jobfair_db"

    # Full SQLAlchemy URL, overrides the postgres_* pieces when set
    database_url: str = ""

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Bulk assignment
    bulk_assign_batch_size: int = 10
    bulk_assign_batch_delay_seconds: float = 0.1

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    # App
    debug: bool = False
    auto_create_schema: bool = False

    @property
    def postgres_url(self) -> str:
        """Construct the database connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.postgres_url.startswith("sqlite")

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
