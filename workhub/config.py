"""Configuration management using pydantic-settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings
    db_server: str = "localhost"
    db_name: str = "workhub"
    db_user: str = "workhub"
    db_password: str = ""
    db_port: int = 5432
    db_pool_size: int = 20
    db_max_overflow: int = 40
    sql_echo: bool = False

    # Full SQLAlchemy URL, takes precedence over the db_* parts
    # Example: "sqlite+aiosqlite:///./workhub.db" for local development
    database_url_override: Optional[str] = None

    # JWT settings
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 1440

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Workspace join codes
    invite_code_length: int = 6

    @property
    def database_url(self) -> str:
        """Build PostgreSQL async connection string."""
        if self.database_url_override:
            return self.database_url_override
        from urllib.parse import quote_plus
        return (
            f"postgresql+asyncpg://{self.db_user}:{quote_plus(self.db_password)}"
            f"@{self.db_server}:{self.db_port}/{self.db_name}"
        )

    @property
    def sync_database_url(self) -> str:
        """Build PostgreSQL sync connection string for Alembic."""
        if self.database_url_override:
            return self.database_url_override.replace("+aiosqlite", "").replace(
                "+asyncpg", "+psycopg2"
            )
        from urllib.parse import quote_plus
        return (
            f"postgresql+psycopg2://{self.db_user}:{quote_plus(self.db_password)}"
            f"@{self.db_server}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_postgres(self) -> bool:
        """Whether the configured database is PostgreSQL."""
        return self.database_url.startswith("postgresql")


# Global settings instance
settings = Settings()
