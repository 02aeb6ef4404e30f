from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Full URL wins over the individual DB_* parts when present
    database_url: str | None = Field(default=None, alias="DATABASE_URL")

    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_name: str = Field(default="clm_automation", alias="DB_NAME")
    db_user: str = Field(default="clm_admin", alias="DB_USER")
    db_password: str = Field(default="clm123", alias="DB_PASSWORD")

    # Connection pool
    db_pool_size: int = Field(default=20, alias="DB_POOL_SIZE")
    db_pool_timeout: int = Field(default=5, alias="DB_POOL_TIMEOUT")
    db_pool_recycle: int = Field(default=30, alias="DB_POOL_RECYCLE")

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")

    # Frontend origin allowed by CORS
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    @field_validator("database_url", "frontend_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @property
    def sqlalchemy_url(self) -> str:
        """Database URL with the psycopg3 driver selected for PostgreSQL."""
        url = self.database_url or (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )
        return normalize_database_url(url)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


def normalize_database_url(url: str) -> str:
    """Normalize PostgreSQL URL to use psycopg3 driver. SQLite URLs pass through."""
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


settings = Settings()
