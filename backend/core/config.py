"""Application settings loaded from the environment."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = "local"
    port: int = 3002
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cidboard.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_CONNECT"),
    )
    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        validation_alias=AliasChoices("JWT_SECRET", "JWT_SECRET_KEY"),
    )
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    cors_allow_origins: list[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_local(self) -> bool:
        return self.app_env.strip().lower() in {"local", "test"}

    def require_production_secret(self) -> None:
        """Refuse to run outside local/test with the placeholder signing key."""
        if not self.is_local and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set when APP_ENV is not local")


settings = Settings()
