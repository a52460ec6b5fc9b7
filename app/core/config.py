"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Upper bound for MAX_UPLOAD_BYTES (module-level so validators can use it).
MAX_UPLOAD_CEILING_BYTES = 100 * 1024 * 1024

DEFAULT_JWT_SECRET = "change-me-in-production"
DEFAULT_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # Storage: one directory for the JSON documents, one for uploaded files
    DATA_DIR: Path = Path("cms-data")
    UPLOAD_DIR: Path = Path("uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Optional pre-built frontends served as static files
    SITE_DIR: Path | None = None
    ADMIN_BUILD_DIR: Path | None = None

    CORS_ORIGINS: list[str] = ["*"]

    # JWT authentication
    JWT_SECRET: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 24 * 60

    # Account created on first boot when no users file exists
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: SecretStr = SecretStr(DEFAULT_ADMIN_PASSWORD)
    DEFAULT_ADMIN_EMAIL: str = "admin@rahulthakur.dev"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                "LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level

    @field_validator("API_PREFIX", "UPLOAD_URL_PREFIX")
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if not s.startswith("/"):
            raise ValueError("URL prefixes must start with '/' (e.g. /api)")
        return s

    @field_validator("MAX_UPLOAD_BYTES")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        if v < 1 or v > MAX_UPLOAD_CEILING_BYTES:
            raise ValueError(
                f"MAX_UPLOAD_BYTES must be between 1 and {MAX_UPLOAD_CEILING_BYTES}"
            )
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("DEFAULT_ADMIN_USERNAME")
    @classmethod
    def validate_default_admin_username(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DEFAULT_ADMIN_USERNAME must be set and non-empty")
        return v.strip()

    @field_validator("DEFAULT_ADMIN_PASSWORD")
    @classmethod
    def validate_default_admin_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("DEFAULT_ADMIN_PASSWORD must be set and non-empty")
        return v

    def insecure_defaults(self) -> list[str]:
        """Names of secrets still set to their shipped defaults."""
        names = []
        if self.JWT_SECRET.get_secret_value() == DEFAULT_JWT_SECRET:
            names.append("JWT_SECRET")
        if self.DEFAULT_ADMIN_PASSWORD.get_secret_value() == DEFAULT_ADMIN_PASSWORD:
            names.append("DEFAULT_ADMIN_PASSWORD")
        return names


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
