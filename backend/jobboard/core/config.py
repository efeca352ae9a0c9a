"""Core configuration module."""

import json

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        case_sensitive=False,
        extra="ignore",
    )

    # API
    api_title: str = "Job Board API"
    api_version: str = "0.1.0"
    api_prefix: str = "/api/v1"
    environment: str = "development"
    testing: bool = False
    public_base_url: str = "http://localhost:8000"

    # Security
    secret_key: str = "change-me-in-production-use-openssl-rand-hex-32"
    algorithm: str = "HS256"
    jwt_expires_days: int = 7
    cookie_expires_days: int = 7
    reset_token_expire_minutes: int = 30

    # Default admin account (never seeded in production)
    seed_default_data: bool = True
    admin_default_email: str = "admin@jobboard.local"
    admin_default_password: str = "Admin123!"

    # Database
    database_url: str = "sqlite:///./jobboard.db"
    database_echo: bool = False

    # Rate limiting
    rate_limit: str = "100/10minutes"
    rate_limit_storage_uri: str = "memory://"

    # Resume uploads
    file_upload_path: str = "./public/uploads"
    max_file_size: int = 2 * 1024 * 1024

    # SMTP
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_start_tls: bool = True
    smtp_timeout: float = 30.0
    smtp_from_name: str = "Jobbee"
    smtp_from_email: str = "noreply@jobbee.local"

    # Geocoding (MapQuest compatible)
    geocoder_url: str = "https://www.mapquestapi.com/geocoding/v1/address"
    geocoder_api_key: str = ""
    geocoder_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_format: str | None = None  # "json", "console", or None (auto-detect based on environment)

    # CORS
    cors_origins: list[str] | str = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        """Accept a comma-separated string or a JSON list."""
        if not value:
            return []
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except ValueError as exc:
                raise ValueError(f"CORS_ORIGINS is not a valid JSON list: {exc}") from exc
            return [str(origin).strip() for origin in parsed]
        return [origin.strip() for origin in text.split(",") if origin.strip()]

    @field_validator("cors_origins", mode="after")
    @classmethod
    def check_origin_format(cls, value: list[str]) -> list[str]:
        for origin in value:
            if origin == "*":
                continue
            if not origin.startswith(("http://", "https://")) or " " in origin:
                raise ValueError(
                    f"Invalid CORS origin '{origin}': must start with http:// or https://"
                    " and contain no spaces"
                )
        return value

    @field_validator("max_file_size")
    @classmethod
    def positive_file_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("MAX_FILE_SIZE must be a positive number of bytes")
        return value

    @model_validator(mode="after")
    def check_production_guards(self) -> "Settings":
        """Refuse development placeholders when ENVIRONMENT=production."""
        if not self.is_production:
            return self
        if self.secret_key.startswith("change-me"):
            raise ValueError("SECRET_KEY must be set via environment for production")
        if not self.cors_origins:
            raise ValueError(
                "CORS_ORIGINS must be configured for production deployments "
                "(comma-separated list of allowed origins)"
            )
        if "*" in self.cors_origins:
            raise ValueError("Wildcard '*' CORS origin is not allowed in production")
        return self


settings = Settings()
