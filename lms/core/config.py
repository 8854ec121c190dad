"""LMS settings from the environment and an optional .env file (pydantic-settings).

DATABASE_URL and SECRET_KEY are required; everything else has a development
default. Validation happens on the first get_settings() call.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = frozenset({"local", "s3"})


class Settings(BaseSettings):
    """Environment-driven configuration. Field names map to upper-case env vars."""

    # App
    app_name: str = "lms"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (PostgreSQL via asyncpg; schema managed by Alembic)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_command_timeout: int = 60

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 5
    refresh_token_expire_days: int = 3
    activation_token_expire_minutes: int = 5
    oauth_state_expire_minutes: int = 10
    cookie_secure: bool = False
    cookie_samesite: str = "lax"

    # CORS / client redirects
    allowed_origins: str = "http://localhost:3000"
    client_base_url: str = "http://localhost:3000"

    # Image storage
    storage_backend: str = "local"
    storage_root: str = "/var/lms/storage"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    max_upload_size: int = 10 * 1024 * 1024  # 10MB

    # Outbound mail (SMTP). Mail is skipped with a warning when smtp_host is unset.
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: SecretStr | None = None
    smtp_use_tls: bool = True
    smtp_from_email: str = "no-reply@localhost"
    smtp_from_name: str = "LMS"

    # OAuth identity providers (login with Google / GitHub)
    google_client_id: str | None = None
    google_client_secret: SecretStr | None = None
    github_client_id: str | None = None
    github_client_secret: SecretStr | None = None
    oauth_redirect_base_url: str = "http://localhost:8000/api/v1/user/auth"

    # Notifications: read notifications older than this are purged by scripts/purge_read_notifications.py
    notification_retention_days: int = 30

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # Redis Cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def check_required(self) -> "Settings":
        """Fail fast on missing secrets and on an unusable storage backend."""
        missing = [
            name
            for name, value in (
                ("DATABASE_URL", self.database_url),
                ("SECRET_KEY", self.secret_key.get_secret_value()),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {sorted(STORAGE_BACKENDS)}, "
                f"got '{self.storage_backend}'"
            )
        if self.storage_backend == "s3" and not self.s3_bucket:
            raise ValueError("S3_BUCKET is required when STORAGE_BACKEND is 's3'")
        return self

    @property
    def smtp_configured(self) -> bool:
        """True when an SMTP host is set (mail is otherwise skipped)."""
        return bool(self.smtp_host)


@lru_cache
def get_settings() -> Settings:
    """Settings singleton. Tests call get_settings.cache_clear() after changing env vars."""
    return Settings()
