from typing import Optional, List
from urllib.parse import urlsplit

from pydantic import computed_field, Field, AliasChoices, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Known insecure default values that must be changed in production
_INSECURE_SECRET_KEYS = {
    "your-secret-key-change-this-in-production-min-32-chars",
    "changeme",
    "secret",
    "development-secret",
}
_INSECURE_DB_PASSWORDS = {
    "postgres",
    "password",
    "changeme",
}

_INSECURE_ALLOWED_ORIGINS_DEFAULTS = {
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
}


def _extract_password_from_database_url(database_url: str | None) -> str | None:
    if not database_url:
        return None
    try:
        return urlsplit(database_url).password
    except ValueError:
        return None


class Settings(BaseSettings):
    # Allow comma-separated env vars for list fields like ALLOWED_ORIGINS
    model_config = SettingsConfigDict(env_file=".env", env_parse_delimiter=",", extra="ignore")
    PROJECT_NAME: str = "HRIS"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # CORS
    # Accepts either a JSON array or a comma-separated string, normalized below.
    ALLOWED_ORIGINS: List[str] | str = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        validation_alias=AliasChoices("ALLOWED_ORIGINS", "BACKEND_CORS_ORIGINS"),
    )

    # Database settings
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = Field(
        default="db",
        validation_alias=AliasChoices("POSTGRES_SERVER", "POSTGRES_HOST", "POSTGRES_HOSTNAME"),
    )
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "hris"

    DB_POOL_SIZE: int = Field(default=20, description="Number of persistent DB connections")
    DB_MAX_OVERFLOW: int = Field(default=40, description="Max additional connections under load")

    # Full DB URL (preferred in CI/containers). If not provided, we build it from POSTGRES_*.
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "SQLALCHEMY_DATABASE_URI"),
    )

    SQLALCHEMY_ECHO: bool = False

    # Security settings
    SECRET_KEY: str = Field(
        default="your-secret-key-change-this-in-production-min-32-chars",
        validation_alias=AliasChoices("JWT_SECRET_KEY", "SECRET_KEY"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30

    # Password policy
    MIN_PASSWORD_LENGTH: int = 8
    REQUIRE_SPECIAL_CHARS: bool = False

    # Login lockout
    LOGIN_MAX_ATTEMPTS: int = 5
    LOGIN_LOCKOUT_MINUTES: int = 15
    LOGIN_ATTEMPT_WINDOW_MINUTES: int = 15

    # Redis (token blacklist and rate limiting); in-memory when unset
    REDIS_URL: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "CACHE_REDIS_URL"),
    )

    RATE_LIMIT_ENABLED: bool = True

    # File uploads
    UPLOAD_DIR: str = Field(default="./hris_data/uploads", validation_alias=AliasChoices("UPLOAD_DIR", "HRIS_UPLOAD_DIR"))
    MAX_UPLOAD_SIZE_MB: int = 10
    ALLOWED_UPLOAD_EXTENSIONS: List[str] | str = Field(
        default_factory=lambda: ["pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "jpg", "jpeg", "png"],
    )

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 1000

    # Attendance
    STANDARD_WORK_HOURS: float = 8.0

    @computed_field
    @property
    def COOKIE_SECURE(self) -> bool:
        """Only set secure cookies in production."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def MAX_UPLOAD_SIZE_BYTES(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def model_post_init(self, __context):
        """
        Validate configuration on startup. In production, fail hard if insecure defaults are detected.
        """
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        is_prod = self.ENVIRONMENT.lower() == "production"
        errors = []

        if is_prod and (self.SECRET_KEY in _INSECURE_SECRET_KEYS or len(self.SECRET_KEY) < 32):
            errors.append(
                "SECRET_KEY is insecure. Generate a new key with: "
                "python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )

        db_url_password = _extract_password_from_database_url(self.DATABASE_URL)
        if is_prod and db_url_password in _INSECURE_DB_PASSWORDS:
            errors.append(
                "Database password is insecure. "
                "Set a strong POSTGRES_PASSWORD (or provide DATABASE_URL with a strong password)."
            )

        if is_prod and (not self.ALLOWED_ORIGINS or set(self.ALLOWED_ORIGINS).issubset(_INSECURE_ALLOWED_ORIGINS_DEFAULTS)):
            errors.append(
                "ALLOWED_ORIGINS must be set to your domain(s) in production (not localhost defaults)."
            )

        if is_prod and self.DEBUG:
            errors.append("DEBUG must be False in production.")

        if errors:
            error_msg = "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ValueError(error_msg)

    @field_validator("ALLOWED_ORIGINS", "ALLOWED_UPLOAD_EXTENSIONS", mode="before")
    @classmethod
    def _split_csv(cls, value):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


settings = Settings()
