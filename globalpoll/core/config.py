"""Application configuration, read from the environment and ``.env``."""
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from globalpoll.core import constants
from globalpoll.core.logging_config import get_logger

logger = get_logger(__name__)

INSECURE_SECRET_KEY = "your-secret-key-change-in-production"
SQLITE_FALLBACK_URL = "sqlite:///./globalpoll.db"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_TITLE: str = "Global Poll"
    APP_DESCRIPTION: str = "One yes/no question at a time, with comments and an embeddable widget"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"

    # Either a full URL or the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    DB_POOL_SIZE: int = 5  # ignored for SQLite
    DB_MAX_OVERFLOW: int = 10

    SECRET_KEY: str = INSECURE_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = constants.ACCESS_TOKEN_EXPIRE_MINUTES

    # Seeded when the admins table is empty; the password may be an Argon2 hash
    DEFAULT_ADMIN_USERNAME: str = constants.DEFAULT_ADMIN_USERNAME
    DEFAULT_ADMIN_PASSWORD: str = constants.DEFAULT_ADMIN_PASSWORD

    # Bearer secret for /api/cron and /api/init; unset leaves them open
    CRON_SECRET: Optional[str] = None

    CORS_ORIGINS: Union[List[str], str] = ["*"]

    POLL_DURATION_HOURS: int = constants.POLL_DURATION_HOURS
    STARTUP_TASKS_ENABLED: bool = True
    EXPIRY_SWEEP_INTERVAL_SECONDS: int = 0  # 0 disables the in-process sweeper

    RATE_LIMIT_MAX_REQUESTS: int = constants.RATE_LIMIT_MAX_REQUESTS
    RATE_LIMIT_WINDOW_SECONDS: int = constants.RATE_LIMIT_WINDOW_SECONDS
    RATE_LIMIT_STORAGE_URI: Optional[str] = None  # e.g. redis://localhost:6379/0

    CACHE_TTL_SECONDS: float = 30.0

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value):
        """Accept ``"https://a.example, https://b.example"`` as well as a list."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    def get_database_url(self) -> str:
        """
        Resolve the SQLAlchemy URL.

        DATABASE_URL wins (``postgres://`` is rewritten to the scheme
        SQLAlchemy expects), then the POSTGRES_* parts. Outside production a
        local SQLite file is used when neither is set.
        """
        if self.DATABASE_URL:
            scheme, sep, rest = self.DATABASE_URL.partition("://")
            if scheme == "postgres":
                return f"postgresql{sep}{rest}"
            return self.DATABASE_URL

        parts = (self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_HOST, self.POSTGRES_DB)
        if all(parts):
            return "postgresql://{}:{}@{}:{}/{}".format(
                self.POSTGRES_USER,
                self.POSTGRES_PASSWORD,
                self.POSTGRES_HOST,
                self.POSTGRES_PORT or "5432",
                self.POSTGRES_DB,
            )

        if self.ENVIRONMENT == "production":
            raise ValueError(
                "No database configured: set DATABASE_URL or POSTGRES_USER, "
                "POSTGRES_PASSWORD, POSTGRES_HOST and POSTGRES_DB"
            )
        return SQLITE_FALLBACK_URL

    def validate_production_config(self) -> None:
        """Refuse to start in production with development defaults."""
        if self.ENVIRONMENT != "production":
            return

        problems = []
        if self.SECRET_KEY == INSECURE_SECRET_KEY:
            problems.append("SECRET_KEY is still the development default")
        if self.DEFAULT_ADMIN_PASSWORD == constants.DEFAULT_ADMIN_PASSWORD:
            problems.append("DEFAULT_ADMIN_PASSWORD is still the development default")
        if self.CORS_ORIGINS == ["*"]:
            problems.append("CORS_ORIGINS must list the allowed domains")

        if not self.DEFAULT_ADMIN_PASSWORD.startswith("$argon2"):
            logger.warning(
                "admin_password_not_hashed",
                hint="python hash_password.py 'your-password'",
            )
        if not self.CRON_SECRET:
            logger.warning("cron_secret_unset", endpoints=["/api/cron", "/api/init"])

        if problems:
            raise ValueError("Invalid production configuration: " + "; ".join(problems))


settings = Settings()
