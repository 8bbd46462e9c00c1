"""Application settings loaded from environment with safe fallbacks.

Environment precedence:
- Loads `.env` from the repo root before reading process env vars.
- Most values are pulled straight from env; booleans go through `_env_flag` so `"0"/"false"` work.
- CORS is normalized from `CORS_ORIGINS` (comma-separated) with the local frontend origins as default.

Key expectations (defaults in parentheses):
- `APP_ENV` controls settings class selection (`production` default).
- Database: `DATABASE_URL` or component parts (`DATABASE_*`), with `_test` suffix enforced in tests.
- Tokens: `SECRET_KEY` signs JWTs with `ALGORITHM` (HS256); a missing key falls back to a
  random per-process key and logs a warning.
- Uploads: `UPLOADS_ROOT` (repo-relative `uploads`), `MAX_UPLOAD_BYTES` (5 MiB).
"""

import logging
import os
import secrets
from pathlib import Path
from typing import ClassVar, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# (__file__ is app/core/config/settings.py, so we need to traverse three levels up)
BASE_DIR = Path(__file__).resolve().parents[3]


load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:4200",
    "http://localhost:5500",
    "http://127.0.0.1:5500",
    "http://localhost:3000",
]


def _env_flag(name: str, *, default: Optional[bool] = False) -> Optional[bool]:
    """
    Helper to parse boolean-like environment variables.
    """
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Behavior highlights:
    - Loads `.env` at repo root, then lets process env override.
    - Enforces safe DB URLs (prefers `DATABASE_URL`, ensures `_test` suffix for test DBs).
    - CORS origins normalized once to avoid mutation side effects in settings instances.
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: Optional[str] = os.getenv("DATABASE_URL")
    test_database_url: Optional[str] = os.getenv("TEST_DATABASE_URL")
    database_hostname: Optional[str] = os.getenv("DATABASE_HOSTNAME")
    database_port: str = os.getenv("DATABASE_PORT", "5432")
    database_password: Optional[str] = os.getenv("DATABASE_PASSWORD")
    database_name: Optional[str] = os.getenv("DATABASE_NAME")
    database_username: Optional[str] = os.getenv("DATABASE_USERNAME")
    database_ssl_mode: Optional[str] = os.getenv("DATABASE_SSL_MODE")
    environment: str = os.getenv("APP_ENV", "production")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: Optional[str] = os.getenv("LOG_DIR")
    use_json_logs: bool = bool(_env_flag("USE_JSON_LOGS", default=False))
    # Accept raw string from env to avoid JSON parse errors; we normalize to list in __init__
    cors_origins: Optional[str] = None
    SITE_NAME: str = os.getenv("SITE_NAME", "Restaurant Reviews API")

    secret_key: Optional[str] = os.getenv("SECRET_KEY")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

    uploads_root: str = os.getenv("UPLOADS_ROOT", str(BASE_DIR / "uploads"))
    uploads_cache_control: Optional[str] = os.getenv(
        "UPLOADS_CACHE_CONTROL", "public, max-age=3600"
    )
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", 5 * 1024 * 1024))
    allowed_image_types: list[str] = ["image/jpeg", "image/png"]

    rate_limit_enabled: bool = bool(_env_flag("RATE_LIMIT_ENABLED", default=True))
    rate_limit_default: str = os.getenv("RATE_LIMIT_DEFAULT", "300/minute")
    rate_limit_login: str = os.getenv("RATE_LIMIT_LOGIN", "6/minute")
    rate_limit_register: str = os.getenv("RATE_LIMIT_REGISTER", "10/hour")
    rate_limit_vote: str = os.getenv("RATE_LIMIT_VOTE", "60/minute")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        env_override = os.getenv("APP_ENV")
        if env_override:
            object.__setattr__(self, "environment", env_override)

        if not self.secret_key:
            logger.warning(
                "SECRET_KEY is not set; using a random per-process key. "
                "Issued tokens will not survive a restart."
            )
            object.__setattr__(self, "secret_key", secrets.token_urlsafe(48))

        cors_raw = self.cors_origins or os.getenv("CORS_ORIGINS")
        if isinstance(cors_raw, list):
            origins = cors_raw
        elif cors_raw:
            origins = [
                origin.strip() for origin in cors_raw.split(",") if origin.strip()
            ]
        else:
            origins = list(DEFAULT_CORS_ORIGINS)
        object.__setattr__(self, "cors_origins", origins)

    def get_database_url(self, *, use_test: bool = False) -> str:
        """Resolve the SQLAlchemy database URL for runtime or tests.

        Priority: explicit `DATABASE_URL` (or `_test` variant when requested),
        then composed Postgres parts, then `TEST_DATABASE_URL`, finally sqlite fallback.
        Enforces dedicated test DB names to avoid destructive writes to prod data.
        """
        if use_test:
            test_url = self._resolve_test_database_url()
            if test_url.startswith("sqlite"):
                return test_url
            if "_test" not in test_url:
                raise ValueError(
                    "Test database URL must point to a dedicated test database (contains '_test')."
                )
            return test_url

        if self.database_url:
            return self.database_url

        if (
            self.database_hostname
            and self.database_username
            and self.database_password
            and self.database_name
        ):
            return self._compose_postgres_url(self.database_name)

        if self.test_database_url:
            return self.test_database_url

        return f"sqlite:///{BASE_DIR / 'reviews.db'}"

    def _compose_postgres_url(self, db_name: str) -> str:
        base_url = (
            f"postgresql+psycopg2://{self.database_username}:{self.database_password}"
            f"@{self.database_hostname}:{self.database_port}/{db_name}"
        )
        if self.database_ssl_mode:
            return f"{base_url}?sslmode={self.database_ssl_mode}"
        return base_url

    def _resolve_test_database_url(self) -> str:
        """
        Build a test database URL.
        Priority:
        1) Explicit TEST_DATABASE_URL env.
        2) Derive from DATABASE_URL with a *_test suffix (or reuse sqlite).
        3) Derive from Postgres components with a *_test suffix.
        4) Fallback to sqlite for ad-hoc local runs.
        """
        if self.test_database_url:
            return self.test_database_url

        if self.database_url:
            from sqlalchemy.engine import make_url

            url = make_url(self.database_url)
            if url.drivername.startswith("sqlite"):
                return str(url)
            db_name = url.database or ""
            suffix_name = db_name if db_name.endswith("_test") else f"{db_name}_test"
            return url.set(database=suffix_name).render_as_string(hide_password=False)

        if (
            self.database_hostname
            and self.database_username
            and self.database_password
            and self.database_name
        ):
            return self._compose_postgres_url(f"{self.database_name}_test")

        return "sqlite:///./test.db"

    @property
    def uploads_dir(self) -> Path:
        path = Path(self.uploads_root)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path
