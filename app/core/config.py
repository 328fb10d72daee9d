"""
Application configuration.

Settings are read from the environment once at startup and handed to the
rest of the application through FastAPI dependencies (see ``get_settings``).
"""

import logging
import os
import re
import secrets
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Base directory of the project (parent of 'app')
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Database Directory
DB_DIR = BASE_DIR / "db"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


class ConfigurationError(RuntimeError):
    """Raised when the process environment cannot produce valid settings."""


def parse_duration(value: str) -> timedelta:
    """
    Parse a short duration string such as ``7d``, ``12h``, ``30m`` or ``3600``.

    A bare number is interpreted as seconds.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings(BaseModel):
    """Process-wide, read-only configuration."""

    model_config = ConfigDict(frozen=True)

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = f"sqlite+aiosqlite:///{DB_DIR / 'endevera.db'}"
    database_timeout: float = 5.0
    sql_debug: bool = False

    # Session tokens
    jwt_secret_key: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(days=7)
    token_issuer: str = "endevera-api"

    # Argon2id cost
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4

    # Investor onboarding
    require_approval_token: bool = True
    approval_token_ttl: timedelta = timedelta(days=14)

    # HTTP
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    # Chat proxy
    anthropic_api_key: Optional[str] = None
    anthropic_api_url: str = "https://api.anthropic.com"
    chat_model: str = "claude-sonnet-4-20250514"
    chat_max_tokens: int = 1000
    chat_timeout: float = 60.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        environment = os.getenv("ENVIRONMENT", "development").strip().lower()

        secret = os.getenv("JWT_SECRET_KEY")
        if not secret:
            if environment == "production":
                raise ConfigurationError(
                    "JWT_SECRET_KEY environment variable is required in production. "
                    "Generate a secure key with: openssl rand -hex 32"
                )
            # Tokens issued with a generated key do not survive a restart
            secret = secrets.token_urlsafe(32)
            logger.warning("Using auto-generated JWT_SECRET_KEY. Set JWT_SECRET_KEY in production!")

        try:
            return cls(
                environment=environment,
                debug=_env_bool("DEBUG"),
                log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
                database_url=os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DB_DIR / 'endevera.db'}"),
                database_timeout=float(os.getenv("DATABASE_TIMEOUT", "5")),
                sql_debug=_env_bool("SQL_DEBUG"),
                jwt_secret_key=secret,
                token_ttl=parse_duration(os.getenv("JWT_EXPIRES_IN", "7d")),
                token_issuer=os.getenv("TOKEN_ISSUER", "endevera-api"),
                password_time_cost=int(os.getenv("PASSWORD_TIME_COST", "3")),
                password_memory_cost=int(os.getenv("PASSWORD_MEMORY_COST", "65536")),
                password_parallelism=int(os.getenv("PASSWORD_PARALLELISM", "4")),
                require_approval_token=_env_bool("REQUIRE_APPROVAL_TOKEN", "true"),
                approval_token_ttl=timedelta(days=int(os.getenv("APPROVAL_TOKEN_EXPIRE_DAYS", "14"))),
                cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", "*"),
                trusted_hosts=_env_list("TRUSTED_HOSTS", "localhost,127.0.0.1"),
                anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
                anthropic_api_url=os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com"),
                chat_model=os.getenv("CHAT_MODEL", "claude-sonnet-4-20250514"),
                chat_max_tokens=int(os.getenv("CHAT_MAX_TOKENS", "1000")),
                chat_timeout=float(os.getenv("CHAT_TIMEOUT", "60")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Dependency returning the process settings (built on first use)."""
    return Settings.from_env()
