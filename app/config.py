"""Application settings loaded from the environment (and an optional .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv

from app.errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 3000

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def _as_port(value: str | None) -> int:
    if value is None or not value.strip():
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"PORT must be an integer, got {value!r}") from e


def _as_log_level(value: str | None) -> str:
    level = (value or "").strip().upper() or "INFO"
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}"
        )
    return level


class Settings:
    """Runtime configuration. Attribute names mirror the environment variables."""

    def __init__(
        self,
        DATABASE_URL: str | None = None,
        PORT: int = DEFAULT_PORT,
        HOST: str = "0.0.0.0",
        APP_DEBUG: bool = False,
        LOG_LEVEL: str = "INFO",
        CORS_ORIGINS: list[str] | None = None,
        DATA_DIR: Path = PROJECT_ROOT / "data",
    ) -> None:
        self.DATABASE_URL = DATABASE_URL
        self.PORT = PORT
        self.HOST = HOST
        self.APP_DEBUG = APP_DEBUG
        self.LOG_LEVEL = LOG_LEVEL
        self.CORS_ORIGINS = CORS_ORIGINS or ["*"]
        self.DATA_DIR = DATA_DIR

    @classmethod
    def from_env(cls, env_file: Path | None = PROJECT_ROOT / ".env") -> "Settings":
        """Build settings from ``os.environ``; values already set win over .env."""
        if env_file is not None:
            load_dotenv(env_file, override=False)

        origins = [
            o.strip()
            for o in os.environ.get("CORS_ORIGINS", "*").split(",")
            if o.strip()
        ]
        data_dir = os.environ.get("DATA_DIR", "").strip()
        return cls(
            DATABASE_URL=os.environ.get("DATABASE_URL", "").strip() or None,
            PORT=_as_port(os.environ.get("PORT")),
            HOST=os.environ.get("HOST", "").strip() or "0.0.0.0",
            APP_DEBUG=_as_bool(os.environ.get("APP_DEBUG")),
            LOG_LEVEL=_as_log_level(os.environ.get("LOG_LEVEL")),
            CORS_ORIGINS=origins,
            DATA_DIR=Path(data_dir) if data_dir else PROJECT_ROOT / "data",
        )

    def require_database_url(self) -> str:
        """Return the store connection string or raise ConfigurationError."""
        if not self.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL is not defined in the environment variables")
        return self.DATABASE_URL
