import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

RELEASE_MODE = "release"
DEBUG_MODE = "debug"


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out the legacy "postgres://" scheme.
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Settings:
    """
    A class to hold all application settings.
    It reads settings from environment variables and .env file.
    """

    def __init__(self, environ: Optional[dict] = None):
        env = os.environ if environ is None else environ

        # --- Project Settings ---
        self.PROJECT_NAME: str = env.get("PROJECT_NAME", "Bus Management Service")
        self.SERVICE_NAME: str = "bus-management"
        self.VERSION: str = "0.1.0"

        # --- Server Settings ---
        self.HOST: str = env.get("HOST", "0.0.0.0")
        self.PORT: int = int(env.get("PORT") or "8081")
        self.APP_MODE: str = env.get("APP_MODE", DEBUG_MODE).lower()
        if self.APP_MODE not in (RELEASE_MODE, DEBUG_MODE):
            raise ValueError(f"APP_MODE must be '{RELEASE_MODE}' or '{DEBUG_MODE}', got '{self.APP_MODE}'")

        default_level = "WARNING" if self.APP_MODE == RELEASE_MODE else "INFO"
        self.LOG_LEVEL: str = env.get("LOG_LEVEL", default_level).upper()

        # --- Database Settings ---
        self.DATABASE_URL: str = _normalize_database_url(env.get("DATABASE_URL", ""))
        self.DB_POOL_SIZE: int = int(env.get("DB_POOL_SIZE", "5"))
        self.DB_MAX_OVERFLOW: int = int(env.get("DB_MAX_OVERFLOW", "10"))

        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL environment variable is not set.")

    @property
    def is_release(self) -> bool:
        return self.APP_MODE == RELEASE_MODE


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load .env once and return the process-wide settings."""
    load_dotenv(dotenv_path=ENV_PATH)
    return Settings()
