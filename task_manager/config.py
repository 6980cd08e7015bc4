"""Application configuration classes."""

import os

from dotenv import load_dotenv


load_dotenv()


def _sqlite_path() -> str:
    return os.getenv("SQLITE_PATH") or os.getenv("TASK_MANAGER_SQLITE_PATH") or "tasks.db"


class Config:
    """Base configuration."""

    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{_sqlite_path()}"
    DATABASE_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
    }

    # Seconds every request may spend in storage; 0 disables the bound
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "50"))

    SEED_DATA = os.getenv("SEED_DATA", "false").lower() == "true"


class TestConfig(Config):
    """Test configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_URL = "sqlite://"
    DATABASE_ENGINE_OPTIONS: dict = {}
    REQUEST_TIMEOUT = 5.0
    DEFAULT_PAGE_SIZE = 50
    SEED_DATA = False
