"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API starts with a local SQLite file and a single development owner
account.  In a production deployment you should at least override
``SECRET_KEY`` and ``OWNER_PASSWORD_HASH``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Habit Ledger API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")

    # The single owner account allowed to log in.  ``OWNER_PASSWORD_HASH``
    # takes precedence and must be produced by ``hash_password.py``; the
    # plain ``OWNER_PASSWORD`` is only consulted when no hash is set.
    owner_username: str = os.getenv("OWNER_USERNAME", "admin")
    owner_password_hash: str = os.getenv("OWNER_PASSWORD_HASH", "")
    owner_password: str = os.getenv("OWNER_PASSWORD", "admin123")

    # ``sqlite`` (default) or ``memory``.  The memory backend keeps no state
    # across restarts and is meant for local development.
    store_backend: str = os.getenv("STORE_BACKEND", "sqlite")

    # Path of the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "habit_ledger.db")

    # Number of most recent dates returned by the trend view.
    trend_window: int = int(os.getenv("TREND_WINDOW", "30"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
