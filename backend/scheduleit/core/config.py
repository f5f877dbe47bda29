"""
Centralized configuration module for application-wide settings.

Every value is read from the environment. The app factory loads a ``.env``
file first (python-dotenv) when DATABASE_URL is not already defined.
"""

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes")

BACKEND_DIR = Path(__file__).resolve().parent.parent.parent


# ===========================
# Database Configuration
# ===========================


def get_database_url() -> str:
    """
    Get the database URL.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL
            Default: 'sqlite:///./scheduleit.db'
            Tests: 'sqlite:///:memory:'
    """
    return os.getenv("DATABASE_URL", "sqlite:///./scheduleit.db")


# ===========================
# Environment / Logging Configuration
# ===========================


def get_environment() -> str:
    return os.getenv("FLASK_ENV", "development")


def is_production() -> bool:
    return get_environment() == "production"


def is_testing() -> bool:
    return os.getenv("TESTING", "").strip().lower() in _TRUTHY


def get_log_level() -> str:
    """
    Get the log level name.

    Environment Variables:
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
            Default: INFO in production, DEBUG otherwise
    """
    default = "INFO" if is_production() else "DEBUG"
    return os.getenv("LOG_LEVEL", default).strip().upper()


def get_log_to_file() -> bool:
    """
    Whether to write rotating log files in addition to the console.

    Environment Variables:
        LOG_TO_FILE: "1"/"true" writes files, "0"/"false" keeps stdout only
            Default: '1'
    """
    return os.getenv("LOG_TO_FILE", "1").strip().lower() in _TRUTHY


def get_log_dir() -> Path:
    return Path(os.getenv("LOG_DIR", str(BACKEND_DIR / "logs")))


# ===========================
# Query Configuration
# ===========================


def _get_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning(
            f"Invalid value '{raw}' for {name}. Falling back to {default}.",
            extra={"context": {"setting": name, "value": raw}},
        )
        return default
    return value


def get_upcoming_today_limit() -> int:
    """
    Number of upcoming appointments listed by the today-stats query.

    Environment Variables:
        UPCOMING_TODAY_LIMIT: positive integer
            Default: 5
    """
    return _get_positive_int("UPCOMING_TODAY_LIMIT", 5)


def get_search_result_limit() -> int:
    """
    Maximum number of customers returned by a search.

    Environment Variables:
        SEARCH_RESULT_LIMIT: positive integer
            Default: 20
    """
    return _get_positive_int("SEARCH_RESULT_LIMIT", 20)


# ===========================
# CORS Configuration
# ===========================


def get_cors_allowed_origins() -> List[str]:
    """
    Origins allowed to call the JSON API from a browser.

    Environment Variables:
        CORS_ALLOWED_ORIGINS: Comma-separated list of origins
            Default: the two local front-end dev servers
    """
    origins_str = os.getenv(
        "CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000"
    )
    return [o.strip() for o in origins_str.split(",") if o.strip()]


UPCOMING_TODAY_LIMIT = get_upcoming_today_limit()
SEARCH_RESULT_LIMIT = get_search_result_limit()


def log_app_config():
    """
    Log the active configuration.

    Should be called during application startup to provide visibility
    into the settings in effect (without exposing credentials).
    """
    logger.info(
        "Application configuration initialized",
        extra={
            "context": {
                "environment": get_environment(),
                "testing": is_testing(),
                "log_level": get_log_level(),
                "log_to_file": get_log_to_file(),
                "upcoming_today_limit": UPCOMING_TODAY_LIMIT,
                "search_result_limit": SEARCH_RESULT_LIMIT,
                "cors_origins": get_cors_allowed_origins(),
            }
        },
    )
