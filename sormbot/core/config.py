"""
Configuration for the SormBot process.
Values come from environment variables (optionally loaded from a .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/bot.db")
DB_TIMEOUT_SEC = float(os.getenv("DB_TIMEOUT_SEC", "5"))

# Telegram transport
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "bot.log")

# HTTP API
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Statistics
STATS_TOP_LIMIT = int(os.getenv("STATS_TOP_LIMIT", "5"))

# Version string
VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    """Snapshot of the configuration handed to the bot context."""
    db_path: str = DB_PATH
    db_timeout_sec: float = DB_TIMEOUT_SEC
    telegram_bot_token: Optional[str] = TELEGRAM_BOT_TOKEN
    log_level: str = LOG_LEVEL
    log_file: Optional[str] = LOG_FILE
    debug: bool = DEBUG
    api_host: str = API_HOST
    api_port: int = API_PORT
    stats_top_limit: int = STATS_TOP_LIMIT
    version: str = VERSION


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        db_path=os.getenv("DB_PATH", "./data/bot.db"),
        db_timeout_sec=float(os.getenv("DB_TIMEOUT_SEC", "5")),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", "bot.log") or None,
        debug=debug_enabled(),
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("API_PORT", "8000")),
        stats_top_limit=int(os.getenv("STATS_TOP_LIMIT", "5")),
    )


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = DB_PATH):
    """Ensure the database directory exists."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def validate_settings(settings: Settings, require_token: bool = False) -> List[str]:
    """Validate settings and return any issues."""
    issues = []

    if not settings.db_path or not settings.db_path.strip():
        issues.append("DB_PATH must not be empty")

    if settings.db_timeout_sec <= 0:
        issues.append("DB_TIMEOUT_SEC must be > 0")

    if settings.stats_top_limit < 1:
        issues.append("STATS_TOP_LIMIT must be >= 1")

    if not 0 < settings.api_port < 65536:
        issues.append(f"Invalid API_PORT: {settings.api_port}")

    if require_token and not (settings.telegram_bot_token or "").strip():
        issues.append("TELEGRAM_BOT_TOKEN is required to run the bot")

    return issues
