"""Pre-DB bootstrap configuration. Zero imports from the rest of the app
besides constants.

Resolves where the database lives before anything opens it. Precedence is
the DATABASE_URL environment variable (a .env file in the working directory
is honoured), then ~/.house_duties/config.json, then the built-in default.
"""
import json
import os
from pathlib import Path

from dotenv import load_dotenv

from utils.constants import DEFAULT_DATABASE_URL

CONFIG_DIR = Path.home() / ".house_duties"
CONFIG_FILE = CONFIG_DIR / "config.json"

SQLITE_PREFIX = "sqlite:///"
MEMORY_DB = ":memory:"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return {}


def save_config(config: dict) -> None:
    """Creates ~/.house_duties/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_database_url() -> str:
    load_dotenv()
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return load_config().get("database_url") or DEFAULT_DATABASE_URL


def set_database_url(url: str | None) -> None:
    """Update database_url in config and save."""
    config = load_config()
    if url is None:
        config.pop("database_url", None)
    else:
        config["database_url"] = url
    save_config(config)


def database_path_from_url(url: str) -> str:
    """Turn a sqlite URL (or a bare path) into something sqlite3.connect accepts.

    sqlite:///bills.db        -> bills.db
    sqlite:////var/lib/b.db   -> /var/lib/b.db
    sqlite:///:memory:        -> :memory:
    """
    url = url.strip()
    if not url:
        raise ValueError("DATABASE_URL is empty.")
    if url.startswith(SQLITE_PREFIX):
        path = url[len(SQLITE_PREFIX):]
        if not path:
            raise ValueError(f"DATABASE_URL has no database path: {url}")
        return path
    if "://" in url:
        scheme = url.split("://", 1)[0]
        raise ValueError(f"Unsupported database scheme '{scheme}'; only sqlite is available.")
    return url


def get_log_level(default: str = "WARNING") -> str:
    load_dotenv()
    return os.getenv("LOG_LEVEL", default).upper()
