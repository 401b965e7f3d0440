import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

load_dotenv()

DEFAULT_CONFIG_PATH = os.getenv(
    "WPFLEET_CONFIG",
    str(Path.home() / ".config" / "wpfleet" / "config.json"),
)

DEFAULT_MAINWP_DASHBOARD_URL = "https://wpmanage.greenwich-design.co.uk"
DEFAULT_GITLAB_URL = "https://gitlab.com"
DEFAULT_VIRTUALMIN_PORT = 10000
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_GITLAB_PER_PAGE = 100


def load_config() -> dict:
    """
    Load the optional wpfleet JSON configuration from disk.

    Credentials never live here; they come from the environment (or .env).
    """
    try:
        with open(DEFAULT_CONFIG_PATH, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        log.debug("Config file not found: %s", DEFAULT_CONFIG_PATH)
        return {}
    except Exception:
        log.exception("Failed to load config")
        return {}


def poll_interval(cfg: dict | None = None) -> float:
    cfg = load_config() if cfg is None else cfg
    try:
        return float(cfg.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL))
    except (TypeError, ValueError):
        log.warning("Invalid poll_interval_seconds in config; using %s", DEFAULT_POLL_INTERVAL)
        return DEFAULT_POLL_INTERVAL


def request_timeout(cfg: dict | None = None) -> float:
    cfg = load_config() if cfg is None else cfg
    try:
        return float(cfg.get("request_timeout", 30))
    except (TypeError, ValueError):
        return 30.0


def mainwp_settings() -> dict:
    return {
        "base_url": os.getenv("MAINWP_DASHBOARD_URL") or DEFAULT_MAINWP_DASHBOARD_URL,
        "consumer_key": os.getenv("WP_MANAGE_CONSUMER_KEY"),
        "consumer_secret": os.getenv("WP_MANAGE_SECRET_KEY"),
    }


def virtualmin_settings() -> dict:
    port = os.getenv("VIRTUALMIN_PORT")
    return {
        "username": os.getenv("LIVE_SERVER_USERNAME"),
        "password": os.getenv("LIVE_SERVER_PASSWORD"),
        "server": os.getenv("SERVER_IP"),
        "port": int(port) if port else DEFAULT_VIRTUALMIN_PORT,
    }


def notion_settings(database_env: str = "NOTION_DATABASE_ID") -> dict:
    return {
        "api_key": os.getenv("NOTION_API_KEY"),
        "database_id": os.getenv(database_env),
    }


def gitlab_settings(cfg: dict | None = None) -> dict:
    cfg = load_config() if cfg is None else cfg
    per_page = (cfg.get("gitlab") or {}).get("per_page", DEFAULT_GITLAB_PER_PAGE)
    return {
        "token": os.getenv("GITLAB_TOKEN"),
        "base_url": os.getenv("GITLAB_URL") or DEFAULT_GITLAB_URL,
        "per_page": int(per_page),
    }


def require(settings: dict, *keys: str) -> dict:
    """Exit with status 1 when any of ``keys`` is unset in ``settings``."""
    missing = [key for key in keys if not settings.get(key)]
    for key in missing:
        log.critical("FATAL: missing required setting: %s", key)
    if missing:
        raise SystemExit(1)
    return settings
