"""
HouseFinder Configuration
Loads settings from environment variables (and an optional config.json) and defines constants.

Plain string settings are read at import. Values that need parsing are read by
load_settings() so a bad value is reported by main() like any other failure.
"""

import os
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory (where this script lives)
BASE_DIR = Path(__file__).parent.resolve()

# Optional JSON config using dotted keys such as "centris.minPrice"
CONFIG_FILE = BASE_DIR / os.getenv("CONFIG_FILE", "config.json")

# Defaults
DEFAULT_NAVIGATION_TIMEOUT_MS = 60000
DEFAULT_CENTRIS_MAX_PAGES = 200

# Timing
SUTTON_SETTLE_DELAY_SECONDS = 0.5
CENTRIS_PAGE_DELAY_SECONDS = 1.5

# File paths
LISTINGS_FILE = BASE_DIR / os.getenv("LISTINGS_FILE", "listings.json")
LOG_FILE = BASE_DIR / os.getenv("LOG_FILE", "housefinder.log")

# Discord webhook for new listing alerts (empty = notifications disabled)
DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "")

# Browser settings
HEADLESS = os.getenv("HEADLESS", "true").lower() == "true"

# User agent for the browser context
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class ConfigError(Exception):
    """Raised when a setting is missing its expected shape."""


@dataclass
class Settings:
    """Per-site scan settings."""
    duproprio_url: str = ""
    sutton_url: str = ""
    centris_url: str = ""
    # Inclusive price bounds applied while extracting Centris listings
    centris_min_price: Optional[int] = None
    centris_max_price: Optional[int] = None
    # Centris paginates in place; stop after this many pages if "next" never goes away
    centris_max_pages: int = DEFAULT_CENTRIS_MAX_PAGES
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS


def _load_json_config(path: Path) -> dict:
    """Read config.json if present, otherwise return an empty dict."""
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} does not contain a JSON object")
    return data


def _lookup(json_config: dict, env_name: str, json_key: str, default=None):
    """Environment variable first, then the nested config.json key, then default."""
    value = os.getenv(env_name)
    if value not in (None, ""):
        return value

    node = json_config
    for part in json_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def _to_int(name: str, value, optional: bool = False) -> Optional[int]:
    if value in (None, "") and optional:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a whole number, got {value!r}") from None


def load_settings(config_file: Path = CONFIG_FILE) -> Settings:
    """
    Read per-site settings.

    Args:
        config_file: Optional JSON config file

    Returns:
        Settings instance

    Raises:
        ConfigError: if config.json is unreadable or a number does not parse
    """
    json_config = _load_json_config(Path(config_file))

    return Settings(
        duproprio_url=_lookup(json_config, "DUPROPRIO_URL", "duproprio.url", ""),
        sutton_url=_lookup(json_config, "SUTTON_URL", "sutton.url", ""),
        centris_url=_lookup(json_config, "CENTRIS_URL", "centris.url", ""),
        centris_min_price=_to_int(
            "CENTRIS_MIN_PRICE", _lookup(json_config, "CENTRIS_MIN_PRICE", "centris.minPrice"), optional=True
        ),
        centris_max_price=_to_int(
            "CENTRIS_MAX_PRICE", _lookup(json_config, "CENTRIS_MAX_PRICE", "centris.maxPrice"), optional=True
        ),
        centris_max_pages=_to_int(
            "CENTRIS_MAX_PAGES",
            _lookup(json_config, "CENTRIS_MAX_PAGES", "centris.maxPages", DEFAULT_CENTRIS_MAX_PAGES),
        ),
        navigation_timeout_ms=_to_int(
            "NAVIGATION_TIMEOUT_MS", os.getenv("NAVIGATION_TIMEOUT_MS") or DEFAULT_NAVIGATION_TIMEOUT_MS
        ),
    )
