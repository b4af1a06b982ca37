"""Runtime configuration.

Values come from environment variables, optionally loaded from a .env file at
the project root:

- GDZIESTOJA_BASE_URL: site root (default https://gdziestoja.pl)
- GDZIESTOJA_DB_PATH: SQLite database file (default ./data/raw.sqlite)
- GDZIESTOJA_HTTP_TIMEOUT: request timeout in seconds (default 20)
- GDZIESTOJA_USER_AGENT: User-Agent header sent with every request
- GDZIESTOJA_LOG_LEVEL: logging level name (default INFO)
- GDZIESTOJA_DELAY_HOME / _REGION / _CITY / _VENUE / _COMMENT_PAGE /
  _DISCOVERY_PAUSE: upper bound in seconds of the random pause before a request
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://gdziestoja.pl"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


class CrawlDelays(BaseModel):
    """Upper bounds (seconds) of the randomized pause taken before each request, per tier."""

    home: float = Field(0.0, ge=0)
    region: float = Field(1.0, ge=0)
    city: float = Field(1.0, ge=0)
    venue: float = Field(2.0, ge=0)
    comment_page: float = Field(3.0, ge=0)
    # One long pause between city discovery and venue harvesting
    discovery_pause: float = Field(4.0, ge=0)


class Settings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    db_path: str = Field(default_factory=lambda: os.path.join(_ROOT_DIR, "data", "raw.sqlite"))
    http_timeout: float = Field(20.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    delays: CrawlDelays = Field(default_factory=CrawlDelays)


def _load_env_from_file() -> None:
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    """
    env_path = os.path.join(_ROOT_DIR, ".env")
    if not os.path.isfile(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            if "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and (key not in os.environ or not os.environ[key]):
                os.environ[key] = val


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number of seconds, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build Settings from the environment (and .env), applying defaults."""
    _load_env_from_file()

    defaults = CrawlDelays()
    delays = CrawlDelays(
        home=_float_env("GDZIESTOJA_DELAY_HOME", defaults.home),
        region=_float_env("GDZIESTOJA_DELAY_REGION", defaults.region),
        city=_float_env("GDZIESTOJA_DELAY_CITY", defaults.city),
        venue=_float_env("GDZIESTOJA_DELAY_VENUE", defaults.venue),
        comment_page=_float_env("GDZIESTOJA_DELAY_COMMENT_PAGE", defaults.comment_page),
        discovery_pause=_float_env("GDZIESTOJA_DELAY_DISCOVERY_PAUSE", defaults.discovery_pause),
    )
    kwargs = {
        "http_timeout": _float_env("GDZIESTOJA_HTTP_TIMEOUT", 20.0),
        "delays": delays,
    }
    base_url = os.getenv("GDZIESTOJA_BASE_URL")
    if base_url:
        kwargs["base_url"] = base_url.rstrip("/")
    db_path = os.getenv("GDZIESTOJA_DB_PATH")
    if db_path:
        kwargs["db_path"] = db_path
    user_agent = os.getenv("GDZIESTOJA_USER_AGENT")
    if user_agent:
        kwargs["user_agent"] = user_agent
    log_level = os.getenv("GDZIESTOJA_LOG_LEVEL")
    if log_level:
        kwargs["log_level"] = log_level.upper()
    return Settings(**kwargs)


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=getattr(logging, (level or "INFO").upper(), logging.INFO), format=LOG_FORMAT)
