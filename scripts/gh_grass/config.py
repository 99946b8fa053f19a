"""Configuration and logging setup for gh-grass."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

LOGGER_NAME = "gh_grass"
DEFAULT_API_URL = "https://api.github.com/graphql"


@dataclass(slots=True)
class Settings:
    """Runtime configuration values loaded from environment variables."""

    api_url: str = DEFAULT_API_URL
    timeout: float = 10.0
    gh_path: str = "gh"
    log_file: Path = Path("~/.gh-grass.log").expanduser()
    log_level: str = "ERROR"


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment, optionally from a specific file."""

    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    raw_timeout = os.getenv("GH_GRASS_TIMEOUT", "10")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise RuntimeError(f"GH_GRASS_TIMEOUT must be a number, got {raw_timeout!r}")
    if timeout <= 0:
        raise RuntimeError("GH_GRASS_TIMEOUT must be positive")

    return Settings(
        api_url=os.getenv("GH_GRASS_API_URL", DEFAULT_API_URL),
        timeout=timeout,
        gh_path=os.getenv("GH_GRASS_GH_PATH", "gh"),
        log_file=Path(os.getenv("GH_GRASS_LOG_FILE", "~/.gh-grass.log")).expanduser(),
        log_level=os.getenv("GH_GRASS_LOG_LEVEL", "ERROR"),
    )


def configure_logging(settings: Settings) -> logging.Logger:
    """Send the package logger to a rotating file.

    The terminal belongs to the full-screen UI while it runs, so nothing is
    logged to stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    handler = RotatingFileHandler(
        settings.log_file, maxBytes=2_000_000, backupCount=2, encoding="utf-8"
    )
    handler.setLevel(getattr(logging, settings.log_level.upper(), logging.ERROR))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
