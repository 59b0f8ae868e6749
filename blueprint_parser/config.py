"""
Process configuration from environment variables (and a .env file).

    CACHE_TTL_MS         result cache lifetime in milliseconds (default 300000)
    PORT                 HTTP API port (default 3000)
    BLUEPRINTS_BASE_URL  site root (default https://www.dysonsphereblueprints.com)
    REQUEST_TIMEOUT      fetch timeout in seconds (default 30)
    LOG_LEVEL            DEBUG / INFO / WARNING / ERROR (default INFO)

Bad values never stop startup: they fall back to the default with a warning.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .logger import get_module_logger

logger = get_module_logger("config")

DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_PORT = 3000
DEFAULT_BASE_URL = "https://www.dysonsphereblueprints.com"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):
    """Resolved settings for one process."""
    model_config = ConfigDict(frozen=True)

    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    port: int = DEFAULT_PORT
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        """log_level as a logging module constant."""
        return logging.getLevelName(self.log_level)


def _parse_number(value: Optional[str], fallback, name: str, cast=int):
    if not value:
        logger.debug(f"Using default for {name}: {fallback}")
        return fallback
    try:
        parsed = cast(value)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {value!r}, using default {fallback}")
        return fallback
    if parsed < 0:
        logger.warning(f"Negative value for {name}: {value!r}, using default {fallback}")
        return fallback
    return parsed


def _parse_log_level(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Unknown LOG_LEVEL {value!r}, using {DEFAULT_LOG_LEVEL}")
        return DEFAULT_LOG_LEVEL
    return level


def get_app_config(load_env_file: bool = True) -> AppConfig:
    """
    Build the configuration from the environment.

    Args:
        load_env_file: Read a .env file first (existing variables win)

    Returns:
        AppConfig
    """
    if load_env_file:
        load_dotenv()
        logger.debug("Environment loaded")

    base_url = os.getenv("BLUEPRINTS_BASE_URL", "").strip().rstrip("/") or DEFAULT_BASE_URL

    return AppConfig(
        cache_ttl_ms=_parse_number(os.getenv("CACHE_TTL_MS"), DEFAULT_CACHE_TTL_MS, "cache_ttl_ms"),
        port=_parse_number(os.getenv("PORT"), DEFAULT_PORT, "port"),
        base_url=base_url,
        request_timeout=_parse_number(
            os.getenv("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT, "request_timeout", cast=float
        ),
        log_level=_parse_log_level(os.getenv("LOG_LEVEL")),
    )
