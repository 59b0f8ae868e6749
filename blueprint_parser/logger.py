"""
Logging for the blueprint parser.

Every module logs through a child of the "blueprint_parser" logger, obtained
with get_module_logger().  Only the package logger has handlers; CLI scripts
and the server call setup_logger() once at startup with the level from
AppConfig (a name such as "DEBUG") or a logging constant.
"""

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "blueprint_parser"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    """Accept logging.DEBUG or "debug"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger and return it.

    Safe to call again: the stdout handler is added once, later calls only
    change the level, and a log_file is attached the first time it is seen.

    Args:
        name: Logger name
        level: Logging level, as a constant or a level name
        log_file: Optional file that receives the same records

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    level = _resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    has_console = any(
        isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)
        for handler in logger.handlers
    )
    if not has_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        known_files = {
            handler.baseFilename for handler in logger.handlers
            if isinstance(handler, logging.FileHandler)
        }
        file_handler = logging.FileHandler(log_file)
        if file_handler.baseFilename in known_files:
            file_handler.close()
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


# Package logger, configured at import with the default level
logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Child logger "blueprint_parser.<module_name>", e.g. for "extractor"."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{module_name}")
