"""Centralized logging configuration for tftquery."""

import logging
import sys
from typing import Optional

from tftquery.config import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for applications embedding the client.

    The library itself never calls this; scripts and services using
    TftQuery call it once at startup.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL (INFO).
    """
    level = level or settings.LOG_LEVEL
    log_level = getattr(logging, level.upper()) if level else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Suppress overly verbose loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)

    logging.getLogger("tftquery").setLevel(log_level)

    logger = logging.getLogger("tftquery.logging_config")
    logger.info(f"Logging initialized at level: {logging.getLevelName(log_level)}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: The logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
