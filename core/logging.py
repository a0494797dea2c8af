"""
Unified Logging Configuration

This module sets up a centralized logging system for the entire application.
All modules should import and use the logger from this module instead of
using print() statements.

Usage:
    from core.logging import logger, get_logger

    logger.info("Scanner started")

    # Per-component logger, injectable into services and adapters
    log = get_logger(__name__)
    log.warning("okx: spot listing failed")

Log Levels (from most to least verbose):
    DEBUG    - Request/response tracing, skipped payload rows
    INFO     - Cycle summaries (e.g., "Aggregated 3 venues, 2 ok")
    WARNING  - A venue degraded (timeout, bad envelope, partial data)
    ERROR    - A whole query failed and an error response was returned

Configuration:
    Log level is controlled by the LOG_LEVEL setting in .env file.
"""

import logging
import sys
from typing import Optional


LOGGER_NAME = "arbscan"


def setup_logging(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    include_timestamp: bool = True,
    include_module: bool = True
) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string (uses default if None)
        include_timestamp: Include timestamp in log messages
        include_module: Include module name in log messages

    Returns:
        logging.Logger: Configured logger instance

    Example:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.info("Application started")
        2024-01-01 12:00:00 [INFO] arbscan: Application started
    """
    if log_format is None:
        format_parts = []

        if include_timestamp:
            format_parts.append("%(asctime)s")

        format_parts.append("[%(levelname)s]")

        if include_module:
            format_parts.append("%(name)s:")

        format_parts.append("%(message)s")

        log_format = " ".join(format_parts)

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


# ============================================
# Initialize Logger with Settings
# ============================================

try:
    from core.config import settings
    log_level = settings.log_level
except ImportError:
    log_level = "INFO"

logger = setup_logging(log_level=log_level)


# ============================================
# Convenience Functions
# ============================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module or component.

    Args:
        name: Name for the logger (typically __name__)

    Returns:
        logging.Logger: Logger instance named "arbscan.<name>"

    Example:
        >>> log = get_logger("exchanges.okx")
        >>> log.name
        'arbscan.exchanges.okx'
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


# ============================================
# Log Helper Functions
# ============================================

def log_api_request(
    exchange: str,
    endpoint: str,
    params: Optional[dict] = None,
    log: Optional[logging.Logger] = None
) -> None:
    """
    Log an API request with consistent formatting.

    Example:
        >>> log_api_request("okx", "/api/v5/market/tickers", {"instType": "SPOT"})
        [DEBUG] API Request: okx /api/v5/market/tickers | Params: {'instType': 'SPOT'}
    """
    log = log or logger
    if params:
        log.debug(f"API Request: {exchange} {endpoint} | Params: {params}")
    else:
        log.debug(f"API Request: {exchange} {endpoint}")


def log_api_response(
    exchange: str,
    endpoint: str,
    status: int,
    response_time: Optional[float] = None,
    log: Optional[logging.Logger] = None
) -> None:
    """
    Log an API response with status and timing information.

    Example:
        >>> log_api_response("binance", "/api/v3/ticker/price", 200, 0.342)
        [DEBUG] API Response: binance /api/v3/ticker/price | Status: 200 | Time: 0.342s
    """
    log = log or logger
    time_str = f" | Time: {response_time:.3f}s" if response_time else ""
    log.debug(f"API Response: {exchange} {endpoint} | Status: {status}{time_str}")


logger.debug("Logging system initialized")
