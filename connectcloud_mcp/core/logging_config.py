"""
Logging Configuration Module.

This module provides centralized logging configuration for the Connect Cloud MCP server.

Features:
- Configurable log levels per module
- Console (stderr) and file logging
- Structured logging with JSON format support
- Logging can be switched off entirely with ``LOG_ENABLED=false``

Console output always goes to stderr because stdout carries the MCP stdio
transport.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


def _get_logging_config():
    """Get logging configuration from settings model.

    This function is used to defer settings import until needed,
    avoiding circular imports during module initialization.
    """
    try:
        from connectcloud_mcp.server.core.config import settings

        log_settings = settings.logging
        return {
            "log_level": log_settings.level.upper(),
            "log_format": log_settings.format,
            "log_file_dir": log_settings.file_dir,
            "enabled": log_settings.enabled,
        }
    except Exception:
        # Fallback to environment variables if settings not available
        return {
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "detailed"),
            "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
            "enabled": os.getenv("LOG_ENABLED", "false").lower() in ("true", "1", "yes"),
        }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
LOG_ENABLED = _config["enabled"]


# Define log formats
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)


# Module-specific log levels
MODULE_LOG_LEVELS = {
    "connectcloud_mcp.info_provider": "INFO",
    "connectcloud_mcp.info_provider.instructions": "DEBUG",
    "connectcloud_mcp.info_provider.connect_cloud": "INFO",
    "connectcloud_mcp.server": "INFO",
    # Third-party libraries (reduce noise)
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "mcp": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",
}


def _format_for(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
    enabled: Optional[bool] = None,
    log_file_dir: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Whether to enable file logging
        enabled: Override ``LOG_ENABLED``; when false all logging is silenced
        log_file_dir: Override the directory holding ``combined.log`` and ``error.log``
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    is_enabled = LOG_ENABLED if enabled is None else enabled
    file_dir = Path(log_file_dir or LOG_FILE_DIR)

    formatter = logging.Formatter(_format_for(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    # Console handler; stdout is reserved for the stdio transport
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and is_enabled
    if file_logging:
        file_dir.mkdir(parents=True, exist_ok=True)
        combined_handler = logging.FileHandler(file_dir / "combined.log")
        combined_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        combined_handler.setFormatter(formatter)
        root_logger.addHandler(combined_handler)

        error_handler = logging.FileHandler(file_dir / "error.log")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    # Configure module-specific log levels
    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    if not is_enabled:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
