"""
Core utilities for the Connect Cloud MCP server.

This package provides shared functionality such as logging configuration.
"""

from connectcloud_mcp.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
