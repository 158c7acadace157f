"""
Main Application Entry Point.

Loads settings, configures logging and runs the Connect Cloud MCP server over
the configured transport:

- ``stdio`` (default): the MCP client spawns this process and talks over stdin/stdout.
- ``http``: streamable HTTP on ``HOST:PORT`` at ``/mcp``, plus ``/health``,
  ``/.well-known/mc/manifest.json`` and ``/direct``.
"""

from typing import Optional

from connectcloud_mcp.core.logging_config import get_logger, setup_logging

from .core.config import Settings
from .mcp_server import create_mcp_server

logger = get_logger(__name__)

_FASTMCP_TRANSPORTS = {"stdio": "stdio", "http": "streamable-http"}


def main(settings: Optional[Settings] = None) -> None:
    """Run the Connect Cloud MCP server until the transport closes."""
    config = settings or Settings()
    log_settings = config.logging
    setup_logging(
        log_level=log_settings.level,
        log_format=log_settings.format,
        enabled=log_settings.enabled,
        log_file_dir=log_settings.file_dir,
    )

    server, close = create_mcp_server(config)
    transport = config.transport
    if transport.type == "http":
        logger.info(f"Starting MCP server with HTTP transport on {transport.host}:{transport.port}")
    else:
        logger.info("Starting MCP server with stdio transport")

    try:
        server.run(transport=_FASTMCP_TRANSPORTS[transport.type])
    finally:
        close()
        logger.info("MCP server stopped")


if __name__ == "__main__":
    main()
