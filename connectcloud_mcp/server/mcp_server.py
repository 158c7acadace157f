"""MCP server exposing CData Connect Cloud as tools, prompts and HTTP routes."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from mcp.server.fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from connectcloud_mcp import __version__
from connectcloud_mcp.info_provider.connect_cloud import ConnectCloudApiClient
from connectcloud_mcp.info_provider.instructions import CacheSweeper, load_instruction_resolver

from .core.config import Settings
from .direct import direct_endpoint
from .prompts import register_prompts
from .tools import ConnectCloudToolset, register_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "CData Connect Cloud"
SERVER_INSTRUCTIONS = (
    "Query and explore data sources connected to CData Connect Cloud. "
    "Use getCatalogs, getSchemas, getTables and getColumns to explore, getInstructions for "
    "driver-specific guidance, and queryData to run SQL. Always limit result sets."
)


def _build_toolset(config: Settings) -> ConnectCloudToolset:
    """Build the Connect Cloud client and instruction resolver described by ``config``."""
    cc = config.connect_cloud
    if not cc.has_credentials:
        logger.warning("CDATA_USERNAME / CDATA_PAT are not set; Connect Cloud tools will fail until configured")
    client = ConnectCloudApiClient(cc.api_url, username=cc.username, pat=cc.pat, timeout=cc.timeout)
    return ConnectCloudToolset(client, load_instruction_resolver(config.instructions))


def create_mcp_server(
    settings: Optional[Settings] = None,
    *,
    toolset: Optional[ConnectCloudToolset] = None,
) -> Tuple[FastMCP, Callable[[], None]]:
    """
    Create the MCP server instance plus shutdown hook.

    Parameters
    ----------
    settings:
        Optional pre-loaded settings. When omitted, environment variables are used.
    toolset:
        Optional prebuilt backends. When omitted they are built from ``settings``.

    Returns
    -------
    tuple[FastMCP, Callable[[], None]]
        Configured MCP server and a shutdown callback that stops the cache
        sweeper and closes the HTTP clients.
    """
    config = settings or Settings()
    backends = toolset or _build_toolset(config)
    sweeper = CacheSweeper(backends.resolver.cache, interval_seconds=config.instructions.sweep_interval)

    transport = config.transport
    server = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, host=transport.host, port=transport.port)
    register_tools(server, backends)
    register_prompts(server)
    _register_routes(server, backends)

    sweeper.start()

    def _close() -> None:
        sweeper.stop()
        backends.close()
        logger.info("MCP server resources released")

    return server, _close


def _register_routes(server: FastMCP, toolset: ConnectCloudToolset) -> None:
    """Register the plain HTTP routes served next to the streamable HTTP endpoint."""

    @server.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "server": SERVER_NAME, "version": __version__})

    @server.custom_route("/.well-known/mc/manifest.json", methods=["GET"])
    async def manifest(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": __version__,
                "transport": "streamable-http",
                "endpoint": server.settings.streamable_http_path,
                "auth": "none",
            }
        )

    server.custom_route("/direct", methods=["POST"])(direct_endpoint(toolset))
