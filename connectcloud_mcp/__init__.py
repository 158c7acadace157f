"""Connect Cloud MCP server.

This package exposes CData Connect Cloud (catalogs, schemas, tables, columns,
keys, queries, stored procedures, query logs and driver instructions) as a set
of named MCP tools reachable over stdio or streamable HTTP.

High-level architecture
-----------------------

- ``connectcloud_mcp.info_provider``:

  - ``connect_cloud``: thin HTTP client for the Connect Cloud REST API.
  - ``instructions``: the driver-instruction resolver. Raw driver names are
    normalized to canonical ids, then resolved through an in-memory cache, a
    remote instruction API, the packaged document store and finally a generic
    document, with per-entry expiry.

- ``connectcloud_mcp.server``:

  - Settings, the FastMCP server factory, tool and prompt registration, the
    session-less ``/direct`` JSON-RPC route and the process entry point.

- ``connectcloud_mcp.core``:

  - Logging configuration shared by every module.
"""

__version__ = "1.0.5"
