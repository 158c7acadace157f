"""Provider integrations used by the MCP server.

The ``info_provider`` package contains the integration layers that supply
data and guidance to the tool surface.

Subpackages
-----------

- ``info_provider.connect_cloud``:

  Thin HTTP client for the Connect Cloud REST API (metadata, query, batch,
  exec and query-log endpoints).

- ``info_provider.instructions``:

  Driver-instruction resolution: alias normalization, TTL cache with a
  background sweeper, remote and packaged instruction sources, and the
  tiered resolver that ties them together.

This package keeps provider concerns isolated from the MCP server so the
transport layer can change without touching resolution or API logic.
"""
