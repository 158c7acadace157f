"""
Connect Cloud MCP Server Package.

This package contains the MCP server surface of the gateway.

Modules:
    core: Settings loaded from the environment and ``.env``.
    mcp_server: FastMCP factory wiring clients, resolver, tools and routes.
    tools: Tool handlers and their registration.
    prompts: Static SQL guidance prompts.
    direct: Session-less JSON-RPC route for simple HTTP callers.
    main: Process entry point selecting the transport.
"""
