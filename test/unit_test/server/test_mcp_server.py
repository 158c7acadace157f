from __future__ import annotations

from typing import Iterator

import pytest
from mcp.server.fastmcp import FastMCP
from starlette.testclient import TestClient

from connectcloud_mcp import __version__
from connectcloud_mcp.server.mcp_server import SERVER_NAME, create_mcp_server


@pytest.fixture()
def server(settings, toolset) -> Iterator[FastMCP]:
    mcp, close = create_mcp_server(settings, toolset=toolset)
    yield mcp
    close()


@pytest.fixture()
def http(server: FastMCP) -> TestClient:
    return TestClient(server.streamable_http_app())


def test_server_uses_transport_settings(server: FastMCP) -> None:
    assert server.name == SERVER_NAME
    assert server.settings.host == "127.0.0.1"
    assert server.settings.port == 8765


@pytest.mark.asyncio
async def test_tools_and_prompts_are_registered(server: FastMCP) -> None:
    tool_names = {tool.name for tool in await server.list_tools()}
    assert {"queryData", "getInstructions", "getCatalogs"} <= tool_names
    assert len(tool_names) == 16
    assert len(await server.list_prompts()) == 6


def test_health(http: TestClient) -> None:
    response = http.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_manifest(http: TestClient) -> None:
    response = http.get("/.well-known/mc/manifest.json")
    assert response.status_code == 200
    assert response.json() == {
        "name": "CData Connect Cloud",
        "version": __version__,
        "transport": "streamable-http",
        "endpoint": "/mcp",
        "auth": "none",
    }


def test_direct_success(http: TestClient) -> None:
    response = http.post("/direct", json={"jsonrpc": "2.0", "id": 1, "method": "getCatalogs"})
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 1
    assert body["result"]["results"][0]["rows"][1] == ["AzureDevOps1"]


def test_direct_get_instructions(http: TestClient) -> None:
    response = http.post(
        "/direct",
        json={"jsonrpc": "2.0", "id": "x", "method": "getInstructions", "params": {"driverName": "Azure DevOps"}},
    )
    assert response.json()["result"]["requestContext"]["source"] == "local"


def test_direct_parse_error(http: TestClient) -> None:
    response = http.post("/direct", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32700
    assert response.json()["id"] is None


def test_direct_invalid_request(http: TestClient) -> None:
    response = http.post("/direct", json={"id": 2, "method": "getCatalogs"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == -32600


def test_direct_unknown_method(http: TestClient) -> None:
    response = http.post("/direct", json={"jsonrpc": "2.0", "id": 3, "method": "nope"})
    assert response.status_code == 200
    assert response.json()["error"]["code"] == -32601


def test_close_releases_backends(settings, toolset, monkeypatch) -> None:
    closed = []
    monkeypatch.setattr(toolset, "close", lambda: closed.append(True))
    _, close = create_mcp_server(settings, toolset=toolset)
    close()
    assert closed == [True]


def test_builds_backends_from_settings(settings) -> None:
    mcp, close = create_mcp_server(settings)
    try:
        assert isinstance(mcp, FastMCP)
    finally:
        close()
