from __future__ import annotations

import time
from typing import Iterator, List

import httpx
import pytest

from connectcloud_mcp.info_provider.connect_cloud import ConnectCloudApiClient
from connectcloud_mcp.info_provider.instructions import InstructionResolver, InstructionsCache
from connectcloud_mcp.server.core.config import Settings
from connectcloud_mcp.server.tools import ConnectCloudToolset

CATALOGS = {"results": [{"schema": [{"columnName": "TABLE_CATALOG"}], "rows": [["Salesforce1"], ["AzureDevOps1"]]}]}


class ConnectCloudStub:
    """MockTransport handler standing in for the Connect Cloud API."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.delay = 0.0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            time.sleep(self.delay)
        path = request.url.path
        if path == "/api/catalogs":
            return httpx.Response(200, json=CATALOGS)
        if path in ("/api/schemas", "/api/tables", "/api/columns"):
            return httpx.Response(200, json={"results": [{"rows": [], "params": dict(request.url.params)}]})
        if path == "/api/query":
            if b"FAIL" in request.content:
                return httpx.Response(400, json={"error": {"message": "Malformed SQL statement"}})
            return httpx.Response(200, json={"results": [{"rows": [[1]]}]})
        if path == "/api/exec":
            return httpx.Response(200, json={"results": [{"rows": []}]})
        return httpx.Response(404, json={"error": {"message": "not found"}})


@pytest.fixture()
def stub() -> ConnectCloudStub:
    return ConnectCloudStub()


@pytest.fixture()
def toolset(stub: ConnectCloudStub) -> Iterator[ConnectCloudToolset]:
    client = ConnectCloudApiClient(
        "http://mock/api",
        username="me@example.com",
        pat="token",
        client=httpx.Client(transport=httpx.MockTransport(stub)),
    )
    resolver = InstructionResolver(cache=InstructionsCache(default_ttl=900))
    backends = ConnectCloudToolset(client, resolver)
    yield backends
    backends.close()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        CDATA_USERNAME="me@example.com",
        CDATA_PAT="token",
        CDATA_API_URL="http://mock/api",
        TRANSPORT_TYPE="http",
        HOST="127.0.0.1",
        PORT=8765,
    )
