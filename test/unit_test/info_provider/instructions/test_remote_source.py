from __future__ import annotations

import json

import httpx
import pytest

from connectcloud_mcp.info_provider.instructions import (
    InstructionSource,
    InstructionSourceError,
    RemoteInstructionSource,
)



def _source(handler, **kwargs) -> RemoteInstructionSource:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return RemoteInstructionSource("http://mock/api/", client=client, **kwargs)


def test_fetch_success_sends_bearer_token_and_parses_document(make_payload) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=make_payload("Azure DevOps"))

    source = _source(handler, auth_token="secret")
    doc = source.fetch("azure-devops")

    assert doc is not None and doc.driver_name == "Azure DevOps"
    assert seen["path"] == "/api/driver-instructions/azure-devops"
    assert seen["auth"] == "Bearer secret"
    assert isinstance(source, InstructionSource)


def test_existing_bearer_prefix_is_not_doubled() -> None:
    source = RemoteInstructionSource("http://mock", auth_token="Bearer abc")
    assert source._headers()["Authorization"] == "Bearer abc"


def test_canonical_id_is_url_encoded() -> None:
    source = RemoteInstructionSource("http://mock/api")
    assert source.url_for("a b/c") == "http://mock/api/driver-instructions/a%20b%2Fc"


def test_token_provider_refreshes_token_per_request() -> None:
    tokens = iter(["t1", "t2"])
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(404)

    source = _source(handler, token_provider=lambda: next(tokens))
    source.fetch("a")
    source.fetch("b")
    assert seen == ["Bearer t1", "Bearer t2"]


def test_404_returns_none() -> None:
    source = _source(lambda request: httpx.Response(404, json={"error": "not found"}), auth_token="t")
    assert source.fetch("acmecrm") is None


@pytest.mark.parametrize("status", [401, 500, 503])
def test_error_status_raises_source_error(status: int) -> None:
    source = _source(lambda request: httpx.Response(status), auth_token="t")
    with pytest.raises(InstructionSourceError) as exc_info:
        source.fetch("salesforce")
    assert exc_info.value.source == "remote"
    assert f"HTTP {status}" in str(exc_info.value)


def test_transport_error_raises_source_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InstructionSourceError, match="request failed"):
        _source(handler, auth_token="t").fetch("salesforce")


def test_non_json_body_raises_source_error() -> None:
    source = _source(lambda request: httpx.Response(200, content=b"<html>"), auth_token="t")
    with pytest.raises(InstructionSourceError, match="invalid payload"):
        source.fetch("salesforce")


def test_invalid_document_raises_source_error() -> None:
    body = json.dumps({"driverName": "Salesforce"}).encode()
    source = _source(lambda request: httpx.Response(200, content=body), auth_token="t")
    with pytest.raises(InstructionSourceError, match="invalid payload"):
        source.fetch("salesforce")


def test_close_only_closes_owned_client() -> None:
    injected = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    RemoteInstructionSource("http://mock", client=injected).close()
    assert not injected.is_closed

    owned = RemoteInstructionSource("http://mock")
    owned.close()
    assert owned._client.is_closed
