from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, List

import httpx
import pytest

from connectcloud_mcp.info_provider.connect_cloud import ConnectCloudApiClient, ConnectCloudApiError

BASE_URL = "http://mock/api"


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int, **response_kwargs: Any) -> None:
        self.status_code = status_code
        self.response_kwargs = response_kwargs
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.response_kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last.content)


def _client(recorder: Recorder, **kwargs) -> ConnectCloudApiClient:
    kwargs.setdefault("username", "me@example.com")
    kwargs.setdefault("pat", "token")
    return ConnectCloudApiClient(
        BASE_URL, client=httpx.Client(transport=httpx.MockTransport(recorder)), **kwargs
    )


@pytest.fixture()
def ok() -> Recorder:
    return Recorder(200, json={"results": [{"schema": [], "rows": []}]})


def test_requests_use_basic_auth_and_json_headers(ok: Recorder) -> None:
    _client(ok).metadata.catalogs()

    expected = "Basic " + base64.b64encode(b"me@example.com:token").decode()
    assert ok.last.headers["Authorization"] == expected
    assert ok.last.headers["Accept"] == "application/json"
    assert ok.last.method == "GET"
    assert ok.last.url.path == "/api/catalogs"
    assert ok.last.url.query == b""


def test_missing_credentials_fail_before_any_request(ok: Recorder) -> None:
    client = _client(ok, username=None, pat=None)
    with pytest.raises(ConnectCloudApiError, match="CDATA_USERNAME"):
        client.metadata.catalogs()
    assert ok.requests == []


@pytest.mark.parametrize(
    "call,path,params",
    [
        (lambda c: c.metadata.schemas("Salesforce1"), "/api/schemas", {"catalogName": "Salesforce1"}),
        (
            lambda c: c.metadata.tables("Salesforce1", "Salesforce"),
            "/api/tables",
            {"catalogName": "Salesforce1", "schemaName": "Salesforce"},
        ),
        (
            lambda c: c.metadata.columns(table_name="Account", column_name="Id"),
            "/api/columns",
            {"tableName": "Account", "columnName": "Id"},
        ),
        (lambda c: c.metadata.primary_keys(table_name="Account"), "/api/primaryKeys", {"tableName": "Account"}),
        (lambda c: c.metadata.exported_keys("C", "S", "T"), "/api/exportedKeys", {"catalogName": "C", "schemaName": "S", "tableName": "T"}),
        (lambda c: c.metadata.imported_keys(schema_name="S"), "/api/importedKeys", {"schemaName": "S"}),
        (lambda c: c.metadata.indexes(index_name="IX_1"), "/api/indexes", {"indexName": "IX_1"}),
        (lambda c: c.metadata.procedures("C", procedure_name="P"), "/api/procedures", {"catalogName": "C", "procedureName": "P"}),
        (
            lambda c: c.metadata.procedure_parameters(procedure_name="P", param_name="@id"),
            "/api/procedureParameters",
            {"procedureName": "P", "paramName": "@id"},
        ),
    ],
)
def test_metadata_endpoints_send_only_provided_filters(ok: Recorder, call, path: str, params: Dict[str, str]) -> None:
    call(_client(ok))
    assert ok.last.method == "GET"
    assert ok.last.url.path == path
    assert dict(ok.last.url.params) == params


def test_query_posts_camel_case_body_without_nulls(ok: Recorder) -> None:
    result = _client(ok).query.query("SELECT 1", default_schema="Salesforce", parameters={"@id": {"value": 1}})

    assert result == {"results": [{"schema": [], "rows": []}]}
    assert ok.last.method == "POST"
    assert ok.last.url.path == "/api/query"
    assert ok.last_json() == {
        "query": "SELECT 1",
        "defaultSchema": "Salesforce",
        "parameters": {"@id": {"value": 1}},
    }


def test_query_schema_only_false_is_sent(ok: Recorder) -> None:
    _client(ok).query.query("SELECT 1", schema_only=False)
    assert ok.last_json() == {"query": "SELECT 1", "schemaOnly": False}


def test_batch_posts_parameter_sets(ok: Recorder) -> None:
    sets = [{"@name": {"dataType": 5, "value": "a"}}, {"@name": {"dataType": 5, "value": "b"}}]
    _client(ok).query.batch("INSERT INTO T (Name) VALUES (@name)", parameters=sets)
    assert ok.last.url.path == "/api/batch"
    assert ok.last_json()["parameters"] == sets


def test_exec_posts_procedure(ok: Recorder) -> None:
    _client(ok).query.exec("RefreshCache", default_schema="dbo")
    assert ok.last.url.path == "/api/exec"
    assert ok.last_json() == {"procedure": "RefreshCache", "defaultSchema": "dbo"}


def test_logs_list_and_download(ok: Recorder) -> None:
    client = _client(ok)
    client.logs.list("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z", query_type=1)
    assert ok.last.url.path == "/api/log/query/list"
    assert ok.last_json() == {
        "queryType": 1,
        "startTime": "2024-01-01T00:00:00Z",
        "endTime": "2024-01-02T00:00:00Z",
    }

    client.logs.download("q-123")
    assert ok.last.method == "GET"
    assert ok.last.url.path == "/api/log/query/get/q-123"


def test_download_query_log_escapes_the_query_id(ok: Recorder) -> None:
    _client(ok).logs.download("a/b?c")
    assert ok.last.url.raw_path == b"/api/log/query/get/a%2Fb%3Fc"
    assert not ok.last.url.query


def test_http_error_status_maps_to_api_error() -> None:
    recorder = Recorder(400, json={"error": {"code": "SYNTAX", "message": "Malformed SQL statement"}})
    with pytest.raises(ConnectCloudApiError) as exc_info:
        _client(recorder).query.query("SELEC 1")

    err = exc_info.value
    assert err.status_code == 400
    assert "Malformed SQL statement" in str(err)
    assert "queryData" in str(err)
    assert "SYNTAX" in err.details


def test_transport_error_maps_to_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = ConnectCloudApiClient(
        BASE_URL, username="u", pat="p", client=httpx.Client(transport=httpx.MockTransport(handler))
    )
    with pytest.raises(ConnectCloudApiError) as exc_info:
        client.metadata.catalogs()
    assert exc_info.value.status_code is None


def test_non_json_body_maps_to_api_error() -> None:
    recorder = Recorder(200, content=b"<html>maintenance</html>")
    with pytest.raises(ConnectCloudApiError, match="non-JSON"):
        _client(recorder).metadata.catalogs()


def test_success_log_truncates_long_queries(ok: Recorder, caplog) -> None:
    query = "SELECT " + ", ".join(f"Column{i}" for i in range(40)) + " FROM Account"
    with caplog.at_level(logging.INFO, logger="connectcloud_mcp.info_provider.connect_cloud.client"):
        _client(ok).query.query(query)

    message = caplog.records[-1].getMessage()
    assert query[:50] + "..." in message
    assert query not in message
    assert "token" not in message


def test_close_only_closes_owned_client() -> None:
    injected = httpx.Client()
    ConnectCloudApiClient(BASE_URL, client=injected).close()
    assert not injected.is_closed

    owned = ConnectCloudApiClient(BASE_URL)
    owned.close()
    assert owned._client.is_closed
