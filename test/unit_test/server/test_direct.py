from __future__ import annotations

import pytest

from connectcloud_mcp.server.direct import (
    BACKEND_ERROR,
    DIRECT_METHODS,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    dispatch,
    rpc_error,
)


def test_supported_methods() -> None:
    assert set(DIRECT_METHODS) == {
        "getCatalogs",
        "getSchemas",
        "getTables",
        "getColumns",
        "queryData",
        "execData",
        "getInstructions",
    }


def test_successful_call_echoes_id(toolset) -> None:
    response = dispatch(toolset, {"jsonrpc": "2.0", "id": 7, "method": "getCatalogs"})
    assert response["jsonrpc"] == "2.0"
    assert response["id"] == 7
    assert response["result"]["results"][0]["rows"][0] == ["Salesforce1"]
    assert "error" not in response


def test_params_are_forwarded(toolset, stub) -> None:
    response = dispatch(
        toolset,
        {"jsonrpc": "2.0", "id": "a", "method": "getColumns", "params": {"tableName": "Account"}},
    )
    assert response["result"]["results"][0]["params"] == {"tableName": "Account"}


def test_get_instructions_uses_request_id_as_correlation_id(toolset, caplog) -> None:
    with caplog.at_level("DEBUG", logger="connectcloud_mcp.info_provider.instructions.resolver"):
        response = dispatch(
            toolset,
            {"jsonrpc": "2.0", "id": "req-99", "method": "getInstructions", "params": {"driverName": "SFDC"}},
        )
    assert response["result"]["requestContext"]["canonicalDriver"] == "salesforce"
    assert any("[req-99]" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    "payload",
    [
        {"id": 1, "method": "getCatalogs"},
        {"jsonrpc": "1.0", "id": 1, "method": "getCatalogs"},
        {"jsonrpc": "2.0", "id": 1},
        ["not", "an", "object"],
        {"jsonrpc": "2.0", "id": 1, "method": ["getCatalogs"]},
        {"jsonrpc": "2.0", "id": 1, "method": 42},
    ],
)
def test_invalid_requests(toolset, payload) -> None:
    response = dispatch(toolset, payload)
    assert response["error"]["code"] == INVALID_REQUEST


def test_unknown_method(toolset) -> None:
    response = dispatch(toolset, {"jsonrpc": "2.0", "id": 3, "method": "dropDatabase"})
    assert response["error"]["code"] == METHOD_NOT_FOUND
    assert response["id"] == 3


@pytest.mark.parametrize(
    "method,params",
    [("queryData", {}), ("queryData", {"query": 12}), ("execData", {"defaultSchema": "dbo"})],
)
def test_missing_required_params(toolset, method, params) -> None:
    response = dispatch(toolset, {"jsonrpc": "2.0", "id": 4, "method": method, "params": params})
    assert response["error"]["code"] == INVALID_PARAMS


def test_non_object_params(toolset) -> None:
    response = dispatch(toolset, {"jsonrpc": "2.0", "id": 5, "method": "getSchemas", "params": ["x"]})
    assert response["error"]["code"] == INVALID_PARAMS


def test_backend_error(toolset) -> None:
    response = dispatch(
        toolset, {"jsonrpc": "2.0", "id": 6, "method": "queryData", "params": {"query": "SELECT FAIL"}}
    )
    assert response["error"]["code"] == BACKEND_ERROR
    assert "Malformed SQL statement" in response["error"]["message"]
    assert response["error"]["data"] == {"statusCode": 400}


def test_rpc_error_omits_empty_data() -> None:
    assert rpc_error(-32603, "boom") == {"jsonrpc": "2.0", "error": {"code": -32603, "message": "boom"}, "id": None}


@pytest.mark.parametrize(
    "method,params",
    [
        ("getInstructions", {"driverName": 123}),
        ("getInstructions", {"driverName": "Salesforce", "connectionId": {"id": 1}}),
        ("getTables", {"catalogName": ["Salesforce1"]}),
    ],
)
def test_mistyped_optional_params(toolset, stub, method, params) -> None:
    response = dispatch(toolset, {"jsonrpc": "2.0", "id": 8, "method": method, "params": params})
    assert response["error"]["code"] == INVALID_PARAMS
    assert response["id"] == 8
    assert not stub.requests
