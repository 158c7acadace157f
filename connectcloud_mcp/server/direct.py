"""Session-less JSON-RPC 2.0 endpoint (``POST /direct``).

Simple HTTP clients can call a subset of the tools without an MCP session:

.. code-block:: json

    {"jsonrpc": "2.0", "id": 7, "method": "getTables", "params": {"catalogName": "Salesforce1"}}

The request ``id`` doubles as the correlation id in log lines. Successful
calls return ``{"jsonrpc": "2.0", "result": ..., "id": ...}``; failures return
a JSON-RPC error object.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse

from connectcloud_mcp.info_provider.connect_cloud import ConnectCloudApiError
from connectcloud_mcp.info_provider.instructions import InstructionResolutionError

from .tools import ConnectCloudToolset

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
BACKEND_ERROR = -32000


class InvalidParamsError(ValueError):
    """Raised by a dispatcher when required params are missing or mistyped."""


def rpc_result(result: Any, request_id: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "result": result, "id": request_id}


def rpc_error(code: int, message: str, request_id: Any = None, data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "error": error, "id": request_id}


def _required(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidParamsError(f"'{key}' is required and must be a non-empty string")
    return value


def _optional(params: Dict[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidParamsError(f"'{key}' must be a string")
    return value


def _is_request(payload: Any) -> bool:
    if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0":
        return False
    method = payload.get("method")
    return isinstance(method, str) and bool(method)


Dispatcher = Callable[[ConnectCloudToolset, Dict[str, Any], str], Any]

DIRECT_METHODS: Dict[str, Dispatcher] = {
    "getCatalogs": lambda ts, p, rid: ts.client.metadata.catalogs(),
    "getSchemas": lambda ts, p, rid: ts.client.metadata.schemas(_optional(p, "catalogName")),
    "getTables": lambda ts, p, rid: ts.client.metadata.tables(
        _optional(p, "catalogName"), _optional(p, "schemaName"), _optional(p, "tableName")
    ),
    "getColumns": lambda ts, p, rid: ts.client.metadata.columns(
        _optional(p, "catalogName"), _optional(p, "schemaName"), _optional(p, "tableName"), _optional(p, "columnName")
    ),
    "queryData": lambda ts, p, rid: ts.client.query.query(
        _required(p, "query"), _optional(p, "defaultSchema"), p.get("schemaOnly"), p.get("parameters")
    ),
    "execData": lambda ts, p, rid: ts.client.query.exec(
        _required(p, "procedure"), _optional(p, "defaultSchema"), p.get("parameters")
    ),
    "getInstructions": lambda ts, p, rid: ts.get_instructions(
        _optional(p, "driverName"), _optional(p, "connectionId"), correlation_id=rid
    ),
}


def dispatch(toolset: ConnectCloudToolset, payload: Any) -> Dict[str, Any]:
    """Validate one JSON-RPC request object and run the named method.

    Returns the JSON-RPC response object; never raises for request-level problems.
    """
    if not _is_request(payload):
        request_id = payload.get("id") if isinstance(payload, dict) else None
        return rpc_error(INVALID_REQUEST, "Invalid Request: Not a valid JSON-RPC 2.0 request", request_id)

    method = payload["method"]
    request_id = payload.get("id")
    rid = str(request_id) if request_id is not None else "-"
    params = payload.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return rpc_error(INVALID_PARAMS, "Invalid params: expected an object", request_id)

    handler = DIRECT_METHODS.get(method)
    if handler is None:
        logger.warning("[%s] /direct: unknown method '%s'", rid, method)
        return rpc_error(METHOD_NOT_FOUND, f"Method '{method}' not found", request_id)

    logger.info("[%s] /direct: processing method %s", rid, method)
    try:
        result = handler(toolset, params, rid)
    except InvalidParamsError as exc:
        return rpc_error(INVALID_PARAMS, f"Invalid params: {exc}", request_id)
    except ConnectCloudApiError as exc:
        logger.error("[%s] /direct: %s failed: %s", rid, method, exc)
        return rpc_error(BACKEND_ERROR, str(exc), request_id, data={"statusCode": exc.status_code})
    except InstructionResolutionError as exc:
        logger.error("[%s] /direct: %s failed: %s", rid, method, exc)
        return rpc_error(BACKEND_ERROR, str(exc), request_id)
    except Exception as exc:
        logger.exception("[%s] /direct: unexpected error in %s", rid, method)
        return rpc_error(INTERNAL_ERROR, f"Internal error: {exc}", request_id)

    logger.debug("[%s] /direct: %s succeeded", rid, method)
    return rpc_result(result, request_id)


def direct_endpoint(toolset: ConnectCloudToolset) -> Callable[[Request], Any]:
    """Build the Starlette handler for ``POST /direct`` bound to ``toolset``."""

    async def handle(request: Request) -> JSONResponse:
        try:
            payload = json.loads(await request.body())
        except ValueError as exc:
            logger.error("/direct: JSON parsing error: %s", exc)
            return JSONResponse(rpc_error(PARSE_ERROR, "Parse error: Invalid JSON"), status_code=400)

        response = await run_in_threadpool(dispatch, toolset, payload)
        error: Optional[Dict[str, Any]] = response.get("error")
        status_code = 400 if error is not None and error["code"] == INVALID_REQUEST else 200
        return JSONResponse(response, status_code=status_code)

    return handle
