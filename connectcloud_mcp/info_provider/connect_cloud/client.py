"""Connect Cloud API client

Overview
--------
Thin, focused HTTP client for the CData Connect Cloud REST API. The MCP tool
surface uses it to browse metadata, run SQL, execute stored procedures and
read query logs. Responses are returned as parsed JSON; their shape is owned
by Connect Cloud and passed through to MCP clients untouched.

Key features
------------
- Namespaced surface:
  - ``metadata``: catalogs, schemas, tables, columns, keys, indexes, procedures
  - ``query``: query / batch / exec
  - ``logs``: list and download query logs
- Request bodies built from typed DTOs (``QueryRequest`` etc.).
- HTTP Basic authentication with the account username and a personal access token.

Errors
------
Every failure (missing credentials, transport errors, non-2xx statuses,
non-JSON bodies) is raised as ``ConnectCloudApiError`` carrying the status
code and server details where available.

Usage
-----
>>> client = ConnectCloudApiClient("https://cloud.cdata.com/api", username="me@example.com", pat="...")
>>> catalogs = client.metadata.catalogs()
>>> rows = client.query.query("SELECT * FROM [Salesforce1].[Salesforce].[Account] LIMIT 10")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .errors import ConnectCloudApiError
from .models import BatchRequest, ExecRequest, QueryLogListRequest, QueryRequest

_QUERY_PREVIEW_CHARS = 50


def _preview(query: str) -> str:
    if len(query) > _QUERY_PREVIEW_CHARS:
        return query[:_QUERY_PREVIEW_CHARS] + "..."
    return query


def _filters(**kwargs: Optional[str]) -> Dict[str, str]:
    """Keep only the filters the caller actually provided."""
    return {key: value for key, value in kwargs.items() if value}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    return response.reason_phrase or str(body)


class ConnectCloudApiClient:
    """Thin HTTP client for the Connect Cloud API.

    Design
    ------
    - Keeps a small, explicit surface that mirrors the REST endpoints.
    - Groups endpoints into namespaces (``metadata``, ``query``, ``logs``).
    - Logs one line per successful call; raises typed errors otherwise.
    """

    def __init__(
        self,
        base_url: str,
        *,
        username: Optional[str] = None,
        pat: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Create a Connect Cloud API client.

        Args:
            base_url: Base URL of the API (e.g., ``https://cloud.cdata.com/api``).
            username: Connect Cloud account username.
            pat: Personal access token for ``username``.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.Client`` to use.
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self._pat = pat
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

        self._metadata = _MetadataNamespace(self)
        self._query = _QueryNamespace(self)
        self._logs = _QueryLogsNamespace(self)

    @property
    def metadata(self) -> "_MetadataNamespace":
        """Catalog/schema/table/column/key/index/procedure browsing."""
        return self._metadata

    @property
    def query(self) -> "_QueryNamespace":
        """SQL query, batch and stored procedure execution."""
        return self._query

    @property
    def logs(self) -> "_QueryLogsNamespace":
        """Query log listing and download."""
        return self._logs

    def _auth(self) -> httpx.BasicAuth:
        if not (self.username and self._pat):
            raise ConnectCloudApiError(
                "Connect Cloud credentials are not configured; set CDATA_USERNAME and CDATA_PAT"
            )
        return httpx.BasicAuth(self.username, self._pat)

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one API request and return the parsed JSON body.

        Args:
            method: HTTP method.
            path: Path relative to ``base_url`` (leading slash included).
            operation: Name used in log lines and error messages.
            params: Query string parameters.
            body: JSON request body.
            details: Non-sensitive context added to the success log line.

        Raises:
            ConnectCloudApiError: On any failure.
        """
        auth = self._auth()
        try:
            r = self._client.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(),
                params=params or None,
                json=body,
                auth=auth,
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ConnectCloudApiError(
                f"{operation} failed ({e.response.status_code}): {_error_message(e.response)}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise ConnectCloudApiError(f"{operation} failed: {e}") from e

        try:
            data = r.json()
        except ValueError as e:
            raise ConnectCloudApiError(
                f"{operation} returned a non-JSON response", status_code=r.status_code, details=r.text
            ) from e

        self._logger.info("ConnectCloudApiClient.%s succeeded; details=%s", operation, details or {})
        return data

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()


class _MetadataNamespace:
    def __init__(self, client: ConnectCloudApiClient) -> None:
        self._client = client

    def _get(self, path: str, operation: str, filters: Dict[str, str]) -> Any:
        return self._client.request("GET", path, operation=operation, params=filters, details=filters)

    def catalogs(self) -> Any:
        """List catalogs (connections).

        API
        ---
        - Method/Path: ``GET /catalogs``
        """
        return self._get("/catalogs", "getCatalogs", {})

    def schemas(self, catalog_name: Optional[str] = None) -> Any:
        """List schemas, optionally within one catalog.

        API
        ---
        - Method/Path: ``GET /schemas``
        - Query: ``catalogName``
        """
        return self._get("/schemas", "getSchemas", _filters(catalogName=catalog_name))

    def tables(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Any:
        """List tables and views.

        API
        ---
        - Method/Path: ``GET /tables``
        - Query: ``catalogName``, ``schemaName``, ``tableName``
        """
        return self._get(
            "/tables",
            "getTables",
            _filters(catalogName=catalog_name, schemaName=schema_name, tableName=table_name),
        )

    def columns(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
        column_name: Optional[str] = None,
    ) -> Any:
        """List columns.

        API
        ---
        - Method/Path: ``GET /columns``
        - Query: ``catalogName``, ``schemaName``, ``tableName``, ``columnName``
        """
        return self._get(
            "/columns",
            "getColumns",
            _filters(
                catalogName=catalog_name,
                schemaName=schema_name,
                tableName=table_name,
                columnName=column_name,
            ),
        )

    def primary_keys(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Any:
        """List primary key columns (``GET /primaryKeys``)."""
        return self._get(
            "/primaryKeys",
            "getPrimaryKeys",
            _filters(catalogName=catalog_name, schemaName=schema_name, tableName=table_name),
        )

    def exported_keys(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Any:
        """List foreign keys referencing a table (``GET /exportedKeys``)."""
        return self._get(
            "/exportedKeys",
            "getExportedKeys",
            _filters(catalogName=catalog_name, schemaName=schema_name, tableName=table_name),
        )

    def imported_keys(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Any:
        """List foreign keys declared by a table (``GET /importedKeys``)."""
        return self._get(
            "/importedKeys",
            "getImportedKeys",
            _filters(catalogName=catalog_name, schemaName=schema_name, tableName=table_name),
        )

    def indexes(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        table_name: Optional[str] = None,
        index_name: Optional[str] = None,
    ) -> Any:
        """List indexes (``GET /indexes``)."""
        return self._get(
            "/indexes",
            "getIndexes",
            _filters(
                catalogName=catalog_name,
                schemaName=schema_name,
                tableName=table_name,
                indexName=index_name,
            ),
        )

    def procedures(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        procedure_name: Optional[str] = None,
    ) -> Any:
        """List stored procedures (``GET /procedures``)."""
        return self._get(
            "/procedures",
            "getProcedures",
            _filters(catalogName=catalog_name, schemaName=schema_name, procedureName=procedure_name),
        )

    def procedure_parameters(
        self,
        catalog_name: Optional[str] = None,
        schema_name: Optional[str] = None,
        procedure_name: Optional[str] = None,
        param_name: Optional[str] = None,
    ) -> Any:
        """List stored procedure parameters (``GET /procedureParameters``)."""
        return self._get(
            "/procedureParameters",
            "getProcedureParameters",
            _filters(
                catalogName=catalog_name,
                schemaName=schema_name,
                procedureName=procedure_name,
                paramName=param_name,
            ),
        )


class _QueryNamespace:
    def __init__(self, client: ConnectCloudApiClient) -> None:
        self._client = client

    def query(
        self,
        query: str,
        default_schema: Optional[str] = None,
        schema_only: Optional[bool] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute SQL statements.

        API
        ---
        - Method/Path: ``POST /query``
        - Body: ``QueryRequest``
        """
        request = QueryRequest(
            query=query, default_schema=default_schema, schema_only=schema_only, parameters=parameters
        )
        return self._client.request(
            "POST",
            "/query",
            operation="queryData",
            body=request.to_body(),
            details={"query": _preview(query), "defaultSchema": default_schema, "schemaOnly": schema_only},
        )

    def batch(
        self,
        query: str,
        default_schema: Optional[str] = None,
        parameters: Optional[List[Dict[str, Any]]] = None,
    ) -> Any:
        """Execute a batch INSERT, UPDATE or DELETE.

        API
        ---
        - Method/Path: ``POST /batch``
        - Body: ``BatchRequest``
        """
        request = BatchRequest(query=query, default_schema=default_schema, parameters=parameters)
        return self._client.request(
            "POST",
            "/batch",
            operation="batchData",
            body=request.to_body(),
            details={"query": _preview(query), "defaultSchema": default_schema, "batchSize": len(parameters or [])},
        )

    def exec(
        self,
        procedure: str,
        default_schema: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Execute a stored procedure.

        API
        ---
        - Method/Path: ``POST /exec``
        - Body: ``ExecRequest``
        """
        request = ExecRequest(procedure=procedure, default_schema=default_schema, parameters=parameters)
        return self._client.request(
            "POST",
            "/exec",
            operation="execData",
            body=request.to_body(),
            details={
                "procedure": procedure,
                "defaultSchema": default_schema,
                "parameterCount": len(parameters or {}),
            },
        )


class _QueryLogsNamespace:
    def __init__(self, client: ConnectCloudApiClient) -> None:
        self._client = client

    def list(self, start_time: str, end_time: str, query_type: Optional[int] = None) -> Any:
        """List query logs in a time window.

        API
        ---
        - Method/Path: ``POST /log/query/list``
        - Body: ``QueryLogListRequest``
        """
        request = QueryLogListRequest(query_type=query_type, start_time=start_time, end_time=end_time)
        return self._client.request(
            "POST",
            "/log/query/list",
            operation="getQueryLogs",
            body=request.to_body(),
            details={"queryType": query_type, "startTime": start_time, "endTime": end_time},
        )

    def download(self, query_id: str) -> Any:
        """Download the detailed log of one query.

        API
        ---
        - Method/Path: ``GET /log/query/get/{query_id}``
        """
        encoded_id = quote(query_id, safe="")
        return self._client.request(
            "GET",
            f"/log/query/get/{encoded_id}",
            operation="downloadQueryLog",
            details={"queryId": query_id},
        )
