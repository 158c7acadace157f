"""MCP tool registration for the Connect Cloud gateway.

Tools are thin closures over a :class:`ConnectCloudToolset`: they forward
their arguments to the Connect Cloud API client (or the instruction resolver),
render the result as pretty-printed JSON text and turn backend failures into
MCP tool errors. Argument names are camelCase because they are the public
tool schema.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Callable, Dict, List, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field
from starlette.concurrency import run_in_threadpool

from connectcloud_mcp.info_provider.connect_cloud import ConnectCloudApiClient, ConnectCloudApiError
from connectcloud_mcp.info_provider.instructions import InstructionResolutionError, InstructionResolver

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"

CatalogName = Annotated[Optional[str], Field(description="Optional catalog name to filter by")]
SchemaName = Annotated[Optional[str], Field(description="Optional schema name to filter by")]
TableName = Annotated[Optional[str], Field(description="Optional table name to filter by")]
DefaultSchema = Annotated[
    Optional[str], Field(description="Schema to use if tables are not prefixed with a schema name")
]


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


class ConnectCloudToolset:
    """Backends shared by the MCP tools and the ``/direct`` route."""

    def __init__(self, client: ConnectCloudApiClient, resolver: InstructionResolver) -> None:
        self.client = client
        self.resolver = resolver

    def get_instructions(
        self,
        driver_name: Optional[str] = None,
        connection_id: Optional[str] = None,
        *,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Resolve instructions and attach the request context.

        Raises:
            InstructionResolutionError: If no document could be produced.
        """
        resolved = self.resolver.resolve(driver_name or "", connection_id, correlation_id=correlation_id)
        payload = resolved.instructions.to_payload()
        payload["requestContext"] = {
            "requestedDriver": driver_name or NOT_SPECIFIED,
            "canonicalDriver": resolved.canonical_id,
            "connectionId": connection_id or NOT_SPECIFIED,
            "source": resolved.source.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "supportedDrivers": self.resolver.local_store.supported_drivers(),
        }
        return payload

    def close(self) -> None:
        """Close the HTTP clients owned by the backends."""
        self.client.close()
        close_remote = getattr(self.resolver.remote, "close", None)
        if close_remote is not None:
            close_remote()


def run_tool(operation: str, call: Callable[[str], Any]) -> str:
    """Run one tool call and render its result as JSON text.

    ``call`` receives the correlation id generated for this invocation.

    Raises:
        ToolError: When the backend reports a failure.
    """
    rid = new_correlation_id()
    logger.debug("[%s] tool %s called", rid, operation)
    try:
        result = call(rid)
    except (ConnectCloudApiError, InstructionResolutionError) as exc:
        logger.error("[%s] tool %s failed: %s", rid, operation, exc)
        raise ToolError(f"Error: {exc}") from exc
    return json.dumps(result, indent=2)


async def run_tool_in_thread(operation: str, call: Callable[[str], Any]) -> str:
    """Run :func:`run_tool` on a worker thread; backend calls are blocking HTTP."""
    return await run_in_threadpool(run_tool, operation, call)


def register_tools(mcp: FastMCP, toolset: ConnectCloudToolset) -> None:
    """Register all Connect Cloud tools on the given FastMCP instance."""
    client = toolset.client

    @mcp.tool(
        name="queryData",
        description="Execute SQL queries against connected data sources and retrieve results",
    )
    async def query_data(
        query: Annotated[
            str, Field(description="The SQL statement(s) to execute. Separate multiple statements with semi-colons")
        ],
        defaultSchema: DefaultSchema = None,
        schemaOnly: Annotated[
            Optional[bool], Field(description="If true, the result only includes column metadata")
        ] = None,
        parameters: Annotated[
            Optional[Dict[str, Any]],
            Field(description="A JSON object containing query parameters. All parameter names must begin with @"),
        ] = None,
    ) -> str:
        return await run_tool_in_thread(
            "queryData", lambda rid: client.query.query(query, defaultSchema, schemaOnly, parameters)
        )

    @mcp.tool(
        name="batchData",
        description="Execute batch operations (INSERT, UPDATE, DELETE) against connected data sources",
    )
    async def batch_data(
        query: Annotated[str, Field(description="The batch INSERT, UPDATE, or DELETE statement to execute")],
        defaultSchema: DefaultSchema = None,
        parameters: Annotated[
            Optional[List[Dict[str, Any]]],
            Field(description="An array of parameter sets, one per item in the batch"),
        ] = None,
    ) -> str:
        return await run_tool_in_thread("batchData", lambda rid: client.query.batch(query, defaultSchema, parameters))

    @mcp.tool(name="execData", description="Execute stored procedures against connected data sources")
    async def exec_data(
        procedure: Annotated[str, Field(description="The name of the stored procedure to execute")],
        defaultSchema: Annotated[
            Optional[str], Field(description="Schema to use if the procedure is not prefixed with a schema name")
        ] = None,
        parameters: Annotated[
            Optional[Dict[str, Any]],
            Field(description="A JSON object containing procedure parameters. All parameter names must begin with @"),
        ] = None,
    ) -> str:
        return await run_tool_in_thread("execData", lambda rid: client.query.exec(procedure, defaultSchema, parameters))

    @mcp.tool(
        name="getQueryLogs",
        description="Retrieve execution logs for queries run against CData Connect Cloud",
    )
    async def get_query_logs(
        startTime: Annotated[str, Field(description="Timestamp in UTC")],
        endTime: Annotated[str, Field(description="Timestamp in UTC")],
        queryType: Annotated[Optional[int], Field(description="Optional query type")] = None,
    ) -> str:
        return await run_tool_in_thread("getQueryLogs", lambda rid: client.logs.list(startTime, endTime, queryType))

    @mcp.tool(
        name="downloadQueryLog",
        description="Download detailed logs for a specific query execution by ID",
    )
    async def download_query_log(
        queryId: Annotated[str, Field(description="The query for which the logs need to be downloaded")],
    ) -> str:
        return await run_tool_in_thread("downloadQueryLog", lambda rid: client.logs.download(queryId))

    @mcp.tool(
        name="getCatalogs",
        description="Retrieve a list of available data catalogs or connections from CData Connect Cloud",
    )
    async def get_catalogs() -> str:
        return await run_tool_in_thread("getCatalogs", lambda rid: client.metadata.catalogs())

    @mcp.tool(
        name="getSchemas",
        description="Retrieve a list of available database schemas from CData Connect Cloud for a specific catalog",
    )
    async def get_schemas(catalogName: CatalogName = None) -> str:
        return await run_tool_in_thread("getSchemas", lambda rid: client.metadata.schemas(catalogName))

    @mcp.tool(
        name="getTables",
        description=(
            "Retrieve a list of available database tables from CData Connect Cloud "
            "for a specific catalog and schema"
        ),
    )
    async def get_tables(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
    ) -> str:
        return await run_tool_in_thread(
            "getTables", lambda rid: client.metadata.tables(catalogName, schemaName, tableName)
        )

    @mcp.tool(
        name="getColumns",
        description=(
            "Retrieve a list of available database columns from CData Connect Cloud "
            "for a specific catalog, schema, and table"
        ),
    )
    async def get_columns(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
        columnName: Annotated[Optional[str], Field(description="Optional column name to filter by")] = None,
    ) -> str:
        return await run_tool_in_thread(
            "getColumns",
            lambda rid: client.metadata.columns(catalogName, schemaName, tableName, columnName),
        )

    @mcp.tool(
        name="getPrimaryKeys",
        description=(
            "Retrieve a list of primary keys from CData Connect Cloud for a specific catalog, schema, and table"
        ),
    )
    async def get_primary_keys(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
    ) -> str:
        return await run_tool_in_thread(
            "getPrimaryKeys", lambda rid: client.metadata.primary_keys(catalogName, schemaName, tableName)
        )

    @mcp.tool(
        name="getExportedKeys",
        description=(
            "Retrieve the foreign keys that reference a table from CData Connect Cloud "
            "for a specific catalog, schema, and table"
        ),
    )
    async def get_exported_keys(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
    ) -> str:
        return await run_tool_in_thread(
            "getExportedKeys", lambda rid: client.metadata.exported_keys(catalogName, schemaName, tableName)
        )

    @mcp.tool(
        name="getImportedKeys",
        description=(
            "Retrieve the foreign keys declared by a table from CData Connect Cloud "
            "for a specific catalog, schema, and table"
        ),
    )
    async def get_imported_keys(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
    ) -> str:
        return await run_tool_in_thread(
            "getImportedKeys", lambda rid: client.metadata.imported_keys(catalogName, schemaName, tableName)
        )

    @mcp.tool(
        name="getIndexes",
        description="Retrieve a list of indexes from CData Connect Cloud for a specific catalog, schema, and table",
    )
    async def get_indexes(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        tableName: TableName = None,
        indexName: Annotated[Optional[str], Field(description="Optional index name to filter by")] = None,
    ) -> str:
        return await run_tool_in_thread(
            "getIndexes", lambda rid: client.metadata.indexes(catalogName, schemaName, tableName, indexName)
        )

    @mcp.tool(
        name="getProcedures",
        description=(
            "Retrieve a list of stored procedures from CData Connect Cloud for a specific catalog and schema"
        ),
    )
    async def get_procedures(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        procedureName: Annotated[Optional[str], Field(description="Optional procedure name to filter by")] = None,
    ) -> str:
        return await run_tool_in_thread(
            "getProcedures", lambda rid: client.metadata.procedures(catalogName, schemaName, procedureName)
        )

    @mcp.tool(
        name="getProcedureParameters",
        description=(
            "Retrieve a list of stored procedure parameters from CData Connect Cloud "
            "for a specific catalog, schema, and procedure"
        ),
    )
    async def get_procedure_parameters(
        catalogName: CatalogName = None,
        schemaName: SchemaName = None,
        procedureName: Annotated[
            Optional[str], Field(description="Optional procedure name to filter parameters by")
        ] = None,
        parameterName: Annotated[Optional[str], Field(description="Optional parameter name to filter by")] = None,
    ) -> str:
        return await run_tool_in_thread(
            "getProcedureParameters",
            lambda rid: client.metadata.procedure_parameters(catalogName, schemaName, procedureName, parameterName),
        )

    @mcp.tool(
        name="getInstructions",
        description=(
            "Get driver-specific guidance (data model, key tables, query patterns, field conventions, "
            "limitations) for the data source behind a connection. Call this before writing queries "
            "against an unfamiliar driver."
        ),
    )
    async def get_instructions(
        driverName: Annotated[
            Optional[str],
            Field(description="Driver name of the connection, e.g. 'Azure DevOps' or 'Salesforce'"),
        ] = None,
        connectionId: Annotated[
            Optional[str], Field(description="Optional connection id, used for context only")
        ] = None,
    ) -> str:
        return await run_tool_in_thread(
            "getInstructions",
            lambda rid: toolset.get_instructions(driverName, connectionId, correlation_id=rid),
        )

    logger.debug("Registered Connect Cloud tools on '%s'", mcp.name)
