"""Connect Cloud request DTOs.

Request bodies for the POST endpoints of the Connect Cloud API. Bodies are
serialized with ``to_body()`` which drops unset fields, matching what the
service expects for optional arguments.

Endpoint mapping
----------------
- ``POST /query`` → ``QueryRequest``
- ``POST /batch`` → ``BatchRequest``
- ``POST /exec`` → ``ExecRequest``
- ``POST /log/query/list`` → ``QueryLogListRequest``
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..schemas.base import BaseSchema


class _RequestBody(BaseSchema):
    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class QueryRequest(_RequestBody):
    """Body for executing SQL statements.

    Examples:
        >>> QueryRequest(query="SELECT 1", default_schema="dbo").to_body()
        {'query': 'SELECT 1', 'defaultSchema': 'dbo'}
    """

    query: str = Field(..., description="SQL statement(s); separate multiple statements with semicolons.")
    default_schema: Optional[str] = Field(None, description="Schema for tables not prefixed with one.")
    schema_only: Optional[bool] = Field(None, description="Return column metadata only.")
    parameters: Optional[Dict[str, Any]] = Field(
        None, description="Query parameters keyed by name; names must begin with '@'."
    )


class BatchRequest(_RequestBody):
    """Body for batch INSERT/UPDATE/DELETE statements."""

    query: str
    default_schema: Optional[str] = None
    parameters: Optional[List[Dict[str, Any]]] = Field(
        None, description="One parameter set per batch item."
    )


class ExecRequest(_RequestBody):
    """Body for stored procedure execution."""

    procedure: str
    default_schema: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class QueryLogListRequest(_RequestBody):
    """Body for listing query logs in a time window."""

    query_type: Optional[int] = None
    start_time: str = Field(..., description="UTC timestamp of the window start.")
    end_time: str = Field(..., description="UTC timestamp of the window end.")
