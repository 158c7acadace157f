"""SQL usage prompts.

Each prompt produces a user/assistant message pair with guidance on working
with the query tools. ``pagination`` takes an optional ``dialect`` argument;
``sqlserver`` switches the example to ``OFFSET ... FETCH NEXT`` syntax.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.prompts.base import AssistantMessage, Message, UserMessage

logger = logging.getLogger(__name__)

_LIMIT_RESULTS = """# Result Set Limiting
When using the `queryData` tool, always include LIMIT/TOP clauses in your queries to prevent excessive result sets. For example:
```sql
SELECT * FROM table_name LIMIT 10;
-- or for SQL Server
SELECT TOP 10 * FROM table_name;
```
Limiting results to 10-20 rows is recommended unless specifically instructed otherwise."""

_EXPLORE_SCHEMA = """# Schema Exploration Workflow
Before querying an unfamiliar database:
1. Use `getCatalogs` to identify available data sources
2. Use `getSchemas` with the relevant catalog to find available schemas
3. Use `getTables` to discover tables within the schema of interest
4. Use `getColumns` to understand the structure of specific tables
5. Use `getInstructions` with the connection's driver for data-model hints"""

_SQLSERVER_PAGINATION = """-- SQL Server pagination (2012+)
-- Initial query
SELECT * FROM table_name ORDER BY id OFFSET 0 ROWS FETCH NEXT 10 ROWS ONLY;

-- Subsequent queries
SELECT * FROM table_name ORDER BY id OFFSET 10 ROWS FETCH NEXT 10 ROWS ONLY;"""

_STANDARD_PAGINATION = """-- Standard SQL pagination
-- Initial query
SELECT * FROM table_name ORDER BY id LIMIT 10 OFFSET 0;

-- Subsequent queries
SELECT * FROM table_name ORDER BY id LIMIT 10 OFFSET 10;"""

_PARAMETERIZED_QUERIES = """# Parameterized Query Usage
Always use parameters for dynamic values to prevent SQL injection:
```
-- Query with parameters
SELECT * FROM customers WHERE region = @region AND status = @status LIMIT 10;

-- Parameters object
{
  "@region": "West",
  "@status": "Active"
}
```

Never concatenate user input directly into SQL strings. Always use the parameters object to pass variable data."""

_HANDLE_RESULTS = """# Handling Empty or Large Results
Consider these strategies when dealing with potentially empty or large result sets:

- Check if results are empty before proceeding with analysis
- For large results, consider aggregations or filtering before fetching
- Use COUNT(*) queries to understand result size before fetching all rows

Example to check result size first:
```sql
SELECT COUNT(*) as total_count FROM table_name WHERE condition;
```

If the count is manageable, proceed with the actual query:
```sql
SELECT * FROM table_name WHERE condition LIMIT 100;
```"""

_ERROR_HANDLING = """# Error Handling
If a query fails, try these troubleshooting steps:

1. Checking table and column names
   - Verify spelling and case sensitivity
   - Ensure the table exists in the current schema

2. Verifying parameter formats
   - Check data types match expected formats
   - Ensure date formats are correct

3. Simplifying the query complexity
   - Break down complex queries into simpler parts
   - Test individual components separately

4. Ensuring proper permissions for the requested operation
   - Verify connection has SELECT, INSERT, UPDATE permissions as needed"""


def limit_results() -> List[Message]:
    return [
        UserMessage(
            "Provide guidance on limiting result sets when querying databases to prevent excessive data retrieval."
        ),
        AssistantMessage(_LIMIT_RESULTS),
    ]


def explore_schema() -> List[Message]:
    return [
        UserMessage("What's the recommended workflow for exploring an unfamiliar database schema?"),
        AssistantMessage(_EXPLORE_SCHEMA),
    ]


def pagination(dialect: Optional[str] = None) -> List[Message]:
    dialect = (dialect or "standard").strip().lower() or "standard"
    example = _SQLSERVER_PAGINATION if dialect == "sqlserver" else _STANDARD_PAGINATION
    return [
        UserMessage(f"Provide patterns for implementing pagination with SQL queries for {dialect} dialect."),
        AssistantMessage(
            "# Pagination for Large Result Sets\n"
            "For queries that may return large result sets, implement pagination:\n"
            f"```sql\n{example}\n```\n\n"
            "This approach allows you to retrieve data in manageable chunks, "
            "improving performance and user experience."
        ),
    ]


def parameterized_queries() -> List[Message]:
    return [
        UserMessage("How should I use parameters in SQL queries to prevent SQL injection?"),
        AssistantMessage(_PARAMETERIZED_QUERIES),
    ]


def handle_results() -> List[Message]:
    return [
        UserMessage("What strategies should I use for handling empty or large result sets?"),
        AssistantMessage(_HANDLE_RESULTS),
    ]


def error_handling() -> List[Message]:
    return [
        UserMessage("What troubleshooting steps should I take when a database query fails?"),
        AssistantMessage(_ERROR_HANDLING),
    ]


# name -> (description, builder)
PROMPTS: Dict[str, Tuple[str, Callable[..., List[Message]]]] = {
    "limit-results": ("Get guidance on limiting result sets when querying databases", limit_results),
    "explore-schema": ("Get workflow for exploring an unfamiliar database schema", explore_schema),
    "pagination": ("Get patterns for implementing pagination with SQL queries", pagination),
    "parameterized-queries": (
        "Get guidance on using parameters in SQL queries to prevent SQL injection",
        parameterized_queries,
    ),
    "handle-results": ("Get strategies for handling empty or large result sets", handle_results),
    "error-handling": ("Get troubleshooting steps for database query errors", error_handling),
}


def register_prompts(mcp: FastMCP) -> None:
    """Register every SQL usage prompt on the given FastMCP instance."""
    for name, (description, builder) in PROMPTS.items():
        mcp.prompt(name=name, description=description)(builder)
        logger.debug("Registered prompt '%s'", name)
