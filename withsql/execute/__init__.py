"""withsql execution layer: executor protocols and transaction framing."""
from withsql.execute.protocols import AsyncQueryExecutor, QueryExecutor
from withsql.execute.transaction import execute, execute_async

__all__ = [
    "AsyncQueryExecutor",
    "QueryExecutor",
    "execute",
    "execute_async",
]
