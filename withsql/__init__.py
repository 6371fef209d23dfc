"""withsql – parameterized SQL statements from declarative schemas.

Public API
----------
``with_sql``
    Bind a query executor and get a builder exposing ``select``,
    ``create`` / ``creates``, ``update`` / ``updates`` and
    ``delete`` / ``deletes``.  Each returns a ``Statement`` with
    ``execute()``, ``execute_async()`` and ``to_raw()``.

Every value in a schema reaches the SQL text as a ``$n`` placeholder;
batches share one parameter list and run inside BEGIN / COMMIT.

Example::

    from withsql import UNSET, with_sql

    sql = with_sql(executor)
    rows = sql.select({
        "columns": ["id", "name"],
        "from": "words",
        "where": {"or": {"name": {"ilike": term}, "createdBy": user or UNSET}},
        "order": {"by": "createdDate", "sort": "DESC"},
        "limit": 20,
    }).execute()

Re-exported types
-----------------
Schema models, ``CompiledSQL``, ``BuilderConfig``, ``RowFactory``,
executor protocols, and all error classes.
"""

from __future__ import annotations

import logging

from withsql.compile.base import CompiledSQL, SQLCompiler
from withsql.compile.builder import StatementBuilder
from withsql.compile.postgres import PostgresCompiler
from withsql.config import BuilderConfig
from withsql.errors import (
    CompilationError,
    DBError,
    DBErrorCode,
    ParseError,
    WithSQLError,
)
from withsql.execute.protocols import AsyncQueryExecutor, QueryExecutor
from withsql.facade import SQLBuilder, Statement, with_sql
from withsql.rows import RowFactory
from withsql.schema.statements import (
    CreateSchema,
    DeleteSchema,
    JoinClause,
    JoinType,
    RawQuery,
    SelectSchema,
    SortDirection,
    UpdateSchema,
)
from withsql.schema.values import UNSET

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core pipeline
    "with_sql",
    "SQLBuilder",
    "Statement",
    # Schema types
    "UNSET",
    "SelectSchema",
    "CreateSchema",
    "UpdateSchema",
    "DeleteSchema",
    "JoinClause",
    "JoinType",
    "RawQuery",
    "SortDirection",
    # Compilation
    "CompiledSQL",
    "SQLCompiler",
    "PostgresCompiler",
    "StatementBuilder",
    # Configuration
    "BuilderConfig",
    # Execution
    "QueryExecutor",
    "AsyncQueryExecutor",
    # Rows
    "RowFactory",
    # Errors
    "WithSQLError",
    "ParseError",
    "CompilationError",
    "DBError",
    "DBErrorCode",
]
