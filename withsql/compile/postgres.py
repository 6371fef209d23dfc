"""PostgreSQL dialect compiler."""

from __future__ import annotations

from withsql.compile.base import SQLCompiler


class PostgresCompiler(SQLCompiler):
    """Emits PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``$1, $2, ...`` - the native server-side style used by
    ``asyncpg``, ``pg`` / ``@vercel/postgres`` style clients and
    :class:`~withsql.execute.psycopg.PsycopgExecutor` after rewriting.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self, position: int) -> str:
        return f"${position}"

    def in_list(self, column: str, placeholder: str) -> str:
        return f"{column}::TEXT = ANY(STRING_TO_ARRAY({placeholder}, ',')::TEXT[])"

    def list_position(self, column: str, placeholder: str) -> str:
        return f"ARRAY_POSITION(STRING_TO_ARRAY({placeholder}, ',')::TEXT[], {column}::TEXT)"

    def contains(self, column: str, placeholder: str) -> str:
        return f"{column} ILIKE '%' || {placeholder}::text || '%'"

    def text_equals(self, left: str, right: str) -> str:
        return f"{left}::TEXT = {right}::TEXT"
