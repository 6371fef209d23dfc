"""psycopg 3 adapter for the :class:`~withsql.execute.protocols.QueryExecutor` protocol.

Usage::

    import psycopg
    from withsql import with_sql
    from withsql.execute.psycopg import PsycopgExecutor

    conn = psycopg.connect(dsn, autocommit=True)
    sql = with_sql(PsycopgExecutor(conn))
    rows = sql.select({"columns": "name", "from": "words", "where": {"id": 1}}).execute()

The connection must be in autocommit mode: withsql issues ``BEGIN`` /
``COMMIT`` / ``ROLLBACK`` itself for batches.  Statements are sent through a
:class:`psycopg.ClientCursor`, which binds parameters client-side and so
accepts a multi-statement batch body together with its values.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

import psycopg
from psycopg.rows import dict_row

_POSITIONAL = re.compile(r"\$(\d+)")


def to_pyformat(query: str) -> str:
    """Rewrite ``$n`` placeholders to psycopg ``%(pn)s`` and escape literal ``%``."""
    return _POSITIONAL.sub(lambda m: f"%(p{m.group(1)})s", query.replace("%", "%%"))


class PsycopgExecutor:
    """Runs withsql statements on a psycopg 3 connection.

    Args:
        connection: An open ``psycopg.Connection`` in autocommit mode.

    ``query`` returns the rows of every result set produced by the text, as
    dicts, in order.  Statements that produce no rows contribute nothing.
    """

    def __init__(self, connection: psycopg.Connection) -> None:
        self._conn = connection

    def query(self, text: str, values: Sequence[Any] | None = None) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        with psycopg.ClientCursor(self._conn, row_factory=dict_row) as cur:
            if values:
                params = {f"p{i}": v for i, v in enumerate(values, start=1)}
                cur.execute(to_pyformat(text), params)
            else:
                cur.execute(text)
            while True:
                if cur.description is not None:
                    rows.extend(cur.fetchall())
                if not cur.nextset():
                    break
        return rows
