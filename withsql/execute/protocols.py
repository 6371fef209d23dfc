"""Query executor capabilities consumed by withsql.

Anything with a ``query(text, values)`` method works: a thin wrapper around
a database driver, a connection pool, or a test double.  ``BEGIN``,
``COMMIT`` and ``ROLLBACK`` are issued through the same method.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class QueryExecutor(Protocol):
    """Synchronous executor: runs one SQL text with positional values."""

    def query(self, text: str, values: Sequence[Any] | None = None) -> Any: ...


@runtime_checkable
class AsyncQueryExecutor(Protocol):
    """Asynchronous executor: ``await executor.query(text, values)``."""

    async def query(self, text: str, values: Sequence[Any] | None = None) -> Any: ...
