"""Public builder facade.

``with_sql(executor)`` returns a :class:`SQLBuilder`.  Each of its methods
validates a schema, compiles it under a fresh statement context and returns
a :class:`Statement` that can be run or inspected::

    sql = with_sql(executor)
    sql.select({"columns": "name", "from": "words", "where": {"name": "x"}}).to_raw()
    # CompiledSQL(query='SELECT name FROM words WHERE name = $1', values=['x'], ...)

    sql.creates([{"into": "words", "values": {...}}, ...]).execute()
    # BEGIN; INSERT ...;INSERT ...; COMMIT
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import Any, Union

from withsql.compile.base import CompiledSQL, SQLCompiler
from withsql.compile.builder import StatementBuilder
from withsql.config import BuilderConfig
from withsql.errors import WithSQLError
from withsql.execute.protocols import AsyncQueryExecutor, QueryExecutor
from withsql.execute.transaction import execute, execute_async
from withsql.schema.statements import (
    CreateSchema,
    DeleteSchema,
    SelectSchema,
    UpdateSchema,
    parse_schema,
)

logger = logging.getLogger(__name__)

Executor = Union[QueryExecutor, AsyncQueryExecutor]


class Statement:
    """A compiled statement bound to an executor.

    Args:
        compiled: The compiled SQL text and values.
        executor: Executor used by :meth:`execute` / :meth:`execute_async`.
        config: Builder configuration (controls value logging).
    """

    def __init__(
        self,
        compiled: CompiledSQL,
        executor: Executor | None,
        config: BuilderConfig,
    ) -> None:
        self._compiled = compiled
        self._executor = executor
        self._config = config

    def execute(self) -> Any:
        """Run the statement and return the executor's result.

        Batches run inside BEGIN / COMMIT and are rolled back on failure;
        executor errors propagate unchanged.
        """
        self._log_execution()
        return execute(
            self._require_executor(asynchronous=False),
            self._compiled.query,
            self._compiled.values,
            self._compiled.transaction,
        )

    async def execute_async(self) -> Any:
        """Run the statement on an :class:`AsyncQueryExecutor`."""
        self._log_execution()
        return await execute_async(
            self._require_executor(asynchronous=True),
            self._compiled.query,
            self._compiled.values,
            self._compiled.transaction,
        )

    def to_raw(self) -> CompiledSQL:
        """Return the compiled text and values without running anything."""
        return CompiledSQL(
            query=self._compiled.query,
            values=list(self._compiled.values),
            transaction=self._compiled.transaction,
        )

    def _require_executor(self, asynchronous: bool) -> Any:
        if self._executor is None:
            raise WithSQLError("No query executor configured; use to_raw() or pass one to with_sql().")
        if inspect.iscoroutinefunction(self._executor.query) != asynchronous:
            if asynchronous:
                raise WithSQLError("Executor.query is synchronous; use execute() instead of execute_async().")
            raise WithSQLError("Executor.query is a coroutine function; use execute_async() instead of execute().")
        return self._executor

    def _log_execution(self) -> None:
        if self._config.log_values:
            logger.debug("Executing: %s %r", self._compiled.query, self._compiled.values)
        else:
            logger.debug("Executing: %s", self._compiled.query)

    def __repr__(self) -> str:
        return f"Statement({self._compiled.query!r})"


class SQLBuilder:
    """Builds statements from schemas and binds them to one executor.

    Schemas may be plain dicts or the pydantic models from
    :mod:`withsql.schema.statements`.

    Raises (from every method):
        ParseError: If a schema does not match its model.
        CompilationError: If a clause specification has an unsupported shape.
    """

    def __init__(
        self,
        executor: Executor | None = None,
        config: BuilderConfig | None = None,
        compiler: SQLCompiler | None = None,
    ) -> None:
        self._executor = executor
        self._config = config or BuilderConfig()
        self._builder = StatementBuilder(compiler, self._config)

    def select(self, schema: SelectSchema | dict[str, Any]) -> Statement:
        return self._wrap(self._builder.select(parse_schema(SelectSchema, schema)))

    def create(self, schema: CreateSchema | dict[str, Any]) -> Statement:
        return self._wrap(self._builder.create(parse_schema(CreateSchema, schema)))

    def creates(self, schemas: Sequence[CreateSchema | dict[str, Any]]) -> Statement:
        parsed = [parse_schema(CreateSchema, s) for s in schemas]
        return self._wrap(self._builder.creates(parsed))

    def update(self, schema: UpdateSchema | dict[str, Any]) -> Statement:
        return self._wrap(self._builder.update(parse_schema(UpdateSchema, schema)))

    def updates(self, schemas: Sequence[UpdateSchema | dict[str, Any]]) -> Statement:
        parsed = [parse_schema(UpdateSchema, s) for s in schemas]
        return self._wrap(self._builder.updates(parsed))

    def delete(self, schema: DeleteSchema | dict[str, Any]) -> Statement:
        return self._wrap(self._builder.delete(parse_schema(DeleteSchema, schema)))

    def deletes(self, schemas: Sequence[DeleteSchema | dict[str, Any]]) -> Statement:
        parsed = [parse_schema(DeleteSchema, s) for s in schemas]
        return self._wrap(self._builder.deletes(parsed))

    def _wrap(self, compiled: CompiledSQL) -> Statement:
        return Statement(compiled, self._executor, self._config)


def with_sql(
    executor: Executor | None = None,
    config: BuilderConfig | None = None,
) -> SQLBuilder:
    """Return a :class:`SQLBuilder` bound to ``executor``.

    Args:
        executor: Object exposing ``query(text, values)``.  A synchronous
            executor runs with ``execute()``, a coroutine one with
            ``execute_async()``; the other method raises ``WithSQLError``.
            May be omitted when only :meth:`Statement.to_raw` is needed.
        config: Optional builder configuration.
    """
    return SQLBuilder(executor, config)
