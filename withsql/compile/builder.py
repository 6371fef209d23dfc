"""Core schema → SQL compilation logic.

``StatementBuilder`` is the top-level orchestrator.  It wires together the
clause-level sub-builders for one statement context, assembles their
fragments in SQL order and collapses whitespace.  All dialect-specific text
is delegated to the injected ``SQLCompiler``.

Sub-builder hierarchy
---------------------
StatementBuilder
  ├── WhereBuilder   (clause_builders.py, handlers in clauses.py)
  ├── OrderBuilder   (clause_builders.py, handlers in clauses.py)
  ├── TableBuilder   (clause_builders.py)
  ├── JoinBuilder    (clause_builders.py)
  ├── ValuesBuilder  (clause_builders.py)
  └── SetBuilder     (clause_builders.py)

Statement context sharing
-------------------------
A fresh :class:`~withsql.compile.context.StatementContext` is created per
single-statement call.  Batch calls (``creates`` / ``updates`` /
``deletes``) create one context with ``transaction=True`` and thread it
through every member, so placeholder numbers are unique across the whole
multi-statement body.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from withsql.compile.base import CompiledSQL, SQLCompiler
from withsql.compile.clause_builders import (
    JoinBuilder,
    OrderBuilder,
    SetBuilder,
    TableBuilder,
    ValuesBuilder,
    WhereBuilder,
)
from withsql.compile.context import CompilationContext, StatementContext
from withsql.compile.postgres import PostgresCompiler
from withsql.config import BuilderConfig
from withsql.errors import CompilationError
from withsql.schema.statements import CreateSchema, DeleteSchema, SelectSchema, UpdateSchema
from withsql.utils import collapse_whitespace

logger = logging.getLogger(__name__)


class StatementBuilder:
    """Compiles statement schemas to parameterized SQL.

    Args:
        compiler: Dialect-specific compiler; defaults to :class:`PostgresCompiler`.
        config: Builder configuration; defaults to ``BuilderConfig()``.
    """

    def __init__(
        self,
        compiler: SQLCompiler | None = None,
        config: BuilderConfig | None = None,
    ) -> None:
        self._ctx = CompilationContext(
            compiler=compiler or PostgresCompiler(),
            config=config or BuilderConfig(),
        )

    @property
    def config(self) -> BuilderConfig:
        return self._ctx.config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select(self, schema: SelectSchema) -> CompiledSQL:
        return self._single("select", self._build_select, schema)

    def create(self, schema: CreateSchema) -> CompiledSQL:
        return self._single("create", self._build_create, schema)

    def update(self, schema: UpdateSchema) -> CompiledSQL:
        return self._single("update", self._build_update, schema)

    def delete(self, schema: DeleteSchema) -> CompiledSQL:
        return self._single("delete", self._build_delete, schema)

    def creates(self, schemas: Sequence[CreateSchema]) -> CompiledSQL:
        return self._batch("creates", self._build_create, schemas)

    def updates(self, schemas: Sequence[UpdateSchema]) -> CompiledSQL:
        return self._batch("updates", self._build_update, schemas)

    def deletes(self, schemas: Sequence[DeleteSchema]) -> CompiledSQL:
        return self._batch("deletes", self._build_delete, schemas)

    # ------------------------------------------------------------------
    # Single statements and batches
    # ------------------------------------------------------------------

    def _single(
        self,
        kind: str,
        build: Callable[[Any, StatementContext], str],
        schema: Any,
    ) -> CompiledSQL:
        logger.debug("Start building '%s' SQL", kind)
        statement = StatementContext()
        return self._finish(kind, build(schema, statement), statement)

    def _batch(
        self,
        kind: str,
        build: Callable[[Any, StatementContext], str],
        schemas: Sequence[Any],
    ) -> CompiledSQL:
        if not schemas:
            raise CompilationError(f"'{kind}' needs at least one statement.", clause=kind)
        logger.debug("Start building '%s' SQL for %d statements", kind, len(schemas))
        statement = StatementContext(transaction=True)
        query = ";".join(collapse_whitespace(build(schema, statement)) for schema in schemas)
        return self._finish(kind, query, statement)

    def _finish(self, kind: str, query: str, statement: StatementContext) -> CompiledSQL:
        compiled = CompiledSQL(
            query=collapse_whitespace(query),
            values=statement.values,
            transaction=statement.transaction,
        )
        if self.config.log_values:
            logger.debug("Ended building '%s' SQL: %s %r", kind, compiled.query, compiled.values)
        else:
            logger.debug(
                "Ended building '%s' SQL: %s (%d values)", kind, compiled.query, len(compiled.values)
            )
        return compiled

    # ------------------------------------------------------------------
    # Statement assembly
    # ------------------------------------------------------------------

    def _build_select(self, schema: SelectSchema, statement: StatementContext) -> str:
        b = self._make_sub_builders(statement)
        identifier = self._ctx.compiler.identifier

        columns = [schema.columns] if isinstance(schema.columns, str) else schema.columns
        if not columns:
            raise CompilationError("SELECT needs at least one column.", clause="SELECT")

        parts = [
            f"SELECT {', '.join(identifier(c) for c in columns)}",
            f"FROM {b['table'].build(schema.from_)}",
        ]
        parts.extend(b["join"].build(join) for join in schema.joins)
        parts.append(b["where"].build_clause(schema.where))
        parts.append(b["order"].build_clause(schema.order))
        if schema.limit is not None:
            parts.append(f"LIMIT {b['values'].placeholder(schema.limit)}")
        if schema.offset is not None:
            parts.append(f"OFFSET {b['values'].placeholder(schema.offset)}")
        return " ".join(p for p in parts if p)

    def _build_create(self, schema: CreateSchema, statement: StatementContext) -> str:
        b = self._make_sub_builders(statement)
        identifier = self._ctx.compiler.identifier

        parts = [f"INSERT INTO {identifier(schema.into)}", b["values"].build(schema.values)]
        if self.config.conflict_target:
            parts.append(f"ON CONFLICT ({self.config.conflict_target}) DO NOTHING")
        if schema.returning:
            returning = [schema.returning] if isinstance(schema.returning, str) else schema.returning
            parts.append(f"RETURNING {', '.join(identifier(c) for c in returning)}")
        return " ".join(parts)

    def _build_update(self, schema: UpdateSchema, statement: StatementContext) -> str:
        b = self._make_sub_builders(statement)
        table = self._ctx.compiler.identifier(schema.on)

        set_clause = b["set"].build(schema.set)
        where_clause = b["where"].build_clause(schema.where)
        if not where_clause:
            logger.warning("UPDATE on %s has no WHERE clause; every row will be updated", table)
        return " ".join(p for p in (f"UPDATE {table}", set_clause, where_clause) if p)

    def _build_delete(self, schema: DeleteSchema, statement: StatementContext) -> str:
        b = self._make_sub_builders(statement)
        table = self._ctx.compiler.identifier(schema.from_)

        where_clause = b["where"].build_clause(schema.where)
        if not where_clause:
            logger.warning("DELETE on %s has no WHERE clause; every row will be deleted", table)
        return " ".join(p for p in (f"DELETE FROM {table}", where_clause) if p)

    # ------------------------------------------------------------------
    # Sub-builder wiring
    # ------------------------------------------------------------------

    def _make_sub_builders(self, statement: StatementContext) -> dict:
        """Construct the sub-builder graph bound to ``statement``."""
        where = WhereBuilder(self._ctx, statement)
        table = TableBuilder(self._ctx, statement)
        return {
            "where": where,
            "order": OrderBuilder(self._ctx, statement),
            "table": table,
            "join": JoinBuilder(self._ctx, statement, table, where),
            "values": ValuesBuilder(self._ctx, statement),
            "set": SetBuilder(self._ctx, statement),
        }
