"""Clause-level SQL builders.

Every builder receives the static :class:`CompilationContext` and the
:class:`StatementContext` of the statement being compiled.  A batch passes
the same ``StatementContext`` to the builders of all of its members, so
placeholder numbering continues across statements.

Classes
-------
WhereBuilder     - ``WHERE <predicates>`` (recursive, keyword-dispatched)
OrderBuilder     - ``ORDER BY <terms>`` (recursive, keyword-dispatched)
TableBuilder     - table reference for ``FROM`` / ``JOIN``
JoinBuilder      - ``<TYPE> JOIN <table> ON <condition>``
ValuesBuilder    - ``(<columns>) VALUES (<placeholders>)``
SetBuilder       - ``SET <column> = <placeholder>, ...``
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import ValidationError as PydanticValidationError

from withsql.compile.clauses import ORDER_CLAUSES, WHERE_CLAUSES
from withsql.compile.context import CompilationContext, KeyPath, StatementContext
from withsql.compile.registry import ClauseRegistry, OrderKeyword
from withsql.errors import CompilationError
from withsql.schema.statements import JoinClause, RawQuery
from withsql.schema.values import UNSET, drop_unset


class _FragmentBuilder:
    """Shared plumbing: parameter binding and identifier normalisation."""

    clause: ClassVar[str] = ""

    def __init__(self, ctx: CompilationContext, statement: StatementContext) -> None:
        self._ctx = ctx
        self.statement = statement

    @property
    def compiler(self):
        return self._ctx.compiler

    def placeholder(self, value: Any) -> str:
        """Bind ``value`` and return the placeholder that refers to it."""
        return self.compiler.param_placeholder(self.statement.add_value(value))

    def identifier(self, name: str) -> str:
        return self.compiler.identifier(name)

    def bind_raw(self, raw: Any, path: KeyPath | None = None) -> str:
        """Resolve a ``raw`` value to SQL text, appending its bound values.

        ``raw`` is either a SQL string or ``{"query": ..., "values": [...]}``.
        """
        if isinstance(raw, str):
            return raw
        if isinstance(raw, Mapping):
            try:
                parsed = RawQuery.model_validate(raw)
            except PydanticValidationError as exc:
                raise self.error(f"Invalid raw query: {exc}", path) from exc
            self.statement.extend(parsed.values)
            return parsed.query
        raise self.error(f"Raw query must be a string or mapping, got {type(raw).__name__}.", path)

    def error(self, message: str, path: KeyPath | None = None) -> CompilationError:
        return CompilationError(
            message, clause=self.clause, path=path.as_list() if path is not None else None
        )


class RecursiveClauseBuilder(_FragmentBuilder):
    """Walks a nested specification, dispatching each key through a registry.

    For a mapping, every key whose value is not ``UNSET`` is pushed onto the
    key path, compiled by the registry handler for that key (or the default
    handler for column names) and popped again.  The handlers' fragments are
    flattened into one list in key order.
    """

    registry: ClassVar[ClauseRegistry]

    def build(self, spec: Any, path: KeyPath | None = None) -> list[str]:
        """Compile ``spec`` to an ordered list of SQL fragments."""
        if path is None:
            path = KeyPath()
        if spec is None or spec is UNSET:
            return []
        if isinstance(spec, str):
            return [spec] if spec.strip() else []
        if not isinstance(spec, Mapping):
            raise self.error(
                f"Unsupported {self.clause} specification of type {type(spec).__name__}.", path
            )

        fragments: list[str] = []
        for key, value in spec.items():
            if value is UNSET:
                continue
            if not isinstance(key, str):
                raise self.error(f"{self.clause} keys must be strings, got {key!r}.", path)
            with path.descend(key):
                result = self.registry.resolve(key)(value, path, self)
            if isinstance(result, str):
                fragments.append(result)
            else:
                fragments.extend(result)
        return fragments


class WhereBuilder(RecursiveClauseBuilder):
    """Builds WHERE predicates from a string or a nested mapping."""

    clause = "WHERE"
    registry = WHERE_CLAUSES

    def build_condition(self, spec: Any) -> str:
        """Return the AND-joined predicate text (no ``WHERE`` keyword)."""
        return " AND ".join(self.build(spec))

    def build_clause(self, spec: Any) -> str:
        """Return ``WHERE <predicates>``, or ``""`` when nothing compiles."""
        condition = self.build_condition(spec)
        return f"WHERE {condition}" if condition else ""


class OrderBuilder(RecursiveClauseBuilder):
    """Builds ORDER BY terms.

    A list of specifications compiles each entry to one sort term and joins
    the terms with commas.
    """

    clause = "ORDER BY"
    registry = ORDER_CLAUSES

    def build_clause(self, spec: Any) -> str:
        """Return ``ORDER BY <terms>``, or ``""`` when nothing compiles."""
        specs = spec if isinstance(spec, list) else [spec]
        terms = [self.build_term(s) for s in specs]
        body = ", ".join(t for t in terms if t)
        return f"ORDER BY {body}" if body else ""

    def build_term(self, spec: Any) -> str:
        """Compile one sort term; the direction always follows the expression."""
        sort_key = OrderKeyword.SORT.value
        if not isinstance(spec, Mapping) or spec.get(sort_key, UNSET) is UNSET:
            return " ".join(self.build(spec))

        rest = drop_unset({k: v for k, v in spec.items() if k != sort_key})
        if not rest:
            raise self.error("'sort' needs a column to order by.")
        expression = self.build(rest)
        if not expression:
            return ""
        return " ".join([*expression, *self.build({sort_key: spec[sort_key]})])


class TableBuilder(_FragmentBuilder):
    """Builds a table reference: name, ``{alias: table}`` or ``{raw: ..., as: alias}``."""

    clause = "FROM"

    def build(self, spec: Any) -> str:
        if isinstance(spec, str):
            if not spec.strip():
                raise self.error("Table name must not be empty.")
            return self.identifier(spec)
        if isinstance(spec, Mapping):
            if "raw" in spec:
                return self._build_raw(spec)
            if len(spec) != 1:
                raise self.error(
                    f"Aliased table reference needs exactly one key, got {sorted(spec)}."
                )
            alias, table = next(iter(spec.items()))
            if not isinstance(table, str):
                raise self.error(f"Table for alias '{alias}' must be a string.")
            return f"{self.identifier(table)} AS {self.identifier(alias)}"
        raise self.error(f"Unsupported table reference of type {type(spec).__name__}.")

    def _build_raw(self, spec: Mapping[str, Any]) -> str:
        unexpected = set(spec) - {"raw", "as"}
        if unexpected:
            raise self.error(f"Unexpected keys in raw table reference: {sorted(unexpected)}.")
        query = self.bind_raw(spec["raw"])
        alias = spec.get("as")
        return f"({query}) AS {self.identifier(alias)}" if alias else f"({query})"


class JoinBuilder(_FragmentBuilder):
    """Builds a single ``<TYPE> JOIN <table> ON <condition>`` fragment."""

    clause = "JOIN"

    def __init__(
        self,
        ctx: CompilationContext,
        statement: StatementContext,
        tables: TableBuilder,
        where: WhereBuilder,
    ) -> None:
        super().__init__(ctx, statement)
        self._tables = tables
        self._where = where

    def build(self, join: JoinClause) -> str:
        table = self._tables.build(join.to)
        if join.match is not None:
            condition = " AND ".join(
                self.compiler.text_equals(self.identifier(left), self.identifier(right))
                for left, right in join.match.items()
            )
        elif isinstance(join.on, str):
            condition = join.on
        else:
            condition = self._where.build_condition(join.on)
        if not condition.strip():
            raise self.error(f"JOIN to {table} has an empty condition.")
        return f"{join.type.value} JOIN {table} ON {condition}"


class ValuesBuilder(_FragmentBuilder):
    """Builds the column list and VALUES list of an INSERT.

    Columns and placeholders are produced from one filtered mapping, so the
    n-th column always lines up with the n-th value.
    """

    clause = "VALUES"

    def build(self, values: Mapping[str, Any]) -> str:
        present = drop_unset(values)
        if not present:
            return "DEFAULT VALUES"
        columns = ", ".join(self.identifier(column) for column in present)
        placeholders = ", ".join(self.placeholder(value) for value in present.values())
        return f"({columns}) VALUES ({placeholders})"


class SetBuilder(_FragmentBuilder):
    """Builds the flat ``SET`` assignment list of an UPDATE."""

    clause = "SET"

    def build(self, assignments: Mapping[str, Any]) -> str:
        present = drop_unset(assignments)
        if not present:
            raise self.error("UPDATE needs at least one SET assignment.")
        sets = ", ".join(
            f"{self.identifier(column)} = {self.placeholder(value)}"
            for column, value in present.items()
        )
        return f"SET {sets}"
