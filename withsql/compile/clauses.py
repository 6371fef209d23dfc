"""Clause handlers for the WHERE and ORDER BY registries.

A handler is called with the value under a key, the key path (whose last
element is that key) and the builder walking the specification.  It binds
any values it needs through ``builder.placeholder`` and returns one
fragment or a list of fragments.

Operator keywords (``in``, ``isNull``, ``ilike``, ``raw``) apply to the
column one level up, i.e. ``path.parent``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from withsql.compile.registry import ORDER_CLAUSES, WHERE_CLAUSES, OrderKeyword, WhereKeyword
from withsql.schema.statements import SortDirection

if TYPE_CHECKING:
    from withsql.compile.clause_builders import RecursiveClauseBuilder
    from withsql.compile.context import KeyPath

logger = logging.getLogger(__name__)

__all__ = ["ORDER_CLAUSES", "WHERE_CLAUSES"]


def _target_column(path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    parent = path.parent
    if parent is None or builder.registry.is_keyword(parent):
        raise builder.error(f"'{path.column}' must be nested under a column name.", path)
    return builder.identifier(parent)


def _csv(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    raise builder.error(
        f"'{path.column}' expects a comma-separated string or a list, got {type(value).__name__}.",
        path,
    )


def _combine(joiner: str):
    def handler(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> list[str]:
        if not isinstance(value, Mapping):
            raise builder.error(f"'{path.column}' expects a mapping.", path)
        fragments = builder.build(value, path)
        if not fragments:
            return []
        return [f"({joiner.join(fragments)})"]

    return handler


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------

WHERE_CLAUSES.register(WhereKeyword.AND)(_combine(" AND "))
WHERE_CLAUSES.register(WhereKeyword.OR)(_combine(" OR "))


@WHERE_CLAUSES.register(WhereKeyword.IN)
def _where_in(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    column = _target_column(path, builder)
    return builder.compiler.in_list(column, builder.placeholder(_csv(value, path, builder)))


@WHERE_CLAUSES.register(WhereKeyword.IS_NULL)
def _where_is_null(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    column = _target_column(path, builder)
    return f"{column} IS NOT NULL" if value is False else f"{column} IS NULL"


@WHERE_CLAUSES.register(WhereKeyword.ILIKE)
def _where_ilike(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    column = _target_column(path, builder)
    if isinstance(value, (Mapping, list, tuple)):
        raise builder.error("'ilike' expects a search term.", path)
    return builder.compiler.contains(column, builder.placeholder(value))


@WHERE_CLAUSES.register(WhereKeyword.RAW)
def _where_raw(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    column = _target_column(path, builder)
    return f"{column} = ({builder.bind_raw(value, path)})"


@WHERE_CLAUSES.register_default
def _where_default(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str | list[str]:
    if isinstance(value, Mapping):
        return builder.build(value, path)
    return f"{builder.identifier(path.column)} = {builder.placeholder(value)}"


# ---------------------------------------------------------------------------
# ORDER BY
# ---------------------------------------------------------------------------


@ORDER_CLAUSES.register(OrderKeyword.BY)
def _order_by(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str | list[str]:
    if isinstance(value, str):
        return builder.identifier(value)
    if isinstance(value, Mapping):
        return builder.build(value, path)
    raise builder.error("'by' expects a column name or a mapping.", path)


@ORDER_CLAUSES.register(OrderKeyword.SORT)
def _order_sort(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str:
    try:
        return SortDirection(value.upper() if isinstance(value, str) else value).value
    except ValueError:
        allowed = [d.value for d in SortDirection]
        raise builder.error(
            f"Unknown sort direction {value!r}; expected one of {allowed}.", path
        ) from None


@ORDER_CLAUSES.register(OrderKeyword.IN)
def _order_in(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> list[str]:
    column = _target_column(path, builder)
    if value is None:
        logger.debug("Skipping positional ordering on %s: no id list given", column)
        return []
    return [builder.compiler.list_position(column, builder.placeholder(_csv(value, path, builder)))]


@ORDER_CLAUSES.register_default
def _order_default(value: Any, path: KeyPath, builder: RecursiveClauseBuilder) -> str | list[str]:
    if isinstance(value, Mapping):
        return builder.build(value, path)
    return builder.identifier(path.column)


WHERE_CLAUSES.ensure_complete()
ORDER_CLAUSES.ensure_complete()
