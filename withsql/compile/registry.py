"""Clause registries (Open/Closed Principle).

Each recursive compiler (WHERE, ORDER BY) owns one ``ClauseRegistry``
mapping a clause keyword to the handler that compiles it, plus a default
handler for keys that are not keywords (column names).  New keywords can
be added without touching the traversal in
:mod:`withsql.compile.clause_builders`.

Keywords are enumerated up front; :meth:`ClauseRegistry.ensure_complete`
fails at import time if one of them has no handler.

Usage::

    from withsql.compile.registry import WHERE_CLAUSES, WhereKeyword

    @WHERE_CLAUSES.register(WhereKeyword.ILIKE)
    def _ilike(value, path, builder):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from withsql.compile.clause_builders import RecursiveClauseBuilder
    from withsql.compile.context import KeyPath

#: Type alias for a clause handler.
#: ``(value, key_path, builder) -> fragment or fragments``
ClauseHandler = Callable[[Any, "KeyPath", "RecursiveClauseBuilder"], Union[str, list[str]]]


class WhereKeyword(str, Enum):
    """Keys with special meaning inside a WHERE specification."""

    AND = "and"
    OR = "or"
    IN = "in"
    IS_NULL = "isNull"
    ILIKE = "ilike"
    RAW = "raw"


class OrderKeyword(str, Enum):
    """Keys with special meaning inside an ORDER BY specification."""

    BY = "by"
    SORT = "sort"
    IN = "in"


class ClauseRegistry:
    """Registry mapping clause keywords to handlers, with a default arm.

    Args:
        clause: Clause name used in error messages (``"WHERE"``, ...).
        keywords: Enum of the keywords this clause understands.
    """

    def __init__(self, clause: str, keywords: type[Enum]) -> None:
        self.clause = clause
        self._keywords = keywords
        self._handlers: dict[str, ClauseHandler] = {}
        self._default: ClauseHandler | None = None

    def register(self, keyword: Enum) -> Callable[[ClauseHandler], ClauseHandler]:
        """Decorator that registers a handler for ``keyword``."""
        if not isinstance(keyword, self._keywords):
            raise TypeError(f"{keyword!r} is not a {self._keywords.__name__}.")

        def decorator(handler: ClauseHandler) -> ClauseHandler:
            self._handlers[keyword.value] = handler
            return handler

        return decorator

    def register_default(self, handler: ClauseHandler) -> ClauseHandler:
        """Register the handler used for keys that are not keywords."""
        self._default = handler
        return handler

    def resolve(self, key: str) -> ClauseHandler:
        """Return the handler for ``key``, falling back to the default handler."""
        handler = self._handlers.get(key)
        if handler is not None:
            return handler
        if self._default is None:
            raise LookupError(f"No default {self.clause} handler registered.")
        return self._default

    def is_keyword(self, key: str) -> bool:
        return key in self._handlers

    def ensure_complete(self) -> None:
        """Raise if a keyword or the default arm has no handler."""
        missing = [k.value for k in self._keywords if k.value not in self._handlers]
        if missing or self._default is None:
            raise RuntimeError(
                f"{self.clause} registry incomplete: missing {missing or ['default']}."
            )

    def registered_keywords(self) -> list[str]:
        """Return the sorted list of registered keywords."""
        return sorted(self._handlers)


WHERE_CLAUSES = ClauseRegistry("WHERE", WhereKeyword)
ORDER_CLAUSES = ClauseRegistry("ORDER BY", OrderKeyword)
