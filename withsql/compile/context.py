"""Compilation context objects.

``CompilationContext`` packages the static ``(compiler, config)`` pair that
every clause builder needs.  ``StatementContext`` is the per-statement
parameter accumulator and ``KeyPath`` tracks where the compiler currently is
inside a nested specification.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from withsql.compile.base import SQLCompiler
from withsql.config import BuilderConfig


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single compilation run.

    Attributes:
        compiler: Dialect-specific SQL compiler instance.
        config: Builder configuration.
    """

    compiler: SQLCompiler
    config: BuilderConfig


@dataclass
class StatementContext:
    """Accumulates positional parameters for one statement or one batch.

    Values are only ever appended; the 1-based position of a value is the
    index of its placeholder.  A batch shares one instance across all of
    its member statements so placeholder indexes keep increasing.
    """

    values: list[Any] = field(default_factory=list)
    transaction: bool = False

    def add_value(self, value: Any) -> int:
        """Store a value and return its 1-based placeholder position."""
        self.values.append(value)
        return len(self.values)

    def extend(self, values: Iterable[Any]) -> None:
        """Append values whose placeholders were written by the caller."""
        self.values.extend(values)


class KeyPath:
    """Stack of keys describing the current position in a specification.

    Leaf compilers read :attr:`column` (the key being compiled) and
    :attr:`parent` (the key one level up, i.e. the column an operator such
    as ``in`` applies to).
    """

    def __init__(self) -> None:
        self._keys: list[str] = []

    @contextmanager
    def descend(self, key: str) -> Iterator[KeyPath]:
        self._keys.append(key)
        try:
            yield self
        finally:
            self._keys.pop()

    @property
    def column(self) -> str | None:
        return self._keys[-1] if self._keys else None

    @property
    def parent(self) -> str | None:
        return self._keys[-2] if len(self._keys) >= 2 else None

    def as_list(self) -> list[str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"KeyPath({self._keys!r})"
