"""Compiler abstractions: CompiledSQL and the SQLCompiler ABC.

The Template Method pattern is used:
- ``SQLCompiler`` owns the dialect-specific pieces of text (placeholder
  style, list membership, positional ordering, substring matching).
- The clause builders decide *what* to emit and ask the compiler *how*.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from withsql.utils import snake_case


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        query: SQL text with positional placeholders, whitespace collapsed.
        values: Values bound to the placeholders, in placeholder order.
        transaction: ``True`` when the statement is a batch that must run
            inside BEGIN / COMMIT.
    """

    query: str
    values: list[Any] = field(default_factory=list)
    transaction: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return ``{"query": ..., "values": [...]}``."""
        return {"query": self.query, "values": list(self.values)}


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL text generation."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name."""

    @abstractmethod
    def param_placeholder(self, position: int) -> str:
        """Return the placeholder for the 1-based parameter ``position``."""

    @abstractmethod
    def in_list(self, column: str, placeholder: str) -> str:
        """Return a predicate matching ``column`` against a comma-separated list."""

    @abstractmethod
    def list_position(self, column: str, placeholder: str) -> str:
        """Return an ORDER BY expression ranking ``column`` by a comma-separated list."""

    @abstractmethod
    def contains(self, column: str, placeholder: str) -> str:
        """Return a case-insensitive substring predicate."""

    @abstractmethod
    def text_equals(self, left: str, right: str) -> str:
        """Return an equality predicate between two columns compared as text."""

    def identifier(self, name: str) -> str:
        """Return ``name`` normalised for SQL text (snake_case by default)."""
        return snake_case(name)
