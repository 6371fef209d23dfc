"""Custom exception hierarchy for withsql.

All library errors inherit from WithSQLError so callers can catch the base
class for any withsql-specific failure.  Errors raised by the plugged-in
query executor are never wrapped; they reach the caller unmodified.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class WithSQLError(Exception):
    """Base exception for all withsql errors."""


class ParseError(WithSQLError):
    """Raised when a statement schema cannot be parsed into its model.

    Args:
        message: Human-readable description.
        raw: The raw schema object that failed to parse.
    """

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw


class CompilationError(WithSQLError):
    """Raised when a specification has a shape the compiler cannot handle.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred
            (``"WHERE"``, ``"ORDER BY"``, ``"FROM"``, ...).
        path: Key path inside the specification, outermost first.
    """

    def __init__(
        self,
        message: str,
        clause: str | None = None,
        path: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.clause = clause
        self.path: list[str] = list(path or [])


class DBErrorCode(str, Enum):
    """Machine-readable codes carried by :class:`DBError`."""

    NOT_FOUND = "404"


class DBError(WithSQLError):
    """Raised by layers above the engine for "no matching row" conditions.

    Args:
        message: Human-readable description.
        code: Optional :class:`DBErrorCode`.
    """

    def __init__(self, message: str, code: DBErrorCode | None = None) -> None:
        super().__init__(message)
        self.code = code

    @classmethod
    def of(cls, data: str | dict[str, Any], code: DBErrorCode | None = None) -> DBError:
        """Build a DBError from a message or a ``{"message", "code"}`` mapping."""
        if isinstance(data, dict):
            return cls(data["message"], DBErrorCode(data["code"]) if data.get("code") else code)
        return cls(data, code)

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for API layers."""
        return {
            "error": self.code.value if self.code else None,
            "message": str(self),
        }
