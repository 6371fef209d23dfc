"""withsql compilation layer: statement schemas → parameterized SQL."""
from withsql.compile.base import CompiledSQL, SQLCompiler
from withsql.compile.builder import StatementBuilder
from withsql.compile.context import KeyPath, StatementContext
from withsql.compile.postgres import PostgresCompiler

__all__ = [
    "CompiledSQL",
    "KeyPath",
    "PostgresCompiler",
    "SQLCompiler",
    "StatementBuilder",
    "StatementContext",
]
