"""Pydantic models for the statement schemas accepted by the builder.

Callers usually pass plain dicts; the facade validates them into these
models.  Clause-level specifications (``where``, ``order``, ``from`` /
``to`` table references) remain as ``str | dict[str, Any]`` because their
shape is recursive and keyword-driven; the compilers in
:mod:`withsql.compile.clause_builders` check them while compiling.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from withsql.errors import ParseError
from withsql.schema.values import UNSET

WhereSpec = Union[str, dict[str, Any]]
OrderSpec = Union[str, dict[str, Any], list[Union[str, dict[str, Any]]]]
TableSpec = Union[str, dict[str, Any]]


class SortDirection(str, Enum):
    """Allowed ``sort`` values in an ORDER BY specification."""

    ASC = "ASC"
    ASC_NULLS_FIRST = "ASC NULLS FIRST"
    DESC = "DESC"
    DESC_NULLS_LAST = "DESC NULLS LAST"


class JoinType(str, Enum):
    """SQL join types."""

    LEFT = "LEFT"
    INNER = "INNER"
    RIGHT = "RIGHT"
    FULL = "FULL"


class _Schema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_unset_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not UNSET}
        return data


class RawQuery(_Schema):
    """A caller-trusted SQL fragment plus the values its placeholders bind.

    The fragment must number its own placeholders to follow the values
    already in the statement; the values are appended in order.

    Attributes:
        query: SQL text used verbatim.
        values: Values appended to the statement context.
    """

    query: str
    values: list[Any] = Field(default_factory=list)


class JoinClause(_Schema):
    """A single JOIN entry.

    Attributes:
        type: SQL join type.
        to: Table reference (name, ``{alias: table}`` or ``{raw: ...}``).
        on: Join condition: a raw SQL string or a WHERE-style mapping.
        match: Column-equality shortcut ``{left_col: right_col}`` compiled
            to ``left_col::TEXT = right_col::TEXT``.
    """

    type: JoinType = JoinType.INNER
    to: TableSpec
    on: WhereSpec | None = None
    match: dict[str, str] | None = None

    @model_validator(mode="after")
    def _one_condition(self) -> JoinClause:
        if (self.on is None) == (self.match is None):
            raise ValueError("JOIN needs exactly one of 'on' or 'match'.")
        return self


class SelectSchema(_Schema):
    """A SELECT statement.

    Attributes:
        columns: Column name or list of names; ``"*"`` by default.
        from_: Table reference (``from`` in dict input).
        join: One join or a list of joins.
        where: WHERE specification.
        order: ORDER BY specification.
        limit: Maximum number of rows.
        offset: Number of rows to skip.
    """

    columns: str | list[str] = "*"
    from_: TableSpec = Field(alias="from")
    join: JoinClause | list[JoinClause] | None = None
    where: WhereSpec | None = None
    order: OrderSpec | None = None
    limit: int | None = Field(default=None, ge=0)
    offset: int | None = Field(default=None, ge=0)

    @property
    def joins(self) -> list[JoinClause]:
        if self.join is None:
            return []
        return self.join if isinstance(self.join, list) else [self.join]


class CreateSchema(_Schema):
    """An INSERT statement.

    Attributes:
        into: Target table.
        values: Column → value mapping; ``UNSET`` entries are dropped.
        returning: Column(s) for a ``RETURNING`` clause.
    """

    into: str
    values: dict[str, Any] = Field(default_factory=dict)
    returning: str | list[str] | None = None


class UpdateSchema(_Schema):
    """An UPDATE statement."""

    on: str
    set: dict[str, Any]
    where: WhereSpec | None = None


class DeleteSchema(_Schema):
    """A DELETE statement."""

    from_: str = Field(alias="from")
    where: WhereSpec | None = None


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def parse_schema(model: type[SchemaT], raw: SchemaT | dict[str, Any]) -> SchemaT:
    """Validate ``raw`` into ``model``, passing model instances through.

    Raises:
        ParseError: If ``raw`` does not match the model.
    """
    if isinstance(raw, model):
        return raw
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise ParseError(f"{model.__name__} structure is invalid: {exc}", raw=raw) from exc
