"""withsql schema layer: statement models and parameter value types."""
from withsql.schema.statements import (
    CreateSchema,
    DeleteSchema,
    JoinClause,
    JoinType,
    OrderSpec,
    RawQuery,
    SelectSchema,
    SortDirection,
    TableSpec,
    UpdateSchema,
    WhereSpec,
    parse_schema,
)
from withsql.schema.values import UNSET, ParamValue, drop_unset, is_unset

__all__ = [
    "CreateSchema",
    "DeleteSchema",
    "JoinClause",
    "JoinType",
    "OrderSpec",
    "ParamValue",
    "RawQuery",
    "SelectSchema",
    "SortDirection",
    "TableSpec",
    "UNSET",
    "UpdateSchema",
    "WhereSpec",
    "drop_unset",
    "is_unset",
    "parse_schema",
]
