"""Map executor rows onto pydantic models.

Column names come back from Postgres in snake_case; models are usually
written with camelCase fields (or aliases).  ``RowFactory`` converts keys
first, then validates::

    user = RowFactory(rows).to(User)          # first row, DBError if none
    users = RowFactory(rows).to_list(User)    # every row
"""
from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from withsql.errors import DBError, DBErrorCode, ParseError
from withsql.utils import to_camel_key

ModelT = TypeVar("ModelT", bound=BaseModel)


class RowFactory(Generic[ModelT]):
    """Wraps one row, a list of rows, or ``None``.

    Args:
        data: A row mapping, a list of row mappings, or ``None``.
    """

    def __init__(self, data: Any) -> None:
        self._entity = to_camel_key(data)

    def to(self, model: type[ModelT]) -> ModelT:
        """Validate a single entity into ``model``.

        A list is reduced to its first row.

        Raises:
            DBError: With ``DBErrorCode.NOT_FOUND`` when there is no row.
            ParseError: If the row does not match ``model``.
        """
        entity = self._entity
        if isinstance(entity, list):
            entity = entity[0] if entity else None
        if entity is None:
            raise DBError("Entity could not be found", DBErrorCode.NOT_FOUND)
        return self._validate(model, entity)

    def to_list(self, model: type[ModelT]) -> list[ModelT]:
        """Validate every row into ``model``; no rows gives an empty list."""
        if self._entity is None:
            return []
        entities = self._entity if isinstance(self._entity, list) else [self._entity]
        return [self._validate(model, e) for e in entities]

    def to_camel_key(self) -> Any:
        """Return the data with camelCase keys."""
        return self._entity

    @staticmethod
    def _validate(model: type[ModelT], entity: Any) -> ModelT:
        try:
            return model.model_validate(entity)
        except PydanticValidationError as exc:
            raise ParseError(f"Row does not match {model.__name__}: {exc}", raw=entity) from exc
