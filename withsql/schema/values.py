"""Parameter value types and the ``UNSET`` sentinel.

``None`` is a real value: it binds as SQL ``NULL``.  ``UNSET`` stands for
"no value given" and every mapping entry holding it is dropped before
compilation, so optional filters can be written inline::

    where = {"createdBy": user_id, "status": status if status else UNSET}
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union


class _Unset:
    """Singleton marker for an omitted value."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict) -> _Unset:
        return self

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

#: A value bound to a ``$n`` placeholder.
ParamValue = Union[str, list[str], int, float, None]


def is_unset(value: Any) -> bool:
    """Return ``True`` if ``value`` is the ``UNSET`` sentinel."""
    return value is UNSET


def drop_unset(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``mapping`` without ``UNSET`` entries, order preserved."""
    return {k: v for k, v in mapping.items() if v is not UNSET}
