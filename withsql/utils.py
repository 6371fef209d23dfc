"""Identifier and key helpers shared by the compilers and the row mapper."""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_WORD_SEPARATOR = re.compile(r"[_\-\s]+")


def snake_case(name: str) -> str:
    """Convert a camelCase identifier to snake_case.

    Qualified names keep their dots, so ``word.createdBy`` becomes
    ``word.created_by``.  Names that are already snake_case are unchanged.
    """
    return ".".join(
        _CAMEL_BOUNDARY.sub("_", part).lower() for part in name.split(".")
    )


def camel_case(name: str) -> str:
    """Convert a snake_case (or kebab-case) key to camelCase."""
    words = [w for w in _WORD_SEPARATOR.split(name) if w]
    if not words:
        return name
    head = words[0][0].lower() + words[0][1:]
    return head + "".join(w[0].upper() + w[1:] for w in words[1:])


def to_camel_key(obj: Any) -> Any:
    """Recursively convert mapping keys to camelCase.

    Lists are processed element-wise; scalars are returned unchanged.
    """
    if isinstance(obj, Mapping):
        return {camel_case(str(k)): to_camel_key(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_camel_key(item) for item in obj]
    return obj


def collapse_whitespace(query: str) -> str:
    """Collapse runs of spaces to a single space and trim the result."""
    return re.sub(r" {2,}", " ", query).strip()
