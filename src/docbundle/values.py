"""Classification of document payload values."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import Enum
from typing import Any

from docbundle.errors import InvalidInputError

__all__ = ["ValueKind", "kind_of", "check_tree", "freeze_copy"]


class ValueKind(str, Enum):
    """Shape of a value inside a document's data tree."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAP = "map"


def kind_of(value: Any) -> ValueKind:
    """Return the ValueKind of a plain Python value.

    ``bool`` is checked before numbers since it is an ``int`` subclass.

    Raises:
        InvalidInputError: If the value has no representation in a data tree.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    raise InvalidInputError(message=f"Unsupported value type in data tree: {type(value).__name__}")


def check_tree(value: Any, _path: str = "") -> None:
    """Walk a data tree and reject values that cannot be represented.

    Raises:
        InvalidInputError: Naming the first offending location.
    """
    try:
        kind = kind_of(value)
    except InvalidInputError:
        where = _path or "<root>"
        raise InvalidInputError(
            message=f"Unsupported value type at {where}: {type(value).__name__}"
        ) from None

    if kind is ValueKind.MAP:
        for key, item in value.items():
            if not isinstance(key, str):
                where = _path or "<root>"
                raise InvalidInputError(message=f"Non-string map key {key!r} at {where}")
            check_tree(item, f"{_path}.{key}" if _path else key)
    elif kind is ValueKind.SEQUENCE:
        for i, item in enumerate(value):
            check_tree(item, f"{_path}[{i}]")


def freeze_copy(value: Any) -> Any:
    """Deep copy a data tree so the copy shares nothing with the caller."""
    return copy.deepcopy(value)
