"""Argument normalization helpers for registration calls."""

from __future__ import annotations

from enum import EnumMeta
from typing import Any

from triggerflow.api.errors import ArgumentsError


def listify(obj: Any) -> list[Any]:
    """Wrap `obj` into a list unless it already is a sequence of items.

    ``None`` becomes an empty list; lists, tuples and enum classes are copied
    item by item.
    """
    if obj is None:
        return []
    if isinstance(obj, (list, tuple, EnumMeta)):
        return list(obj)
    return [obj]


def prep_ordered_arg(desired_length: int, arguments: Any = None) -> list[Any]:
    """Expand one ordered-transition argument to `desired_length` entries.

    A single value is broadcast to every transition; a list must match the
    number of generated transitions exactly.
    """
    values = listify(arguments) if arguments is not None else [None]
    if len(values) != desired_length and len(values) != 1:
        raise ArgumentsError()
    if len(values) == 1:
        return values * desired_length
    return values
