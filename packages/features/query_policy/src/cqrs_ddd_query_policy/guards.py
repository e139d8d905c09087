"""Argument checks shared by the query options builders."""

from __future__ import annotations

from typing import Any, TypeVar

from .exceptions import InvalidArgumentError

T = TypeVar("T")


def not_none(value: T | None, name: str) -> T:
    if value is None:
        raise InvalidArgumentError(name, value, "must not be None")
    return value


def non_negative(value: Any, name: str) -> int | None:
    """Validate an optional limit.

    Returns ``None`` when the limit should be left untouched: either the
    caller passed nothing, or passed ``0`` (kept as "use the default" for
    callers written against the integer-only API).
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(name, value, "must be an integer")
    if value < 0:
        raise InvalidArgumentError(name, value, "must be greater than or equal to 0")
    return value or None
