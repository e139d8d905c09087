"""
Capability flags for query options, operators and functions.

Each enumeration is a closed set of bit values.  Builders only ever combine
them with ``|`` and test membership with ``in``; nothing here removes a
capability.
"""

from __future__ import annotations

from difflib import get_close_matches
from enum import Flag
from typing import TYPE_CHECKING, TypeVar

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable

F = TypeVar("F", bound=Flag)


class AllowedArithmeticOperators(Flag):
    """Arithmetic operators permitted inside ``$filter`` expressions."""

    NONE = 0
    ADD = 1
    SUBTRACT = 1 << 1
    MULTIPLY = 1 << 2
    DIVIDE = 1 << 3
    MODULO = 1 << 4
    NEGATE = 1 << 5
    ALL = ADD | SUBTRACT | MULTIPLY | DIVIDE | MODULO | NEGATE


class AllowedFunctions(Flag):
    """Functions callable from ``$filter`` expressions."""

    NONE = 0

    # String
    STARTS_WITH = 1
    ENDS_WITH = 1 << 1
    CONTAINS = 1 << 2
    LENGTH = 1 << 3
    INDEX_OF = 1 << 4
    CONCAT = 1 << 5
    SUBSTRING = 1 << 6
    TO_LOWER = 1 << 7
    TO_UPPER = 1 << 8
    TRIM = 1 << 9

    # Date / time
    YEAR = 1 << 10
    MONTH = 1 << 11
    DAY = 1 << 12
    HOUR = 1 << 13
    MINUTE = 1 << 14
    SECOND = 1 << 15
    FRACTIONAL_SECONDS = 1 << 16
    DATE = 1 << 17
    TIME = 1 << 18
    NOW = 1 << 19

    # Math
    ROUND = 1 << 20
    FLOOR = 1 << 21
    CEILING = 1 << 22

    # Type
    CAST = 1 << 23
    IS_OF = 1 << 24

    # Collection (lambda operators)
    ANY = 1 << 25
    ALL = 1 << 26

    ALL_STRING_FUNCTIONS = (
        STARTS_WITH
        | ENDS_WITH
        | CONTAINS
        | LENGTH
        | INDEX_OF
        | CONCAT
        | SUBSTRING
        | TO_LOWER
        | TO_UPPER
        | TRIM
    )
    ALL_DATE_TIME_FUNCTIONS = (
        YEAR
        | MONTH
        | DAY
        | HOUR
        | MINUTE
        | SECOND
        | FRACTIONAL_SECONDS
        | DATE
        | TIME
        | NOW
    )
    ALL_MATH_FUNCTIONS = ROUND | FLOOR | CEILING
    ALL_FUNCTIONS = (
        ALL_STRING_FUNCTIONS
        | ALL_DATE_TIME_FUNCTIONS
        | ALL_MATH_FUNCTIONS
        | CAST
        | IS_OF
        | ANY
        | ALL
    )


class AllowedLogicalOperators(Flag):
    """Logical and comparison operators permitted inside ``$filter``."""

    NONE = 0
    OR = 1
    AND = 1 << 1
    NOT = 1 << 2
    EQUAL = 1 << 3
    NOT_EQUAL = 1 << 4
    GREATER_THAN = 1 << 5
    GREATER_THAN_OR_EQUAL = 1 << 6
    LESS_THAN = 1 << 7
    LESS_THAN_OR_EQUAL = 1 << 8
    HAS = 1 << 9
    ALL = (
        OR
        | AND
        | NOT
        | EQUAL
        | NOT_EQUAL
        | GREATER_THAN
        | GREATER_THAN_OR_EQUAL
        | LESS_THAN
        | LESS_THAN_OR_EQUAL
        | HAS
    )


class AllowedQueryOptions(Flag):
    """Query option kinds (``$filter``, ``$top``, ...) an operation accepts."""

    NONE = 0
    FILTER = 1
    EXPAND = 1 << 1
    SELECT = 1 << 2
    ORDER_BY = 1 << 3
    TOP = 1 << 4
    SKIP = 1 << 5
    COUNT = 1 << 6
    FORMAT = 1 << 7
    SKIP_TOKEN = 1 << 8
    DELTA_TOKEN = 1 << 9
    APPLY = 1 << 10
    COMPUTE = 1 << 11
    SEARCH = 1 << 12
    SUPPORTED = (
        FILTER
        | EXPAND
        | SELECT
        | ORDER_BY
        | TOP
        | SKIP
        | COUNT
        | FORMAT
        | SKIP_TOKEN
        | DELTA_TOKEN
        | APPLY
        | COMPUTE
        | SEARCH
    )


FLAG_TYPES: tuple[type[Flag], ...] = (
    AllowedArithmeticOperators,
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
)


def parse_flags(flag_type: type[F], names: Iterable[str]) -> F:
    """Combine case-insensitive member *names* into a single ``flag_type`` value.

    ``"order_by"``, ``"ORDER_BY"`` and ``"orderby"`` all resolve to
    :attr:`AllowedQueryOptions.ORDER_BY`.
    """
    members = {
        _normalise(name): member for name, member in flag_type.__members__.items()
    }
    result = flag_type(0)
    for name in names:
        member = members.get(_normalise(name))
        if member is None:
            suggestions = get_close_matches(
                name.upper(), list(flag_type.__members__), n=3, cutoff=0.6
            )
            hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
            raise InvalidArgumentError(
                flag_type.__name__,
                name,
                f"unknown {flag_type.__name__} member.{hint}",
            )
        result |= member
    return result


def flag_names(value: Flag) -> list[str]:
    """Return the sorted names of the single-bit members set in *value*."""
    flag_type = type(value)
    return sorted(
        name
        for name, member in flag_type.__members__.items()
        if member.value and _is_single_bit(member.value) and member in value
    )


def _normalise(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


def _is_single_bit(value: int) -> bool:
    return value & (value - 1) == 0
