"""
ValidationSettings: the per-operation query policy aggregate.

A builder mutates one instance in place during configuration; the request
time validator later reads the same instance by reference.  Limits use
``None`` for "not configured, use the system default".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .flags import (
    AllowedArithmeticOperators,
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
    flag_names,
)

LIMIT_FIELDS: tuple[str, ...] = (
    "max_skip",
    "max_top",
    "max_expansion_depth",
    "max_any_all_expression_depth",
    "max_node_count",
    "max_order_by_node_count",
)


@dataclass
class ValidationSettings:
    """
    Mutable container for accepted query capabilities and their limits.

    Attributes:
        allowed_arithmetic_operators: Operators usable in ``$filter``.
        allowed_functions: Functions usable in ``$filter``.
        allowed_logical_operators: Logical/comparison operators.
        allowed_query_options: Query option kinds accepted at all.
        max_skip: Largest accepted ``$skip`` value.
        max_top: Largest accepted ``$top`` value.
        max_expansion_depth: Deepest accepted ``$expand`` nesting.
        max_any_all_expression_depth: Deepest ``any``/``all`` nesting.
        max_node_count: Largest ``$filter`` syntax tree.
        max_order_by_node_count: Most ``$orderby`` clauses.
        allowed_order_by_properties: Sortable properties, in insertion
            order.  Empty means any property may be used.
    """

    allowed_arithmetic_operators: AllowedArithmeticOperators = (
        AllowedArithmeticOperators.NONE
    )
    allowed_functions: AllowedFunctions = AllowedFunctions.NONE
    allowed_logical_operators: AllowedLogicalOperators = AllowedLogicalOperators.NONE
    allowed_query_options: AllowedQueryOptions = AllowedQueryOptions.NONE
    max_skip: int | None = None
    max_top: int | None = None
    max_expansion_depth: int | None = None
    max_any_all_expression_depth: int | None = None
    max_node_count: int | None = None
    max_order_by_node_count: int | None = None
    allowed_order_by_properties: list[str] = field(default_factory=list)

    def copy_from(self, other: ValidationSettings) -> None:
        """Overwrite every field with the value held by *other*.

        Flags are replaced rather than OR-ed, so capabilities missing from
        *other* are cleared.
        """
        self.allowed_arithmetic_operators = other.allowed_arithmetic_operators
        self.allowed_functions = other.allowed_functions
        self.allowed_logical_operators = other.allowed_logical_operators
        self.allowed_query_options = other.allowed_query_options
        for name in LIMIT_FIELDS:
            setattr(self, name, getattr(other, name))
        self.allowed_order_by_properties = list(other.allowed_order_by_properties)

    def copy(self) -> ValidationSettings:
        clone = ValidationSettings()
        clone.copy_from(self)
        return clone

    def is_allowed(self, option: AllowedQueryOptions) -> bool:
        return option in self.allowed_query_options

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {
            "allowed_arithmetic_operators": flag_names(
                self.allowed_arithmetic_operators
            ),
            "allowed_functions": flag_names(self.allowed_functions),
            "allowed_logical_operators": flag_names(self.allowed_logical_operators),
            "allowed_query_options": flag_names(self.allowed_query_options),
        }
        for name in LIMIT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.allowed_order_by_properties:
            result["allowed_order_by_properties"] = list(
                self.allowed_order_by_properties
            )
        return result
