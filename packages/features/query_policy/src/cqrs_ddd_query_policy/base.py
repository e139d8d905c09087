"""
Fluent mutators shared by resource-level and operation-level builders.

Example::

    (
        registry.resource(OrdersResource)
        .operation(OrdersResource.list_orders)
        .allow_top(100)
        .allow_skip()
        .allow_order_by(2, ["created_at", "total"])
        .allow(AllowedFunctions.ALL_STRING_FUNCTIONS)
    )

Every mutator validates its arguments first, then ORs flags into the owned
:class:`~cqrs_ddd_query_policy.settings.ValidationSettings` and returns the
builder itself.  Only :meth:`QueryOptionsBuilderBase.use` replaces state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from .exceptions import ConfigurationFrozenError, InvalidArgumentError
from .flags import (
    AllowedArithmeticOperators,
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
)
from .guards import non_negative, not_none
from .settings import ValidationSettings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from enum import Flag

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="QueryOptionsBuilderBase")

_FLAG_FIELDS: dict[type[Flag], str] = {
    AllowedArithmeticOperators: "allowed_arithmetic_operators",
    AllowedFunctions: "allowed_functions",
    AllowedLogicalOperators: "allowed_logical_operators",
    AllowedQueryOptions: "allowed_query_options",
}

_ANY_ALL = AllowedFunctions.ANY | AllowedFunctions.ALL


class QueryOptionsBuilderBase:
    """Accumulates query option policy into a single ``ValidationSettings``.

    The settings object is created empty with the builder and stays live:
    there is no ``build()`` step, consumers hold it by reference.
    """

    def __init__(self) -> None:
        self._settings = ValidationSettings()
        self._frozen = False

    @property
    def settings(self) -> ValidationSettings:
        return self._settings

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _freeze(self) -> None:
        self._frozen = True

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ConfigurationFrozenError(
                f"{self!r} is frozen; query options can only be changed "
                f"during application configuration"
            )

    # -- replacement ---------------------------------------------------------

    def use(self: B, validation_settings: ValidationSettings) -> B:
        """Replace the accumulated settings with a copy of *validation_settings*."""
        not_none(validation_settings, "validation_settings")
        self._ensure_mutable()
        self._settings.copy_from(validation_settings)
        logger.debug("%r: validation settings replaced", self)
        return self

    # -- flags ---------------------------------------------------------------

    def allow(self: B, *flags: Flag) -> B:
        """OR each flag into the settings field matching its enumeration.

        Flags of different enumerations may be mixed in one call::

            builder.allow(
                AllowedLogicalOperators.AND | AllowedLogicalOperators.EQUAL,
                AllowedArithmeticOperators.ADD,
            )
        """
        targets: list[tuple[str, Flag]] = []
        for value in flags:
            attribute = _FLAG_FIELDS.get(type(value))
            if attribute is None:
                raise InvalidArgumentError(
                    "flags", value, "expected an Allowed* flag enumeration value"
                )
            targets.append((attribute, value))
        self._ensure_mutable()
        for attribute, value in targets:
            current = getattr(self._settings, attribute)
            setattr(self._settings, attribute, current | value)
        return self

    # -- query options with limits -------------------------------------------

    def allow_skip(self: B, max_skip: int | None = None) -> B:
        """Allow ``$skip``; a positive *max_skip* also caps its value."""
        limit = non_negative(max_skip, "max_skip")
        self._grant(AllowedQueryOptions.SKIP)
        self._set_limit("max_skip", limit)
        return self

    def allow_top(self: B, max_top: int | None = None) -> B:
        """Allow ``$top``; a positive *max_top* also caps its value."""
        limit = non_negative(max_top, "max_top")
        self._grant(AllowedQueryOptions.TOP)
        self._set_limit("max_top", limit)
        return self

    def allow_expand(self: B, max_depth: int | None = None) -> B:
        """Allow ``$expand``; a positive *max_depth* caps nesting."""
        limit = non_negative(max_depth, "max_depth")
        self._grant(AllowedQueryOptions.EXPAND)
        self._set_limit("max_expansion_depth", limit)
        return self

    def allow_any_all(self: B, max_expression_depth: int | None = None) -> B:
        """Allow the ``any``/``all`` lambda functions, which implies ``$filter``."""
        limit = non_negative(max_expression_depth, "max_expression_depth")
        self._ensure_mutable()
        self._settings.allowed_functions |= _ANY_ALL
        self._grant(AllowedQueryOptions.FILTER)
        self._set_limit("max_any_all_expression_depth", limit)
        return self

    def allow_filter(self: B, max_node_count: int | None = None) -> B:
        """Allow ``$filter``; a positive *max_node_count* caps the expression size."""
        limit = non_negative(max_node_count, "max_node_count")
        self._grant(AllowedQueryOptions.FILTER)
        self._set_limit("max_node_count", limit)
        return self

    def allow_order_by(
        self: B,
        max_node_count: int | None = None,
        properties: Iterable[str] | None = (),
    ) -> B:
        """Allow ``$orderby``.

        Args:
            max_node_count: Most sort clauses accepted; ``None``/``0`` keeps
                the current limit.
            properties: Property names that may be sorted on, appended in
                order.  Names already present are appended again.  Leaving
                the collection empty allows any property.
        """
        if properties is None:
            raise InvalidArgumentError("properties", properties, "must not be None")
        if isinstance(properties, str):
            raise InvalidArgumentError(
                "properties", properties, "expected a sequence of names, not a string"
            )
        limit = non_negative(max_node_count, "max_node_count")
        names = list(properties)
        self._grant(AllowedQueryOptions.ORDER_BY)
        self._set_limit("max_order_by_node_count", limit)
        self._settings.allowed_order_by_properties.extend(names)
        return self

    # -- internals -----------------------------------------------------------

    def _grant(self, option: AllowedQueryOptions) -> None:
        self._ensure_mutable()
        self._settings.allowed_query_options |= option

    def _set_limit(self, name: str, value: int | None) -> None:
        if value is None:
            return
        setattr(self._settings, name, value)
        logger.debug("%r: %s = %d", self, name, value)
