"""
Declarative query policy loaded from plain data (YAML, JSON, settings dicts).

Example::

    apply_config(
        registry,
        {
            "resources": {
                "orders": {
                    "defaults": {"query_options": ["filter"], "max_top": 50},
                    "operations": {
                        "list_orders": {
                            "query_options": ["filter", "count"],
                            "max_top": 100,
                            "order_by_properties": ["created_at", "total"],
                        },
                    },
                },
            },
        },
        resolve_resource={"orders": OrdersResource}.__getitem__,
    )

The data is validated with Pydantic and then replayed through the fluent
builder API, so it accumulates onto whatever was configured in code.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidArgumentError, QueryPolicyError
from .flags import (
    AllowedArithmeticOperators,
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
    parse_flags,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping

    from .base import QueryOptionsBuilderBase
    from .registry import QueryOptionsRegistry

logger = logging.getLogger(__name__)


class ConfigurationError(InvalidArgumentError):
    """Declarative configuration failed validation.

    Carries structured errors: ``{location: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        self.argument = "config"
        self.value = None
        self.reason = "; ".join(
            f"{loc}: {', '.join(messages)}" for loc, messages in errors.items()
        )
        QueryPolicyError.__init__(
            self, f"Invalid query policy configuration: {self.reason}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": "INVALID_CONFIGURATION", "errors": self.errors}


class SettingsConfig(BaseModel):
    """Policy for one resource or operation.

    A limit implies its query option: ``max_top: 100`` also allows ``$top``.
    """

    model_config = ConfigDict(extra="forbid")

    arithmetic_operators: list[str] = Field(default_factory=list)
    functions: list[str] = Field(default_factory=list)
    logical_operators: list[str] = Field(default_factory=list)
    query_options: list[str] = Field(default_factory=list)
    max_skip: int | None = Field(default=None, ge=0)
    max_top: int | None = Field(default=None, ge=0)
    max_expansion_depth: int | None = Field(default=None, ge=0)
    max_any_all_expression_depth: int | None = Field(default=None, ge=0)
    max_node_count: int | None = Field(default=None, ge=0)
    max_order_by_node_count: int | None = Field(default=None, ge=0)
    order_by_properties: list[str] = Field(default_factory=list)

    @field_validator("arithmetic_operators")
    @classmethod
    def _check_arithmetic_operators(cls, names: list[str]) -> list[str]:
        parse_flags(AllowedArithmeticOperators, names)
        return names

    @field_validator("functions")
    @classmethod
    def _check_functions(cls, names: list[str]) -> list[str]:
        parse_flags(AllowedFunctions, names)
        return names

    @field_validator("logical_operators")
    @classmethod
    def _check_logical_operators(cls, names: list[str]) -> list[str]:
        parse_flags(AllowedLogicalOperators, names)
        return names

    @field_validator("query_options")
    @classmethod
    def _check_query_options(cls, names: list[str]) -> list[str]:
        parse_flags(AllowedQueryOptions, names)
        return names

    def apply_to(self, builder: QueryOptionsBuilderBase) -> None:
        """Replay this configuration through *builder*'s fluent API."""
        builder.allow(
            parse_flags(AllowedArithmeticOperators, self.arithmetic_operators),
            parse_flags(AllowedFunctions, self.functions),
            parse_flags(AllowedLogicalOperators, self.logical_operators),
            parse_flags(AllowedQueryOptions, self.query_options),
        )
        if self.max_skip is not None:
            builder.allow_skip(self.max_skip)
        if self.max_top is not None:
            builder.allow_top(self.max_top)
        if self.max_expansion_depth is not None:
            builder.allow_expand(self.max_expansion_depth)
        if self.max_any_all_expression_depth is not None:
            builder.allow_any_all(self.max_any_all_expression_depth)
        if self.max_node_count is not None:
            builder.allow_filter(self.max_node_count)
        if self.max_order_by_node_count is not None or self.order_by_properties:
            builder.allow_order_by(
                self.max_order_by_node_count, self.order_by_properties
            )


class ResourceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    defaults: SettingsConfig = Field(default_factory=SettingsConfig)
    operations: dict[str, SettingsConfig] = Field(default_factory=dict)


class QueryPolicyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resources: dict[str, ResourceConfig] = Field(default_factory=dict)


def load_config(data: Mapping[str, Any] | QueryPolicyConfig) -> QueryPolicyConfig:
    """Validate *data*, converting Pydantic errors into ``ConfigurationError``."""
    if isinstance(data, QueryPolicyConfig):
        return data
    try:
        return QueryPolicyConfig.model_validate(data)
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ("__root__",)))
            msg = error.get("msg", "validation error")
            errors.setdefault(loc, []).append(msg)
        raise ConfigurationError(errors) from exc


def apply_config(
    registry: QueryOptionsRegistry,
    data: Mapping[str, Any] | QueryPolicyConfig,
    *,
    resolve_resource: Callable[[str], Hashable] | None = None,
) -> QueryPolicyConfig:
    """Validate *data* and apply it to *registry*.

    Without *resolve_resource* the resource keys and operation names are
    used as opaque identities.  With it, each resource key is mapped to a
    resource type and operation names are resolved as attributes of that
    type (see ``ResourceQueryOptionsBuilder.operation_named``).
    """
    config = load_config(data)
    for key, resource_config in config.resources.items():
        if resolve_resource is None:
            resource = registry.resource(key)
        else:
            resource = registry.resource(resolve_resource(key))
        resource_config.defaults.apply_to(resource)
        for name, operation_config in resource_config.operations.items():
            if resolve_resource is None:
                operation = resource.operation(name)
            else:
                operation = resource.operation_named(name)
            operation_config.apply_to(operation)
        logger.debug(
            "Applied query policy for %r (%d operation(s))",
            resource,
            len(resource_config.operations),
        )
    return config
