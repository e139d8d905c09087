"""Tests for declarative query policy configuration."""

from __future__ import annotations

import pytest

from cqrs_ddd_query_policy import (
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
    ConfigurationError,
    InvalidArgumentError,
    QueryPolicyConfig,
    apply_config,
    load_config,
)


def _orders_config() -> dict:
    return {
        "resources": {
            "orders": {
                "defaults": {"query_options": ["filter"], "max_top": 50},
                "operations": {
                    "list_orders": {
                        "query_options": ["count"],
                        "logical_operators": ["and", "equal"],
                        "functions": ["all_string_functions"],
                        "max_top": 100,
                        "max_any_all_expression_depth": 2,
                        "order_by_properties": ["created_at", "total"],
                    },
                },
            },
        },
    }


def test_apply_config_with_opaque_keys(registry) -> None:
    apply_config(registry, _orders_config())

    defaults = registry.settings_for("orders", "unconfigured")
    assert defaults is not None
    assert defaults.allowed_query_options == (
        AllowedQueryOptions.FILTER | AllowedQueryOptions.TOP
    )
    assert defaults.max_top == 50

    listed = registry.settings_for("orders", "list_orders")
    assert listed is not None
    assert listed.allowed_query_options == (
        AllowedQueryOptions.COUNT
        | AllowedQueryOptions.TOP
        | AllowedQueryOptions.FILTER
        | AllowedQueryOptions.ORDER_BY
    )
    assert listed.allowed_logical_operators == (
        AllowedLogicalOperators.AND | AllowedLogicalOperators.EQUAL
    )
    assert AllowedFunctions.ALL_STRING_FUNCTIONS in listed.allowed_functions
    assert AllowedFunctions.ANY in listed.allowed_functions
    assert listed.max_top == 100
    assert listed.max_any_all_expression_depth == 2
    assert listed.max_order_by_node_count is None
    assert listed.allowed_order_by_properties == ["created_at", "total"]


def test_apply_config_resolves_resource_types(registry, resource_cls) -> None:
    apply_config(
        registry,
        _orders_config(),
        resolve_resource={"orders": resource_cls}.__getitem__,
    )

    builder = registry.resource(resource_cls)
    assert builder.has_operation(resource_cls.list_orders)
    settings = registry.settings_for(resource_cls, resource_cls.list_orders)
    assert settings is not None
    assert settings.max_top == 100


def test_apply_config_accumulates_onto_code_configuration(registry) -> None:
    registry.resource("orders").operation("list_orders").allow_skip(10).allow_order_by(
        0, ["created_at"]
    )

    apply_config(registry, _orders_config())

    settings = registry.settings_for("orders", "list_orders")
    assert settings is not None
    assert settings.max_skip == 10
    assert AllowedQueryOptions.SKIP in settings.allowed_query_options
    assert settings.allowed_order_by_properties == [
        "created_at",
        "created_at",
        "total",
    ]


def test_zero_limit_grants_option_without_cap(registry) -> None:
    apply_config(
        registry,
        {"resources": {"r": {"operations": {"op": {"max_expansion_depth": 0}}}}},
    )
    settings = registry.settings_for("r", "op")
    assert settings is not None
    assert AllowedQueryOptions.EXPAND in settings.allowed_query_options
    assert settings.max_expansion_depth is None


def test_load_config_accepts_validated_model() -> None:
    config = QueryPolicyConfig.model_validate(_orders_config())
    assert load_config(config) is config


def test_negative_limits_are_rejected(registry) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        apply_config(
            registry,
            {"resources": {"r": {"defaults": {"max_top": -1}}}},
        )
    assert "resources.r.defaults.max_top" in exc_info.value.errors
    assert not registry.has_resource("r")


def test_unknown_flag_names_are_rejected() -> None:
    with pytest.raises(ConfigurationError, match="filtre"):
        load_config({"resources": {"r": {"defaults": {"query_options": ["filtre"]}}}})


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({"resources": {"r": {"defaults": {"max_tops": 1}}}})
    assert "resources.r.defaults.max_tops" in exc_info.value.errors


def test_configuration_error_is_an_invalid_argument() -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        load_config({"unexpected": True})
    assert exc_info.value.to_dict()["error"] == "INVALID_CONFIGURATION"
