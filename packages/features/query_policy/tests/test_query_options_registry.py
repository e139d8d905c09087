"""Tests for QueryOptionsRegistry lifecycle and the consumer protocols."""

from __future__ import annotations

import logging

import pytest

from cqrs_ddd_query_policy import (
    AllowedQueryOptions,
    ConfigurationFrozenError,
    IQueryOptionsValidator,
    ISettingsProvider,
    QueryOptionsRegistry,
    ValidationSettings,
)


def test_resource_is_memoized(registry, resource_cls) -> None:
    first = registry.resource(resource_cls)
    assert registry.resource(resource_cls) is first
    assert registry.has_resource(resource_cls)


def test_registries_are_independent(resource_cls) -> None:
    a = QueryOptionsRegistry()
    b = QueryOptionsRegistry()
    a.resource(resource_cls).allow_top(10)
    assert not b.has_resource(resource_cls)


def test_settings_for_resolves_operation_then_defaults(registry, resource_cls) -> None:
    orders = registry.resource(resource_cls)
    orders.allow_filter(30)
    orders.operation(resource_cls.list_orders).allow_top(100)

    listed = registry.settings_for(resource_cls, resource_cls.list_orders)
    fetched = registry.settings_for(resource_cls, resource_cls.get_order)

    assert listed is not None
    assert listed.allowed_query_options == AllowedQueryOptions.TOP
    assert fetched is orders.settings


def test_settings_for_unknown_resource_is_none(registry) -> None:
    assert registry.settings_for("missing", "op") is None


def test_snapshot(registry, resource_cls) -> None:
    registry.resource(resource_cls).operation(resource_cls.list_orders).allow_top(3)
    snapshot = registry.snapshot()
    assert snapshot["OrdersResource"]["operations"]["list_orders"]["max_top"] == 3


# -- Freezing ---------------------------------------------------------------


@pytest.fixture
def frozen(registry, resource_cls) -> QueryOptionsRegistry:
    orders = registry.resource(resource_cls)
    orders.allow_top(10)
    orders.operation(resource_cls.list_orders).allow_skip(5).allow_order_by(0, ["id"])
    registry.freeze()
    return registry


def test_freeze_logs(registry, caplog) -> None:
    caplog.set_level(logging.INFO, logger="cqrs_ddd_query_policy")
    registry.resource("orders")
    registry.freeze()
    assert registry.frozen
    assert "frozen with 1 resource(s)" in caplog.text


def test_freeze_is_idempotent(frozen) -> None:
    frozen.freeze()
    assert frozen.frozen


@pytest.mark.parametrize(
    "mutate",
    [
        lambda b: b.allow(AllowedQueryOptions.COUNT),
        lambda b: b.allow_skip(1),
        lambda b: b.allow_top(1),
        lambda b: b.allow_expand(1),
        lambda b: b.allow_any_all(1),
        lambda b: b.allow_filter(1),
        lambda b: b.allow_order_by(1, ["name"]),
        lambda b: b.use(ValidationSettings()),
    ],
)
def test_frozen_builders_reject_mutation(frozen, resource_cls, mutate) -> None:
    orders = frozen.resource(resource_cls)
    operation = orders.operation(resource_cls.list_orders)
    before_defaults = orders.settings.copy()
    before_operation = operation.settings.copy()

    with pytest.raises(ConfigurationFrozenError):
        mutate(orders)
    with pytest.raises(ConfigurationFrozenError):
        mutate(operation)

    assert orders.settings == before_defaults
    assert operation.settings == before_operation


def test_frozen_registry_still_serves_reads(frozen, resource_cls) -> None:
    settings = frozen.settings_for(resource_cls, resource_cls.list_orders)
    assert settings is not None
    assert settings.max_skip == 5
    assert frozen.resource(resource_cls).operation(resource_cls.list_orders).frozen


def test_frozen_registry_refuses_new_entries(frozen, resource_cls) -> None:
    with pytest.raises(ConfigurationFrozenError):
        frozen.resource("another")
    with pytest.raises(ConfigurationFrozenError):
        frozen.resource(resource_cls).operation(resource_cls.get_order)
    with pytest.raises(ConfigurationFrozenError):
        frozen.resource(resource_cls).operation_named("get_order")


def test_clear(registry, resource_cls) -> None:
    registry.resource(resource_cls)
    registry.clear()
    assert not registry.has_resource(resource_cls)

    registry.freeze()
    with pytest.raises(ConfigurationFrozenError):
        registry.clear()


# -- Protocols --------------------------------------------------------------


class MaxTopValidator:
    """Minimal request-time consumer used to exercise the protocol."""

    def validate(self, query, settings) -> None:
        top = query.get("top")
        if top is None:
            return
        if not settings.is_allowed(AllowedQueryOptions.TOP):
            raise PermissionError("$top is not allowed")
        if settings.max_top is not None and top > settings.max_top:
            raise PermissionError(f"$top exceeds {settings.max_top}")


def test_registry_is_a_settings_provider(registry) -> None:
    assert isinstance(registry, ISettingsProvider)


def test_validator_consumes_resolved_settings(frozen, resource_cls) -> None:
    validator = MaxTopValidator()
    assert isinstance(validator, IQueryOptionsValidator)

    provider: ISettingsProvider = frozen
    defaults = provider.settings_for(resource_cls, resource_cls.get_order)
    listed = provider.settings_for(resource_cls, resource_cls.list_orders)
    assert defaults is not None
    assert listed is not None

    validator.validate({"top": 10}, defaults)
    with pytest.raises(PermissionError, match="exceeds 10"):
        validator.validate({"top": 11}, defaults)
    with pytest.raises(PermissionError, match="not allowed"):
        validator.validate({"top": 1}, listed)
