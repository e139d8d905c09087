"""Shared fixtures for query policy tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_query_policy import QueryOptionsRegistry, ResourceQueryOptionsBuilder


class OrdersResource:
    """Stand-in API resource; its methods are the operation identities."""

    def list_orders(self) -> None:
        pass

    def get_order(self, order_id: str) -> None:
        pass

    def list_order_lines(self, order_id: str) -> None:
        pass

    def _internal(self) -> None:
        pass


@pytest.fixture
def registry() -> QueryOptionsRegistry:
    return QueryOptionsRegistry()


@pytest.fixture
def orders(registry: QueryOptionsRegistry) -> ResourceQueryOptionsBuilder:
    return registry.resource(OrdersResource)


@pytest.fixture
def resource_cls() -> type[OrdersResource]:
    return OrdersResource
