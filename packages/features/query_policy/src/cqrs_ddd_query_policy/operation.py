"""OperationQueryOptionsBuilder: query option policy for a single operation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import QueryOptionsBuilderBase
from .guards import not_none

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .resource import ResourceQueryOptionsBuilder


class OperationQueryOptionsBuilder(QueryOptionsBuilderBase):
    """Fluent builder owning the ``ValidationSettings`` of one operation.

    Instances are created by
    :meth:`~cqrs_ddd_query_policy.resource.ResourceQueryOptionsBuilder.operation`
    only, which memoizes them per identity.  Configuring the same operation
    from several call sites therefore accumulates into one settings object.
    """

    def __init__(
        self, resource: ResourceQueryOptionsBuilder, identity: Hashable
    ) -> None:
        super().__init__()
        self._resource = not_none(resource, "resource")
        self._identity = identity

    @property
    def resource(self) -> ResourceQueryOptionsBuilder:
        return self._resource

    @property
    def resource_type(self) -> Any:
        return self._resource.resource_type

    @property
    def identity(self) -> Hashable:
        return self._identity

    def operation(self, identity: Hashable) -> OperationQueryOptionsBuilder:
        """Get or create the builder of another operation on the same resource."""
        return self._resource.operation(identity)

    def __repr__(self) -> str:
        resource = describe_identity(self.resource_type)
        return f"{type(self).__name__}({resource}.{describe_identity(self._identity)})"


def describe_identity(token: Any) -> str:
    return str(getattr(token, "__name__", None) or token)
