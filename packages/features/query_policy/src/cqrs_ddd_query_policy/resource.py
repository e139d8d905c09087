"""ResourceQueryOptionsBuilder: resource defaults plus per-operation builders."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from .base import QueryOptionsBuilderBase
from .exceptions import ConfigurationFrozenError, OperationNotFoundError
from .guards import not_none
from .operation import OperationQueryOptionsBuilder, describe_identity

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .settings import ValidationSettings

logger = logging.getLogger(__name__)


class ResourceQueryOptionsBuilder(QueryOptionsBuilderBase):
    """Query option policy for every operation of one resource.

    The fluent mutators inherited from
    :class:`~cqrs_ddd_query_policy.base.QueryOptionsBuilderBase` configure
    resource-wide defaults.  :meth:`operation` hands out one memoized
    :class:`OperationQueryOptionsBuilder` per operation identity.

    **Resolution:** an operation that has its own builder is validated with
    that builder's settings alone; the resource defaults are not merged in.
    Operations never configured fall back to the resource defaults.
    """

    def __init__(self, resource_type: Hashable) -> None:
        super().__init__()
        self._resource_type = not_none(resource_type, "resource_type")
        self._operations: dict[Hashable, OperationQueryOptionsBuilder] = {}
        self._lock = threading.Lock()

    @property
    def resource_type(self) -> Any:
        return self._resource_type

    # ── Operation builders ───────────────────────────────────────

    def operation(self, identity: Hashable) -> OperationQueryOptionsBuilder:
        """Return the builder for *identity*, creating it on first request.

        Equal identities always yield the same builder instance, also when
        called concurrently from several threads.
        """
        not_none(identity, "identity")
        builder = self._operations.get(identity)
        if builder is not None:
            return builder
        with self._lock:
            builder = self._operations.get(identity)
            if builder is None:
                if self._frozen:
                    raise ConfigurationFrozenError(
                        f"Cannot add operation {describe_identity(identity)!r} to "
                        f"{self!r}: configuration is frozen"
                    )
                builder = OperationQueryOptionsBuilder(self, identity)
                self._operations[identity] = builder
                logger.debug("Created query options builder %r", builder)
        return builder

    def operation_named(self, name: str) -> OperationQueryOptionsBuilder:
        """Resolve *name* as a callable attribute of the resource and configure it."""
        target = getattr(self._resource_type, name, None)
        if name.startswith("_") or not callable(target):
            raise OperationNotFoundError(
                name, describe_identity(self._resource_type), self._public_callables()
            )
        return self.operation(target)

    def has_operation(self, identity: Hashable) -> bool:
        return identity in self._operations

    def operations(self) -> dict[Hashable, OperationQueryOptionsBuilder]:
        """Return a snapshot of the configured operation builders."""
        return dict(self._operations)

    # ── Resolution ───────────────────────────────────────────────

    def settings_for(self, identity: Hashable) -> ValidationSettings:
        """Return the settings that govern *identity*.

        The operation's own settings if it was configured, otherwise the
        resource-level defaults.  Both are returned by reference.
        """
        builder = self._operations.get(identity)
        if builder is not None:
            return builder.settings
        return self._settings

    # ── Lifecycle ────────────────────────────────────────────────

    def _freeze(self) -> None:
        with self._lock:
            super()._freeze()
            for builder in self._operations.values():
                builder._freeze()

    def to_dict(self) -> dict[str, Any]:
        return {
            "defaults": self._settings.to_dict(),
            "operations": {
                describe_identity(identity): builder.settings.to_dict()
                for identity, builder in self._operations.items()
            },
        }

    def _public_callables(self) -> list[str]:
        return [
            name
            for name in dir(self._resource_type)
            if not name.startswith("_")
            and callable(getattr(self._resource_type, name, None))
        ]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({describe_identity(self._resource_type)})"
