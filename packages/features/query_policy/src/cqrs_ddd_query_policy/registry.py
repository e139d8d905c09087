"""QueryOptionsRegistry: query option policy for every resource of an application."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationFrozenError
from .guards import not_none
from .operation import describe_identity
from .resource import ResourceQueryOptionsBuilder

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .settings import ValidationSettings

logger = logging.getLogger(__name__)


class QueryOptionsRegistry:
    """Explicit store of resource builders for one application.

    Create one while bootstrapping, hand it to the configuration code, then
    call :meth:`freeze` before serving requests.  From then on the
    registry is read-only: the request-time validator reads settings through
    :meth:`settings_for`, and any attempt to change or extend the policy
    raises :class:`~cqrs_ddd_query_policy.exceptions.ConfigurationFrozenError`.
    """

    def __init__(self) -> None:
        self._resources: dict[Hashable, ResourceQueryOptionsBuilder] = {}
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Configuration ────────────────────────────────────────────

    def resource(self, resource_type: Hashable) -> ResourceQueryOptionsBuilder:
        """Return the builder for *resource_type*, creating it on first request."""
        not_none(resource_type, "resource_type")
        builder = self._resources.get(resource_type)
        if builder is not None:
            return builder
        with self._lock:
            builder = self._resources.get(resource_type)
            if builder is None:
                if self._frozen:
                    raise ConfigurationFrozenError(
                        f"Cannot add resource {describe_identity(resource_type)!r}: "
                        f"configuration is frozen"
                    )
                builder = ResourceQueryOptionsBuilder(resource_type)
                self._resources[resource_type] = builder
                logger.debug("Registered query options for %r", builder)
        return builder

    def freeze(self) -> None:
        """End the configuration phase.  Idempotent."""
        with self._lock:
            if self._frozen:
                return
            self._frozen = True
            for builder in self._resources.values():
                builder._freeze()
        logger.info(
            "Query options registry frozen with %d resource(s)", len(self._resources)
        )

    # ── Lookup ───────────────────────────────────────────────────

    def has_resource(self, resource_type: Hashable) -> bool:
        return resource_type in self._resources

    def settings_for(
        self, resource_type: Hashable, operation: Hashable
    ) -> ValidationSettings | None:
        """Resolve the settings for *operation*; ``None`` for unknown resources."""
        builder = self._resources.get(resource_type)
        if builder is None:
            return None
        return builder.settings_for(operation)

    # ── Introspection ────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Return the configured policy as plain data (for debugging)."""
        return {
            describe_identity(resource_type): builder.to_dict()
            for resource_type, builder in self._resources.items()
        }

    # ── Cleanup ──────────────────────────────────────────────────

    def clear(self) -> None:
        """Remove all resources (testing utility)."""
        if self._frozen:
            raise ConfigurationFrozenError("Cannot clear a frozen registry")
        with self._lock:
            self._resources.clear()


__all__ = ["QueryOptionsRegistry"]
