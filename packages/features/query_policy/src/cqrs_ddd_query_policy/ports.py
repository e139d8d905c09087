"""Protocols for the request-time side that consumes configured query policy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .settings import ValidationSettings


@runtime_checkable
class ISettingsProvider(Protocol):
    """Resolve the settings governing one operation of one resource.

    :class:`~cqrs_ddd_query_policy.registry.QueryOptionsRegistry` satisfies
    this protocol.
    """

    def settings_for(
        self, resource_type: Hashable, operation: Hashable
    ) -> ValidationSettings | None: ...


@runtime_checkable
class IQueryOptionsValidator(Protocol):
    """Reject an already-parsed query that falls outside *settings*.

    Implementations raise their own error type; returning normally means
    the query is acceptable.
    """

    def validate(self, query: Any, settings: ValidationSettings) -> None: ...
