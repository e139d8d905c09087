"""
Query policy exception hierarchy.

All exceptions inherit from ``QueryPolicyError`` and provide ``to_dict()``
for API-friendly error responses.  Every one of them signals a programming
error detected while the application is being configured.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class QueryPolicyError(Exception):
    """Base exception for all query policy errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidArgumentError(QueryPolicyError, ValueError):
    """A builder argument violated its precondition.

    Raised before any state is touched, so the target settings are
    unchanged after the failed call.
    """

    def __init__(self, argument: str, value: Any, reason: str) -> None:
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{argument}': {value!r} ({reason})")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_ARGUMENT",
            "argument": self.argument,
            "value": repr(self.value),
            "reason": self.reason,
        }


class OperationNotFoundError(QueryPolicyError, LookupError):
    """
    Unknown operation name on a resource.

    Provides fuzzy-matched suggestions for likely intended operations.
    """

    def __init__(self, name: str, resource_name: str, available: list[str]) -> None:
        self.name = name
        self.resource_name = resource_name
        self.available = available
        self.suggestions = get_close_matches(name, available, n=3, cutoff=0.6)

        message = f"Resource '{resource_name}' has no operation '{name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATION_NOT_FOUND",
            "operation": self.name,
            "resource": self.resource_name,
            "suggestions": self.suggestions,
        }


class ConfigurationFrozenError(QueryPolicyError):
    """Raised when query options are changed after the registry was frozen."""
