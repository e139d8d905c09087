"""Per-operation query option policy: allowed options, operators and limits."""

from __future__ import annotations

from .base import QueryOptionsBuilderBase
from .config import (
    ConfigurationError,
    QueryPolicyConfig,
    ResourceConfig,
    SettingsConfig,
    apply_config,
    load_config,
)
from .exceptions import (
    ConfigurationFrozenError,
    InvalidArgumentError,
    OperationNotFoundError,
    QueryPolicyError,
)
from .flags import (
    AllowedArithmeticOperators,
    AllowedFunctions,
    AllowedLogicalOperators,
    AllowedQueryOptions,
    flag_names,
    parse_flags,
)
from .operation import OperationQueryOptionsBuilder
from .ports import IQueryOptionsValidator, ISettingsProvider
from .registry import QueryOptionsRegistry
from .resource import ResourceQueryOptionsBuilder
from .settings import ValidationSettings

__all__ = [
    # Flags
    "AllowedArithmeticOperators",
    "AllowedFunctions",
    "AllowedLogicalOperators",
    "AllowedQueryOptions",
    "flag_names",
    "parse_flags",
    # Settings
    "ValidationSettings",
    # Builders
    "QueryOptionsBuilderBase",
    "OperationQueryOptionsBuilder",
    "ResourceQueryOptionsBuilder",
    "QueryOptionsRegistry",
    # Configuration
    "ConfigurationError",
    "QueryPolicyConfig",
    "ResourceConfig",
    "SettingsConfig",
    "apply_config",
    "load_config",
    # Ports
    "IQueryOptionsValidator",
    "ISettingsProvider",
    # Exceptions
    "QueryPolicyError",
    "InvalidArgumentError",
    "OperationNotFoundError",
    "ConfigurationFrozenError",
]
