"""Core module exports."""

from propmap.core.errors import (
    ConfigError,
    DiscoveryError,
    ErrorCode,
    PropertyAccessError,
    PropMapError,
    UnsupportedOperationError,
)
from propmap.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "PropMapError",
    "ConfigError",
    "DiscoveryError",
    "ErrorCode",
    "PropertyAccessError",
    "UnsupportedOperationError",
    # Logging
    "configure_logging",
    "get_logger",
]
