"""propmap error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Discovery (building a type's property table or handles)
- 4xxx: Access (using an adapted object)

Every error is a frozen dataclass built through a classmethod factory, so
the code, message and details of one failure mode are defined in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Stable numeric codes, grouped by range."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2003

    # Discovery (3xxx)
    DISCOVERY_INVALID_TARGET = 3001
    DISCOVERY_ACCESS_DENIED = 3002
    DISCOVERY_HANDLE_GENERATION = 3003

    # Access (4xxx)
    ACCESS_INVOCATION_FAILED = 4001
    ACCESS_UNSUPPORTED_OPERATION = 4002


@dataclass(frozen=True, slots=True)
class PropMapError(Exception):
    """Base error: a code, a human message and machine-readable details."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form of the error."""
        return {
            "code": int(self.code),
            "name": self.code.name,
            "message": self.message,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.code.name}: {self.message}"


class ConfigError(PropMapError):
    """A config file or value could not be used."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"{path} is not a valid config file: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"{field} = {value!r} rejected: {reason}",
            details={"field": field, "value": repr(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"No config file at {path}",
            details={"path": path},
        )


class DiscoveryError(PropMapError):
    """Errors raised while building a type's property table or handles."""

    @classmethod
    def invalid_target(cls, reason: str) -> DiscoveryError:
        return cls(
            code=ErrorCode.DISCOVERY_INVALID_TARGET,
            message=f"Cannot adapt target: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def access_denied(cls, accessor: str, reason: str) -> DiscoveryError:
        return cls(
            code=ErrorCode.DISCOVERY_ACCESS_DENIED,
            message=f"Cannot access accessor {accessor}: {reason}",
            details={"accessor": accessor, "reason": reason},
        )

    @classmethod
    def generation_failed(cls, accessor: str, reason: str) -> DiscoveryError:
        return cls(
            code=ErrorCode.DISCOVERY_HANDLE_GENERATION,
            message=f"Failed to generate handle for {accessor}: {reason}",
            details={"accessor": accessor, "reason": reason},
        )


class PropertyAccessError(PropMapError):
    """An accessor raised while reading or writing a property.

    The underlying exception is always chained as ``__cause__``.
    """

    @classmethod
    def invocation_failed(
        cls, property_name: str, operation: str, cause: BaseException
    ) -> PropertyAccessError:
        return cls(
            code=ErrorCode.ACCESS_INVOCATION_FAILED,
            message=f"Failed to {operation} property '{property_name}': {cause}",
            details={
                "property": property_name,
                "operation": operation,
                "cause": type(cause).__name__,
            },
        )


class UnsupportedOperationError(PropMapError):
    """Structural mutation (removal) of a property set was attempted."""

    @classmethod
    def removal(cls, operation: str) -> UnsupportedOperationError:
        return cls(
            code=ErrorCode.ACCESS_UNSUPPORTED_OPERATION,
            message=f"{operation} is not supported: properties cannot be removed from a type",
            details={"operation": operation},
        )
