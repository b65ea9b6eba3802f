"""TestLink error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Scan
- 4xxx: Placeholder
- 5xxx: Sync
- 6xxx: Name resolution
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Scan (3xxx)
    SCAN_ROOT_NOT_FOUND = 3001

    # Placeholder (4xxx)
    PLACEHOLDER_INVALID_FORMAT = 4001
    PLACEHOLDER_NOT_FOUND = 4002

    # Sync (5xxx)
    SYNC_PRUNE_NOT_CONFIRMED = 5001
    SYNC_FILE_NOT_FOUND = 5002

    # Name resolution (6xxx)
    NAME_UNRESOLVED = 6001
    NAME_FILE_UNREADABLE = 6002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class TestLinkError(Exception):
    """Base error with structured context for CLI and JSON output."""

    __test__ = False

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TestLinkError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ScanError(TestLinkError):
    """Project scanning errors."""

    @classmethod
    def root_not_found(cls, path: str) -> "ScanError":
        return cls(
            code=ErrorCode.SCAN_ROOT_NOT_FOUND,
            message=f"Project root does not exist: {path}",
            details={"path": path},
        )


class PlaceholderError(TestLinkError):
    """Placeholder lookup errors."""

    @classmethod
    def invalid_format(cls, placeholder: str) -> "PlaceholderError":
        return cls(
            code=ErrorCode.PLACEHOLDER_INVALID_FORMAT,
            message=(
                f"Invalid placeholder format: {placeholder}. "
                "Must start with @ followed by a letter."
            ),
            details={"placeholder": placeholder},
        )

    @classmethod
    def not_found(cls, placeholder: str) -> "PlaceholderError":
        return cls(
            code=ErrorCode.PLACEHOLDER_NOT_FOUND,
            message=f"Placeholder {placeholder} not found in any production or test file",
            details={"placeholder": placeholder},
        )


class SyncError(TestLinkError):
    """Synchronization errors that abort a run."""

    @classmethod
    def prune_not_confirmed(cls) -> "SyncError":
        return cls(
            code=ErrorCode.SYNC_PRUNE_NOT_CONFIRMED,
            message=(
                "The --prune option requires --force to confirm deletion "
                "of orphaned link calls."
            ),
        )

    @classmethod
    def file_not_found(cls, path: str) -> "SyncError":
        return cls(
            code=ErrorCode.SYNC_FILE_NOT_FOUND,
            message=f"File not found: {path}",
            details={"path": path},
        )


class NameResolutionError(TestLinkError):
    """A short type reference could not be resolved to a fully-qualified name."""

    @classmethod
    def unresolved(cls, token: str) -> "NameResolutionError":
        return cls(
            code=ErrorCode.NAME_UNRESOLVED,
            message=f"Could not resolve '{token}' - not found in use statements",
            details={"token": token},
        )

    @classmethod
    def method_only(cls, reference: str) -> "NameResolutionError":
        return cls(
            code=ErrorCode.NAME_UNRESOLVED,
            message=f"Method-only reference '{reference}' cannot be resolved",
            details={"token": reference},
        )

    @classmethod
    def unreadable(cls, path: str) -> "NameResolutionError":
        return cls(
            code=ErrorCode.NAME_FILE_UNREADABLE,
            message=f"Could not parse file: {path}",
            details={"path": path},
        )


class InternalError(TestLinkError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
