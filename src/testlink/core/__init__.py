"""Core module exports."""

from testlink.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    NameResolutionError,
    PlaceholderError,
    ScanError,
    SyncError,
    TestLinkError,
)
from testlink.core.logging import configure_logging, get_logger
from testlink.core.progress import get_console, status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "NameResolutionError",
    "PlaceholderError",
    "ScanError",
    "SyncError",
    "TestLinkError",
    # Logging
    "configure_logging",
    "get_logger",
    # Output
    "get_console",
    "status",
]
