"""Configuration models and loader."""

from testlink.config.loader import load_config
from testlink.config.models import (
    DiscoveryConfig,
    LoggingConfig,
    LogOutputConfig,
    SyncConfig,
    TestLinkConfig,
)

__all__ = [
    "DiscoveryConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SyncConfig",
    "TestLinkConfig",
    "load_config",
]
