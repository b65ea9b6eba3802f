"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TESTLINK__SECTION__KEY)
3. Project YAML (.testlink/config.yaml)
4. Built-in defaults (this file)

Examples:
    TESTLINK__LOGGING__LEVEL=DEBUG
    TESTLINK__SYNC__LINK_ONLY=true
    TESTLINK__DISCOVERY__PRODUCTION_DIRS='["src", "lib"]'
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TESTLINK__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. User-facing output does not depend on it.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiscoveryConfig(BaseModel):
    """Where production code and tests live, relative to the project root.

    Env vars:
        TESTLINK__DISCOVERY__PRODUCTION_DIRS: JSON list of production directories
        TESTLINK__DISCOVERY__TEST_DIRS: JSON list of test directories
    """

    production_dirs: list[str] = Field(default_factory=lambda: ["src", "app"])
    test_dirs: list[str] = Field(default_factory=lambda: ["tests"])
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["vendor", "node_modules", ".git"],
        description="Directory names skipped at any depth.",
    )
    test_namespace: str = Field(
        default="Tests",
        description="Root namespace mapped onto the first test directory (PSR-4).",
    )

    @field_validator("production_dirs", "test_dirs")
    @classmethod
    def validate_dirs(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one directory is required")
        for d in v:
            if Path(d).is_absolute():
                raise ValueError(f"Directory must be relative to the project root: {d}")
        return v


class SyncConfig(BaseModel):
    """Sync defaults.

    Env vars:
        TESTLINK__SYNC__LINK_ONLY: Emit links() instead of linksAndCovers()
        TESTLINK__SYNC__SEE_WINDOW_LINES: Lines searched above a member by fix-refs
    """

    link_only: bool = False
    see_window_lines: int = Field(default=20, ge=1)


class TestLinkConfig(BaseModel):
    """Root configuration."""

    __test__ = False

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
