"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVERLAY__SECTION__KEY)
3. Repo YAML (.coverlay/config.yaml)
4. Global YAML (~/.config/coverlay/config.yaml)
5. Built-in defaults (this file)

Examples:
    COVERLAY__LOGGING__LEVEL=DEBUG
    COVERLAY__COVERAGE__COVERAGE_BASE_DIR=build
    COVERLAY__COVERAGE__PARSE_CONCURRENCY=4
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_COVERAGE_FILE_NAMES: tuple[str, ...] = (
    "lcov.info",
    "cov.xml",
    "coverage.xml",
    "cobertura.xml",
    "jacoco.xml",
    "coverage.cobertura.xml",
    "clover.xml",
)

DEFAULT_IGNORED_PATH_GLOBS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/venv/**",
    "**/.venv/**",
    "**/vendor/**",
)


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
        COVERLAY__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports every rebuild and render cycle.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Coverage file discovery and aggregation.

    Env vars:
        COVERLAY__COVERAGE__COVERAGE_BASE_DIR: Glob prefix searched under each workspace folder
        COVERLAY__COVERAGE__PARSE_CONCURRENCY: Max reports parsed at once
    """

    coverage_base_dir: str = Field(
        default="**",
        description="Glob prefix joined with each coverage file name, relative to the workspace folder.",
    )
    coverage_file_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COVERAGE_FILE_NAMES),
        description="Coverage report file names to search for.",
    )
    manual_coverage_file_paths: list[str] = Field(
        default_factory=list,
        description="Absolute report paths. When non-empty, search is skipped entirely.",
    )
    ignored_path_globs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORED_PATH_GLOBS),
        description="Glob patterns excluded from the coverage file search.",
    )
    parse_concurrency: int = Field(
        default=8,
        description="Maximum number of reports parsed concurrently.",
    )

    @field_validator("manual_coverage_file_paths")
    @classmethod
    def validate_manual_paths(cls, v: list[str]) -> list[str]:
        resolved = []
        for raw in v:
            path = Path(raw).expanduser()
            if not path.is_absolute():
                raise ValueError(f"Manual coverage path must be absolute: {raw}")
            resolved.append(str(path))
        return resolved

    @field_validator("parse_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"parse_concurrency must be >= 1, got {v}")
        return v


class RenderConfig(BaseModel):
    """Terminal rendering of the three decoration channels."""

    show_line_numbers: bool = True
    full_marker: str = "█"
    partial_marker: str = "▒"
    none_marker: str = "░"
    full_style: str = "green"
    partial_style: str = "yellow"
    none_style: str = "red"


class WatchConfig(BaseModel):
    """Watch mode.

    Env vars:
        COVERLAY__WATCH__DEBOUNCE_SEC: Quiet period before rebuilding
    """

    debounce_sec: float = Field(
        default=0.3,
        description="Wait this long after the last report change before rebuilding.",
    )


class CoverlayConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
