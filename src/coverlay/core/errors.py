"""Coverlay error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Discovery
- 4xxx: Parse
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Discovery (3xxx)
    DISCOVERY_PATH_MISSING = 3001
    DISCOVERY_NOTHING_FOUND = 3002
    DISCOVERY_GLOB_FAILED = 3003

    # Parse (4xxx)
    PARSE_MALFORMED = 4001


@dataclass(frozen=True, slots=True)
class CoverlayError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CoverlayError):
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


class DiscoveryError(CoverlayError):
    """Coverage file discovery problems. Always surfaced as warnings."""

    @classmethod
    def path_missing(cls, path: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_PATH_MISSING,
            message=f'manualCoverageFilePaths contains "{path}" which does not exist!',
            details={"path": path},
        )

    @classmethod
    def nothing_found(cls, file_names: list[str]) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_NOTHING_FOUND,
            message="Could not find a Coverage file! Searched for " + ", ".join(file_names),
            details={"file_names": list(file_names)},
        )

    @classmethod
    def glob_failed(cls, pattern: str, reason: str) -> "DiscoveryError":
        return cls(
            code=ErrorCode.DISCOVERY_GLOB_FAILED,
            message=f"An error occured while looking for the coverage file {reason}",
            details={"pattern": pattern, "reason": reason},
        )


class CoverageParseError(CoverlayError):
    """A report could not be parsed in its detected format."""

    @classmethod
    def malformed(cls, system: str, reason: str, filename: str | None = None) -> "CoverageParseError":
        prefix = f"filename: {filename} " if filename else ""
        return cls(
            code=ErrorCode.PARSE_MALFORMED,
            message=f"{prefix}{reason}",
            details={"system": system, "filename": filename, "reason": reason},
        )

    def with_filename(self, filename: str) -> "CoverageParseError":
        """Return a copy that names the offending coverage file."""
        return CoverageParseError.malformed(
            self.details.get("system", "unknown"),
            self.details.get("reason", self.message),
            filename,
        )

