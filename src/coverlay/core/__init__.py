"""Core module exports."""

from coverlay.core.errors import (
    ConfigError,
    CoverageParseError,
    CoverlayError,
    DiscoveryError,
    ErrorCode,
)
from coverlay.core.logging import (
    clear_cycle_id,
    configure_logging,
    get_cycle_id,
    get_logger,
    set_cycle_id,
)
from coverlay.core.progress import pluralize, status, warn

__all__ = [
    # Errors
    "ConfigError",
    "CoverageParseError",
    "CoverlayError",
    "DiscoveryError",
    "ErrorCode",
    # Logging
    "clear_cycle_id",
    "configure_logging",
    "get_cycle_id",
    "get_logger",
    "set_cycle_id",
    # Progress
    "pluralize",
    "status",
    "warn",
]
