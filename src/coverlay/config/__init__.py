"""Config module exports."""

from coverlay.config.loader import load_config
from coverlay.config.models import (
    CoverageConfig,
    CoverlayConfig,
    LoggingConfig,
    RenderConfig,
    WatchConfig,
)

__all__ = [
    "load_config",
    "CoverlayConfig",
    "CoverageConfig",
    "LoggingConfig",
    "RenderConfig",
    "WatchConfig",
]
