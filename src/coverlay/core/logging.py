"""Structured logging for coverlay.

structlog events are handed to stdlib logging and rendered per configured
output (console or JSON, stderr/stdout or a file). Events emitted while a
rebuild is running carry that rebuild's `cycle_id`.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from coverlay.config.models import LoggingConfig, LogOutputConfig

_cycle_id: ContextVar[str | None] = ContextVar("cycle_id", default=None)


def get_cycle_id() -> str | None:
    return _cycle_id.get()


def set_cycle_id(cycle_id: str | None = None) -> str:
    """Set or generate the correlation ID of the current cycle."""
    cid = cycle_id or uuid4().hex[:12]
    _cycle_id.set(cid)
    return cid


def clear_cycle_id() -> None:
    _cycle_id.set(None)


def _add_cycle_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if cid := get_cycle_id():
        event_dict["cycle_id"] = cid
    return event_dict


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    _add_cycle_id,  # type: ignore[list-item]
]


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _handler_for(output: LogOutputConfig, default_level: int) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        is_tty = isinstance(handler, logging.StreamHandler) and handler.stream.isatty()
        renderer = structlog.dev.ConsoleRenderer(colors=is_tty, pad_event_to=0, pad_level=False)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )
    handler.setLevel(_level(output.level) if output.level else default_level)
    return handler


def configure_logging(*, config: LoggingConfig | None = None, level: str = "INFO") -> None:
    """Route structlog through stdlib handlers, one per configured output.

    Without `config` a single console output on stderr at `level` is used.
    """
    from coverlay.config.models import LoggingConfig

    if config is None:
        config = LoggingConfig(level=level)  # type: ignore[arg-type]

    default_level = _level(config.level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured per CLI invocation; cached loggers would keep the old level
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)
    for output in config.outputs:
        root_logger.addHandler(_handler_for(output, default_level))

    # watchfiles logs every filtered change at debug
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
