# src/xolyd/core/logging.py
"""structlog setup for processes hosting Xolyd plugins.

Inside the platform the host trace log is the only output operators see.
Outside it (test harnesses, offline replays of captured contexts) plugins
and the core helpers also emit structlog events: skipped plugins, facade
calls, failed context dumps.

Both structlog loggers and plain `logging.getLogger()` loggers end up on a
single stdout handler whose ProcessorFormatter renders them the same way.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.stdlib import ProcessorFormatter

if TYPE_CHECKING:
    from xolyd.core.config import LoggingSettings

# Dynaconf logs every settings lookup at DEBUG
_QUIET_LOGGERS: tuple[str, ...] = ("dynaconf",)


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [_drop_formatter_keys, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [_drop_formatter_keys, structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        json_output: One JSON object per event instead of console lines.
        level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    root_level = logging.getLevelNamesMapping()[level.upper()]
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguring must affect loggers created at import time
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_render_chain(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))


def configure_logging_from(settings: "LoggingSettings") -> None:
    """configure_logging() driven by the `logging` section of XolydSettings."""
    configure_logging(json_output=settings.json_output, level=settings.level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound logger for a module; pass `__name__`."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
