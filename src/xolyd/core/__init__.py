# src/xolyd/core/__init__.py
"""Core infrastructure: Context facade, context tracing, Configuration, Logging."""

from xolyd.core.canary import (
    TraceOutcome,
    align_parameters,
    trace_and_align,
    trace_context,
    trace_context_with,
    write,
)
from xolyd.core.clock import DEFAULT_CLOCK, Clock, SystemClock
from xolyd.core.config import (
    LoggingSettings,
    TraceSettings,
    XolydSettings,
    load_settings,
)
from xolyd.core.context import Context
from xolyd.core.logging import configure_logging, configure_logging_from, get_logger
from xolyd.core.rendering import value_to_string

__all__ = [
    "DEFAULT_CLOCK",
    "Clock",
    "Context",
    "LoggingSettings",
    "SystemClock",
    "TraceOutcome",
    "TraceSettings",
    "XolydSettings",
    "align_parameters",
    "configure_logging",
    "configure_logging_from",
    "get_logger",
    "load_settings",
    "trace_and_align",
    "trace_context",
    "trace_context_with",
    "value_to_string",
    "write",
]
