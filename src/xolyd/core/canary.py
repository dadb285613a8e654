# src/xolyd/core/canary.py
"""Execution context dumps for the host trace log.

trace_context() writes everything interesting about an execution context
(message, stage, mode, depth, primary record, the five parameter sets and
optionally the chain of parent contexts) to a tracing service.

Tracing is best-effort. The dump is rendered completely before anything is
written; if rendering fails, only a two-line failure notice reaches the
sink and the caller carries on.

Example:
    outcome = trace_context(tracer, context, parent_context=True)
    if not outcome.succeeded:
        logger.warning("context trace incomplete", error=outcome.error)
"""

from __future__ import annotations

import contextlib
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from xolyd.contracts.enums import INTERNAL_STAGE
from xolyd.contracts.host import PluginExecutionContext
from xolyd.contracts.sdk import is_empty_id
from xolyd.core.config import TraceSettings
from xolyd.core.logging import get_logger
from xolyd.core.rendering import value_to_string

if TYPE_CHECKING:
    from xolyd.contracts.host import ExecutionContext, OrganizationService, TracingService

logger = get_logger(__name__)

FAILURE_MARKER = "--- Exception while trying to TraceContext ---"

# Label and context attribute for each parameter set, in dump order
_PARAMETER_SETS: tuple[tuple[str, str], ...] = (
    ("InputParameters", "input_parameters"),
    ("OutputParameters", "output_parameters"),
    ("SharedVariables", "shared_variables"),
    ("PreEntityImages", "pre_entity_images"),
    ("PostEntityImages", "post_entity_images"),
)


@dataclass(frozen=True)
class TraceOutcome:
    """Result of a context dump.

    Use the factory methods rather than the constructor.
    """

    lines: tuple[str, ...]
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, lines: list[str]) -> TraceOutcome:
        return cls(lines=tuple(lines))

    @classmethod
    def failure(cls, error: BaseException) -> TraceOutcome:
        return cls(lines=(FAILURE_MARKER, f"Message : {error}"), error=str(error))


def trace_context(
    tracing_service: TracingService,
    context: ExecutionContext,
    parent_context: bool = False,
    attribute_types: bool = True,
    convert_queries: bool = False,
    expand_collections: bool = False,
    include_stage30: bool = False,
    service: OrganizationService | None = None,
) -> TraceOutcome:
    """Dump an execution context to the trace log.

    The defaults match what plugins use on entry: no parent chain, attribute
    types on, queries left untranslated, collections collapsed and the
    internal stage skipped.

    Args:
        tracing_service: Sink receiving one trace call per line.
        context: Plugin or workflow execution context to dump.
        parent_context: Also dump every parent context.
        attribute_types: Append runtime types to scalar values.
        convert_queries: Translate structured queries to XML. Requires `service`.
        expand_collections: List every record held by record collections.
        include_stage30: Also dump contexts running in the internal stage.
        service: Organization service for query translation; may be None.

    Returns:
        TraceOutcome with the lines written. Never raises, for rendering and
        sink faults alike.
    """
    try:
        lines: list[str] = []
        _render_context(
            lines, context, parent_context, attribute_types, convert_queries, expand_collections, include_stage30, service, 1
        )
        outcome = TraceOutcome.success(lines)
    except Exception as exc:
        logger.warning("context_trace_failed", error=str(exc), error_type=type(exc).__name__)
        outcome = TraceOutcome.failure(exc)

    try:
        _emit(tracing_service, outcome.lines)
    except Exception as exc:
        logger.warning("context_trace_write_failed", error=str(exc), error_type=type(exc).__name__)
        outcome = TraceOutcome.failure(exc)
        # The sink already refused a line; the notice is a last attempt
        with contextlib.suppress(Exception):
            _emit(tracing_service, outcome.lines)
    return outcome


def _emit(tracing_service: TracingService, lines: tuple[str, ...]) -> None:
    for line in lines:
        tracing_service.trace(line)


def trace_context_with(
    tracing_service: TracingService,
    context: ExecutionContext,
    settings: TraceSettings,
    service: OrganizationService | None = None,
) -> TraceOutcome:
    """trace_context() driven by a TraceSettings instance."""
    return trace_context(
        tracing_service,
        context,
        parent_context=settings.parent_context,
        attribute_types=settings.attribute_types,
        convert_queries=settings.convert_queries,
        expand_collections=settings.expand_collections,
        include_stage30=settings.include_stage30,
        service=service,
    )


def _render_context(
    lines: list[str],
    context: ExecutionContext,
    parent_context: bool,
    attribute_types: bool,
    convert_queries: bool,
    expand_collections: bool,
    include_stage30: bool,
    service: OrganizationService | None,
    depth: int,
) -> None:
    plugin_context = context if isinstance(context, PluginExecutionContext) else None

    if include_stage30 or plugin_context is None or plugin_context.stage != INTERNAL_STAGE:
        lines.append(f"--- Context {depth} Trace Start ---")
        lines.append(f"Message : {context.message_name}")
        if plugin_context is not None:
            lines.append(f"Stage   : {plugin_context.stage}")
        lines.append(f"Mode    : {context.mode}")
        lines.append(f"Depth   : {context.depth}")
        lines.append(f"Entity  : {context.primary_entity_name}")
        if not is_empty_id(context.primary_entity_id):
            lines.append(f"Id      : {context.primary_entity_id}")
        lines.append("")

        for topic, attribute in _PARAMETER_SETS:
            lines.extend(
                align_parameters(topic, getattr(context, attribute), attribute_types, convert_queries, expand_collections, service)
            )
        lines.append(f"--- Context {depth} Trace End ---")

    if parent_context and plugin_context is not None and plugin_context.parent_context is not None:
        _render_context(
            lines,
            plugin_context.parent_context,
            parent_context,
            attribute_types,
            convert_queries,
            expand_collections,
            include_stage30,
            service,
            depth + 1,
        )

    lines.append("")


def align_parameters(
    topic: str,
    parameters: Mapping[str, Any] | None,
    attribute_types: bool,
    convert_queries: bool,
    expand_collections: bool,
    service: OrganizationService | None,
) -> list[str]:
    """Render a labeled parameter set with `=` aligned on the longest key.

    Returns no lines at all for an empty or missing parameter set.
    """
    if not parameters:
        return []

    key_len = max(len(key) for key in parameters)
    lines = [topic]
    for key, value in parameters.items():
        rendered = value_to_string(value, attribute_types, convert_queries, expand_collections, service, 2)
        lines.append(f"  {key}{' ' * (key_len - len(key))} = {rendered}")
    return lines


def trace_and_align(
    tracing_service: TracingService,
    topic: str,
    parameters: Mapping[str, Any] | None,
    attribute_types: bool,
    convert_queries: bool,
    expand_collections: bool,
    service: OrganizationService | None = None,
) -> None:
    """Write a labeled, aligned parameter set straight to the trace log."""
    for line in align_parameters(topic, parameters, attribute_types, convert_queries, expand_collections, service):
        tracing_service.trace(line)


def write(tracing_service: TracingService, text: str, now: datetime | None = None) -> None:
    """Write a line prefixed with the local wall-clock time (HH:MM:SS.fff)."""
    stamp = now or datetime.now()
    tracing_service.trace(f"{stamp:%H:%M:%S}.{stamp.microsecond // 1000:03d}  {text}")
