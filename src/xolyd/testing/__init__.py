# src/xolyd/testing/__init__.py
"""Test infrastructure for Xolyd plugins.

Stand-ins for the services the host platform provides, so plugins and the
core helpers can run outside the sandbox. When a host contract changes,
update the doubles here; tests using them need no changes.

Usage:
    from xolyd.testing import FakePluginExecutionContext, RecordingTracer
    from xolyd.testing import InMemoryOrganizationService, StaticServiceProvider
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from xolyd.contracts.enums import ConditionOperator, ExecutionMode, PipelineStage
from xolyd.contracts.host import (
    OrganizationService,
    OrganizationServiceFactory,
    PluginExecutionContext,
    TracingService,
)
from xolyd.contracts.sdk import (
    EMPTY_ID,
    ColumnSet,
    Entity,
    EntityCollection,
    EntityReferenceCollection,
    FetchExpression,
    OrganizationRequest,
    OrganizationResponse,
    QueryExpression,
    Relationship,
)


class RecordingTracer:
    """TracingService keeping every line in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def trace(self, format: str, *args: Any) -> None:
        self.lines.append(format.format(*args) if args else format)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class MockClock:
    """Controllable clock for deterministic trace timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self._current = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += timedelta(seconds=seconds)


@dataclass
class FakePluginExecutionContext:
    """PluginExecutionContext built from plain values.

    Example:
        context = FakePluginExecutionContext(
            message_name="Update",
            primary_entity_name="contact",
            input_parameters={"Target": Entity("contact", contact_id)},
        )
    """

    message_name: str = "Update"
    primary_entity_name: str = "account"
    primary_entity_id: UUID | None = EMPTY_ID
    stage: int = PipelineStage.POST_OPERATION
    mode: int = ExecutionMode.SYNCHRONOUS
    depth: int = 1
    user_id: UUID = field(default_factory=uuid4)
    input_parameters: dict[str, Any] = field(default_factory=dict)
    output_parameters: dict[str, Any] = field(default_factory=dict)
    shared_variables: dict[str, Any] = field(default_factory=dict)
    pre_entity_images: dict[str, Entity] = field(default_factory=dict)
    post_entity_images: dict[str, Entity] = field(default_factory=dict)
    parent_context: PluginExecutionContext | None = None


@dataclass
class RecordedCall:
    operation: str
    args: tuple[Any, ...]


class InMemoryOrganizationService:
    """OrganizationService over a dict of records.

    Supports the subset of behavior plugin tests need: create assigns ids,
    retrieve honors column sets, update merges attributes, retrieve_multiple
    evaluates top-level equality conditions. execute() dispatches to handlers
    registered per request name. Every call is recorded in `calls`.
    """

    def __init__(self) -> None:
        self.records: dict[tuple[str, UUID], Entity] = {}
        self.calls: list[RecordedCall] = []
        self.associations: list[tuple[str, UUID, str, tuple[Any, ...]]] = []
        self._handlers: dict[str, Callable[[OrganizationRequest], OrganizationResponse]] = {}

    def add(self, entity: Entity) -> Entity:
        """Seed a record without recording a call."""
        self.records[(entity.logical_name, entity.id)] = Entity(entity.logical_name, entity.id, dict(entity.attributes))
        return entity

    def on_execute(self, request_name: str, handler: Callable[[OrganizationRequest], OrganizationResponse]) -> None:
        self._handlers[request_name] = handler

    def create(self, entity: Entity) -> UUID:
        self.calls.append(RecordedCall("create", (entity,)))
        new_id = entity.id if entity.id != EMPTY_ID else uuid4()
        self.records[(entity.logical_name, new_id)] = Entity(entity.logical_name, new_id, dict(entity.attributes))
        return new_id

    def retrieve(self, entity_name: str, id: UUID, column_set: ColumnSet) -> Entity:
        self.calls.append(RecordedCall("retrieve", (entity_name, id, column_set)))
        stored = self.records[(entity_name, id)]
        return _project(stored, column_set)

    def update(self, entity: Entity) -> None:
        self.calls.append(RecordedCall("update", (entity,)))
        self.records[(entity.logical_name, entity.id)].attributes.update(entity.attributes)

    def delete(self, entity_name: str, id: UUID) -> None:
        self.calls.append(RecordedCall("delete", (entity_name, id)))
        del self.records[(entity_name, id)]

    def associate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self.calls.append(RecordedCall("associate", (entity_name, entity_id, relationship, related_entities)))
        self.associations.append((entity_name, entity_id, relationship.schema_name, tuple(related_entities)))

    def disassociate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self.calls.append(RecordedCall("disassociate", (entity_name, entity_id, relationship, related_entities)))
        self.associations.remove((entity_name, entity_id, relationship.schema_name, tuple(related_entities)))

    def execute(self, request: OrganizationRequest) -> OrganizationResponse:
        self.calls.append(RecordedCall("execute", (request,)))
        handler = self._handlers.get(request.request_name)
        if handler is None:
            raise NotImplementedError(f"No handler registered for {request.request_name}")
        return handler(request)

    def retrieve_multiple(self, query: QueryExpression | FetchExpression) -> EntityCollection:
        self.calls.append(RecordedCall("retrieve_multiple", (query,)))
        if not isinstance(query, QueryExpression):
            raise NotImplementedError("InMemoryOrganizationService only evaluates QueryExpression")

        matches = [
            _project(record, query.column_set)
            for (name, _), record in self.records.items()
            if name == query.entity_name and _matches(record, query)
        ]
        return EntityCollection(entities=matches, entity_name=query.entity_name, total_record_count=len(matches))


def _project(record: Entity, column_set: ColumnSet) -> Entity:
    if column_set.all_columns:
        return Entity(record.logical_name, record.id, dict(record.attributes))
    attributes = {key: record.attributes[key] for key in column_set.columns if key in record.attributes}
    return Entity(record.logical_name, record.id, attributes)


def _matches(record: Entity, query: QueryExpression) -> bool:
    for condition in query.criteria.conditions:
        if condition.operator != ConditionOperator.EQUAL:
            raise NotImplementedError(f"Unsupported operator in test double: {condition.operator}")
        actual = record.get_attribute_value(condition.attribute_name)
        actual_id = getattr(actual, "id", actual)
        if actual_id not in condition.values:
            return False
    return True


class StaticServiceFactory:
    """OrganizationServiceFactory returning one service and remembering the user ids asked for."""

    def __init__(self, service: OrganizationService) -> None:
        self.service = service
        self.requested_user_ids: list[UUID | None] = []

    def create_organization_service(self, user_id: UUID | None) -> OrganizationService:
        self.requested_user_ids.append(user_id)
        return self.service


class StaticServiceProvider:
    """ServiceProvider answering from fixed instances."""

    def __init__(
        self,
        tracing_service: TracingService | None = None,
        execution_context: PluginExecutionContext | None = None,
        service_factory: OrganizationServiceFactory | None = None,
    ) -> None:
        self._services: dict[type, Any] = {
            TracingService: tracing_service,
            PluginExecutionContext: execution_context,
            OrganizationServiceFactory: service_factory,
        }

    def get_service(self, service_type: type) -> Any:
        return self._services.get(service_type)


__all__ = [
    "FakePluginExecutionContext",
    "InMemoryOrganizationService",
    "MockClock",
    "RecordedCall",
    "RecordingTracer",
    "StaticServiceFactory",
    "StaticServiceProvider",
]
