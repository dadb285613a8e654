# src/xolyd/core/context.py
"""Traced facade over the host's tracing and organization services.

Context is both a TracingService and an OrganizationService. Every
organization call writes a "starting" line to the trace log, delegates
unchanged to the host service, then writes a "finished" line. Host errors
are never caught: a failed call leaves a starting line with no finished
line, which is itself a useful signature in the trace log.

Example:
    context = Context.from_service_provider(service_provider)
    contact = context.target
    contact["description"] = "touched"
    context.save(contact)
"""

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property
from typing import TYPE_CHECKING, Any
from uuid import UUID

from xolyd.contracts.errors import ServiceResolutionError
from xolyd.contracts.host import (
    OrganizationService,
    OrganizationServiceFactory,
    PluginExecutionContext,
    TracingService,
)
from xolyd.contracts.sdk import Entity, is_empty_id
from xolyd.core.canary import write
from xolyd.core.clock import DEFAULT_CLOCK, Clock
from xolyd.core.logging import get_logger

if TYPE_CHECKING:
    from xolyd.contracts.host import ServiceProvider
    from xolyd.contracts.sdk import (
        ColumnSet,
        EntityCollection,
        EntityReference,
        EntityReferenceCollection,
        FetchExpression,
        OrganizationRequest,
        OrganizationResponse,
        QueryExpression,
        Relationship,
    )

logger = get_logger(__name__)

TARGET_PARAMETER = "Target"


class Context:
    """One object giving a plugin traced access to the host services.

    The organization service is created lazily on first use and cached for
    the lifetime of the Context. Pass either a resolved `service` or a
    zero-argument `service_factory`, not both.
    """

    def __init__(
        self,
        tracing_service: TracingService,
        *,
        service: OrganizationService | None = None,
        service_factory: Callable[[], OrganizationService] | None = None,
        execution_context: PluginExecutionContext | None = None,
        clock: Clock = DEFAULT_CLOCK,
    ) -> None:
        if service is not None and service_factory is not None:
            raise ValueError("Pass either service or service_factory, not both")
        self._tracing_service = tracing_service
        self._service = service
        self._service_factory = service_factory
        self._execution_context = execution_context
        self._clock = clock

    @classmethod
    def from_service_provider(
        cls,
        service_provider: ServiceProvider,
        run_as_system: bool = False,
        *,
        clock: Clock = DEFAULT_CLOCK,
    ) -> Context:
        """Build a Context from the host's service provider.

        Args:
            service_provider: Locator handed to the plugin by the host.
            run_as_system: Create the organization service as the system user
                instead of the user who triggered the operation.
            clock: Time source for trace line prefixes.

        Raises:
            ServiceResolutionError: If the provider has no tracing service or
                no plugin execution context.
        """
        tracing_service = service_provider.get_service(TracingService)
        if tracing_service is None:
            raise ServiceResolutionError(TracingService)
        execution_context = service_provider.get_service(PluginExecutionContext)
        if execution_context is None:
            raise ServiceResolutionError(PluginExecutionContext)
        factory: OrganizationServiceFactory | None = service_provider.get_service(OrganizationServiceFactory)

        def create_service() -> OrganizationService:
            if factory is None:
                raise ServiceResolutionError(OrganizationServiceFactory)
            user_id = None if run_as_system else execution_context.user_id
            return factory.create_organization_service(user_id)

        return cls(tracing_service, service_factory=create_service, execution_context=execution_context, clock=clock)

    # === Host services ===

    @property
    def plugin_execution_context(self) -> PluginExecutionContext:
        """Execution context of the running plugin.

        Raises:
            RuntimeError: If this Context was built without one.
        """
        if self._execution_context is None:
            raise RuntimeError("Context was created without a plugin execution context")
        return self._execution_context

    @cached_property
    def service(self) -> OrganizationService:
        if self._service is not None:
            return self._service
        if self._service_factory is None:
            raise ServiceResolutionError(OrganizationService)
        logger.debug("organization_service_created")
        return self._service_factory()

    # === Tracing ===

    def trace(self, format: str, *args: Any) -> None:
        """Write a timestamped line to the host trace log."""
        message = format.format(*args) if args else format
        write(self._tracing_service, message, now=self._clock.now())

    # === Record accessors ===

    @property
    def target(self) -> Entity | None:
        """The record carried in the operation's Target input parameter."""
        target = self.plugin_execution_context.input_parameters.get(TARGET_PARAMETER)
        return target if isinstance(target, Entity) else None

    @property
    def pre_image(self) -> Entity | None:
        """First registered pre-operation image, if any."""
        return next(iter(self.plugin_execution_context.pre_entity_images.values()), None)

    @property
    def post_image(self) -> Entity | None:
        """First registered post-operation image, if any."""
        return next(iter(self.plugin_execution_context.post_entity_images.values()), None)

    @property
    def full_entity(self) -> Entity | None:
        return self.get_full_entity()

    def get_full_entity(self) -> Entity | None:
        """Merge target, pre-image and post-image attributes into a new record.

        Target attributes win. Pre-image attributes fill keys the target does
        not carry, then post-image attributes fill whatever is still missing.
        Returns None when the operation has no target record.
        """
        target = self.target
        if target is None:
            return None

        attributes = dict(target.attributes)
        for image in (self.pre_image, self.post_image):
            if image is None:
                continue
            for key, value in image.attributes.items():
                attributes.setdefault(key, value)
        return Entity(target.logical_name, target.id, attributes)

    # === Organization service ===

    def save(self, entity: Entity) -> UUID:
        """Create the record when it has no identifier, otherwise update it.

        Returns:
            The new identifier after a create, the record's own after an update.
        """
        if is_empty_id(entity.id):
            return self.create(entity)
        self.update(entity)
        return entity.id

    def create(self, entity: Entity) -> UUID:
        self._starting("create", f"Creating {entity.logical_name} with {len(entity.attributes)} attributes")
        result = self.service.create(entity)
        self._finished("create", "Created!")
        return result

    def update(self, entity: Entity) -> None:
        self._starting("update", f"Updating {entity.logical_name} with {len(entity.attributes)} attributes")
        self.service.update(entity)
        self._finished("update", "Updated!")

    def retrieve(self, entity_name: str, id: UUID, column_set: ColumnSet) -> Entity:
        self._starting("retrieve", f"Retrieving {entity_name} {id} with {len(column_set.columns)} attributes")
        result = self.service.retrieve(entity_name, id, column_set)
        self._finished("retrieve", "Retrieved!")
        return result

    def retrieve_reference(self, reference: EntityReference, column_set: ColumnSet) -> Entity:
        return self.retrieve(reference.logical_name, reference.id, column_set)

    def delete(self, entity_name: str, id: UUID) -> None:
        self._starting("delete", f"Deleting {entity_name} {id}")
        self.service.delete(entity_name, id)
        self._finished("delete", "Deleted!")

    def delete_reference(self, reference: EntityReference) -> None:
        self.delete(reference.logical_name, reference.id)

    def execute(self, request: OrganizationRequest) -> OrganizationResponse:
        self._starting("execute", f"Executing {request}")
        result = self.service.execute(request)
        self._finished("execute", "Executed!")
        return result

    def associate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self._starting(
            "associate",
            f"Associating {entity_name} {entity_id} over {relationship.schema_name} with {_describe(related_entities)}",
        )
        self.service.associate(entity_name, entity_id, relationship, related_entities)
        self._finished("associate", "Associated!")

    def associate_reference(
        self,
        reference: EntityReference,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self.associate(reference.logical_name, reference.id, relationship, related_entities)

    def disassociate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self._starting(
            "disassociate",
            f"Disassociating {entity_name} {entity_id} over {relationship.schema_name} with {_describe(related_entities)}",
        )
        self.service.disassociate(entity_name, entity_id, relationship, related_entities)
        self._finished("disassociate", "Disassociated!")

    def disassociate_reference(
        self,
        reference: EntityReference,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None:
        self.disassociate(reference.logical_name, reference.id, relationship, related_entities)

    def retrieve_multiple(self, query: QueryExpression | FetchExpression) -> EntityCollection:
        self._starting("retrieve_multiple", f"Retrieving with {query}")
        result = self.service.retrieve_multiple(query)
        self._finished("retrieve_multiple", f"Retrieved {len(result.entities)} {result.entity_name}")
        return result

    def _starting(self, operation: str, message: str) -> None:
        logger.debug("organization_call_started", operation=operation)
        self.trace(message)

    def _finished(self, operation: str, message: str) -> None:
        logger.debug("organization_call_finished", operation=operation)
        self.trace(message)


def _describe(related_entities: EntityReferenceCollection) -> str:
    return f"{len(related_entities)} {', '.join(r.logical_name for r in related_entities)}"
