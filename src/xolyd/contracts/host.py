# src/xolyd/contracts/host.py
"""Protocol definitions for the services the host platform hands to a plugin.

The host invokes a plugin with a service provider. From it the plugin pulls
a tracing service (line-oriented trace log), the execution context describing
the triggering operation, and a factory for organization services (CRUD,
associate and execute against the platform).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from xolyd.contracts.sdk import (
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


@runtime_checkable
class TracingService(Protocol):
    """Host trace log sink.

    `format` is interpolated with str.format when arguments are given and
    written verbatim otherwise.
    """

    def trace(self, format: str, *args: Any) -> None: ...


@runtime_checkable
class ExecutionContext(Protocol):
    """What triggered the current plugin or workflow step."""

    message_name: str
    mode: int
    depth: int
    primary_entity_name: str
    primary_entity_id: UUID | None
    user_id: UUID
    input_parameters: Mapping[str, Any]
    output_parameters: Mapping[str, Any]
    shared_variables: Mapping[str, Any]
    pre_entity_images: Mapping[str, Entity]
    post_entity_images: Mapping[str, Entity]


@runtime_checkable
class PluginExecutionContext(ExecutionContext, Protocol):
    """Execution context of a registered plugin step.

    parent_context is the context of the operation that caused this one,
    or None at the top of the chain.
    """

    stage: int
    parent_context: PluginExecutionContext | None


@runtime_checkable
class OrganizationService(Protocol):
    """CRUD, associate and execute operations against the platform."""

    def create(self, entity: Entity) -> UUID: ...

    def retrieve(self, entity_name: str, id: UUID, column_set: ColumnSet) -> Entity: ...

    def update(self, entity: Entity) -> None: ...

    def delete(self, entity_name: str, id: UUID) -> None: ...

    def associate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None: ...

    def disassociate(
        self,
        entity_name: str,
        entity_id: UUID,
        relationship: Relationship,
        related_entities: EntityReferenceCollection,
    ) -> None: ...

    def execute(self, request: OrganizationRequest) -> OrganizationResponse: ...

    def retrieve_multiple(self, query: QueryExpression | FetchExpression) -> EntityCollection: ...


@runtime_checkable
class OrganizationServiceFactory(Protocol):
    def create_organization_service(self, user_id: UUID | None) -> OrganizationService:
        """Create a service acting as `user_id`, or as the system user when None."""
        ...


@runtime_checkable
class ServiceProvider(Protocol):
    """Host-supplied locator passed to the plugin entry point."""

    def get_service(self, service_type: type) -> Any:
        """Return the service registered for `service_type`, or None."""
        ...
