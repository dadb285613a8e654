"""Shared contracts for the host platform boundary.

Value types, enums, protocols and exceptions that cross between plugins,
the core helpers and the host platform live here. This package is a leaf:
it imports nothing from xolyd.core or xolyd.plugins.

Import patterns:
    from xolyd.contracts import Entity, EntityReference, PipelineStage
    from xolyd.contracts import OrganizationService, TracingService
"""

from xolyd.contracts.enums import INTERNAL_STAGE, ConditionOperator, ExecutionMode, PipelineStage
from xolyd.contracts.errors import PluginConfigError, ServiceResolutionError
from xolyd.contracts.host import (
    ExecutionContext,
    OrganizationService,
    OrganizationServiceFactory,
    PluginExecutionContext,
    ServiceProvider,
    TracingService,
)
from xolyd.contracts.sdk import (
    EMPTY_ID,
    ColumnSet,
    ConditionExpression,
    Entity,
    EntityCollection,
    EntityReference,
    EntityReferenceCollection,
    FetchExpression,
    FilterExpression,
    Money,
    OptionSetValue,
    OrganizationRequest,
    OrganizationResponse,
    QueryExpression,
    QueryExpressionToFetchXmlRequest,
    QueryExpressionToFetchXmlResponse,
    Relationship,
    is_empty_id,
)

__all__ = [
    "EMPTY_ID",
    "INTERNAL_STAGE",
    "ColumnSet",
    "ConditionExpression",
    "ConditionOperator",
    "Entity",
    "EntityCollection",
    "EntityReference",
    "EntityReferenceCollection",
    "ExecutionContext",
    "ExecutionMode",
    "FetchExpression",
    "FilterExpression",
    "Money",
    "OptionSetValue",
    "OrganizationRequest",
    "OrganizationResponse",
    "OrganizationService",
    "OrganizationServiceFactory",
    "PipelineStage",
    "PluginConfigError",
    "PluginExecutionContext",
    "QueryExpression",
    "QueryExpressionToFetchXmlRequest",
    "QueryExpressionToFetchXmlResponse",
    "Relationship",
    "ServiceProvider",
    "ServiceResolutionError",
    "TracingService",
    "is_empty_id",
]
