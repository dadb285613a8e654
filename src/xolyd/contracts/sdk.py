# src/xolyd/contracts/sdk.py
"""Value types exchanged with the host platform.

These mirror the shapes of the host SDK's record model (records, references,
option values, money, column sets and the two query representations) closely
enough for plugins to build requests and for the diagnostic renderer to
dispatch on them. They carry no host semantics: persistence, security and
query evaluation stay with the platform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

from xolyd.contracts.enums import ConditionOperator

# The host's "no identifier" value
EMPTY_ID = UUID(int=0)


def is_empty_id(value: UUID | None) -> bool:
    """True for a missing identifier or the all-zero UUID."""
    return value is None or value == EMPTY_ID


@dataclass
class EntityReference:
    """Typed foreign-key reference to a record."""

    logical_name: str
    id: UUID
    name: str | None = None


class EntityReferenceCollection(list[EntityReference]):
    """Ordered references passed to associate/disassociate."""


@dataclass
class OptionSetValue:
    """Enumerated option value identified by its integer code."""

    value: int


@dataclass
class Money:
    """Monetary amount."""

    value: Decimal


@dataclass
class Entity:
    """A named record: logical type name, identifier and attribute values.

    Example:
        contact = Entity("contact", attributes={"firstname": "Ann"})
        contact["lastname"] = "Lee"
        assert contact.get_attribute_value("firstname") == "Ann"
    """

    logical_name: str
    id: UUID = EMPTY_ID
    attributes: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.attributes

    def get_attribute_value(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def to_entity_reference(self) -> EntityReference:
        return EntityReference(self.logical_name, self.id)


@dataclass
class EntityCollection:
    """Page of records returned by a multi-record query.

    total_record_count is -1 when the host did not compute it.
    """

    entities: list[Entity] = field(default_factory=list)
    entity_name: str | None = None
    total_record_count: int = -1
    more_records: bool = False
    paging_cookie: str | None = None


class ColumnSet:
    """Attribute names requested from a retrieve or query."""

    def __init__(self, *columns: str, all_columns: bool = False) -> None:
        self.columns: list[str] = list(columns)
        self.all_columns = all_columns

    def add_columns(self, *columns: str) -> None:
        self.columns.extend(columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnSet):
            return NotImplemented
        return self.columns == other.columns and self.all_columns == other.all_columns

    def __repr__(self) -> str:
        if self.all_columns:
            return "ColumnSet(all_columns=True)"
        return f"ColumnSet({', '.join(repr(c) for c in self.columns)})"


@dataclass
class ConditionExpression:
    attribute_name: str
    operator: ConditionOperator
    values: tuple[Any, ...] = ()


@dataclass
class FilterExpression:
    """Conditions and nested filters joined by one logical operator."""

    filter_operator: str = "and"
    conditions: list[ConditionExpression] = field(default_factory=list)
    filters: list[FilterExpression] = field(default_factory=list)

    def add_condition(self, attribute_name: str, operator: ConditionOperator, *values: Any) -> None:
        self.conditions.append(ConditionExpression(attribute_name, operator, values))

    def add_filter(self, filter_expression: FilterExpression) -> None:
        self.filters.append(filter_expression)


@dataclass
class QueryExpression:
    """Structured query over one record type."""

    entity_name: str
    column_set: ColumnSet = field(default_factory=ColumnSet)
    criteria: FilterExpression = field(default_factory=FilterExpression)

    def __str__(self) -> str:
        return f"QueryExpression({self.entity_name})"


@dataclass
class FetchExpression:
    """Query already serialized in the host's XML dialect."""

    query: str

    def __str__(self) -> str:
        return "FetchExpression"


@dataclass
class Relationship:
    schema_name: str


@dataclass
class OrganizationRequest:
    """Named message executed through OrganizationService.execute."""

    request_name: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.request_name


@dataclass
class OrganizationResponse:
    response_name: str
    results: dict[str, Any] = field(default_factory=dict)


class QueryExpressionToFetchXmlRequest(OrganizationRequest):
    """Asks the host to translate a structured query into its XML dialect."""

    def __init__(self, query: QueryExpression) -> None:
        super().__init__("QueryExpressionToFetchXml", {"Query": query})

    @property
    def query(self) -> QueryExpression:
        query: QueryExpression = self.parameters["Query"]
        return query


class QueryExpressionToFetchXmlResponse(OrganizationResponse):
    def __init__(self, fetch_xml: str) -> None:
        super().__init__("QueryExpressionToFetchXml", {"FetchXml": fetch_xml})

    @property
    def fetch_xml(self) -> str:
        fetch_xml: str = self.results["FetchXml"]
        return fetch_xml
