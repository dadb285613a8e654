# src/xolyd/plugins/relationships.py
"""Lookup-relationship helpers built on the traced Context.

Both helpers go through Context, so the retrieves show up in the trace log
like any other organization call.
"""

from xolyd.contracts.enums import ConditionOperator
from xolyd.contracts.sdk import ColumnSet, Entity, EntityReference, FilterExpression, QueryExpression
from xolyd.core.context import Context


def get_parent_entity(entity: Entity | None, context: Context, lookup_name: str, *columns: str) -> Entity | None:
    """Retrieve the record that `entity`'s lookup attribute points to.

    Args:
        entity: Record holding the lookup; may be None.
        context: Traced context used for the retrieve.
        lookup_name: Name of the EntityReference attribute.
        columns: Attributes to retrieve from the parent.

    Returns:
        The parent record, or None when there is no entity or the lookup is
        missing or not a reference.
    """
    if entity is None:
        return None
    parent_reference = entity.get_attribute_value(lookup_name)
    if not isinstance(parent_reference, EntityReference):
        return None
    return context.retrieve_reference(parent_reference, ColumnSet(*columns))


def get_child_entities(
    entity: Entity | None,
    context: Context,
    children_name: str,
    lookup_name: str,
    *columns: str,
    filter_expression: FilterExpression | None = None,
) -> list[Entity] | None:
    """Retrieve the `children_name` records whose `lookup_name` points at `entity`.

    Args:
        entity: Parent record; may be None.
        context: Traced context used for the query.
        children_name: Logical name of the child record type.
        lookup_name: Child attribute referencing the parent.
        columns: Attributes to retrieve from each child.
        filter_expression: Extra criteria ANDed onto the lookup condition.

    Returns:
        Matching child records, or None when there is no entity.
    """
    if entity is None:
        return None

    query = QueryExpression(children_name)
    query.column_set.add_columns(*columns)
    query.criteria.add_condition(lookup_name, ConditionOperator.EQUAL, entity.id)
    if filter_expression is not None:
        query.criteria.add_filter(filter_expression)

    return context.retrieve_multiple(query).entities
