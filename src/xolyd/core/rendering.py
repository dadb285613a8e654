# src/xolyd/core/rendering.py
"""Recursive value-to-text conversion for context traces.

Renders the closed set of host value kinds (record collections, bare record
sequences, records, column sets, both query representations, references,
option values, money and plain scalars) as indented trace text. Rendering
never mutates the value it is given.
"""

from __future__ import annotations

import locale
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from xolyd.contracts.sdk import (
    ColumnSet,
    Entity,
    EntityCollection,
    EntityReference,
    FetchExpression,
    Money,
    OptionSetValue,
    QueryExpression,
    QueryExpressionToFetchXmlRequest,
    QueryExpressionToFetchXmlResponse,
)

if TYPE_CHECKING:
    from xolyd.contracts.host import OrganizationService

INDENT_UNIT = "  "

# Key width used for records without attributes
EMPTY_RECORD_KEY_WIDTH = 50

NULL_MARKER = "<null>"


def value_to_string(
    value: Any,
    attribute_types: bool,
    convert_queries: bool,
    expand_collections: bool,
    service: OrganizationService | None,
    indent: int = 1,
) -> str:
    """Render a host value as trace text.

    Args:
        value: Value to render. Records and collections recurse into their contents.
        attribute_types: Append a tab-separated `(type)` suffix to scalar renderings.
        convert_queries: Translate structured queries to XML through `service`.
        expand_collections: List every record contained in record collections.
        service: Organization service used only for query translation; may be None.
        indent: Nesting level; each level is two spaces.

    Returns:
        The rendered text. Multi-line renderings are indented for `indent`.
    """
    indent_string = INDENT_UNIT * indent

    def render(inner: Any, level: int) -> str:
        return value_to_string(inner, attribute_types, convert_queries, expand_collections, service, level)

    match value:
        case None:
            return f"{indent_string}{NULL_MARKER}"

        case EntityCollection():
            result = (
                f"{value.entity_name or ''} collection\n"
                f"  Records: {len(value.entities)}\n"
                f"  TotalRecordCount: {value.total_record_count}\n"
                f"  MoreRecords: {value.more_records}\n"
                f"  PagingCookie: {value.paging_cookie or ''}"
            )
            if expand_collections and value.entities:
                result += "\n" + render(value.entities, indent + 1)
            return result

        case [] if type(value) in (list, tuple):
            # No element to inspect; rendered as an empty record sequence
            return indent_string if expand_collections else ""

        case [*records] if records and all(isinstance(record, Entity) for record in records):
            if not expand_collections:
                return ""
            return indent_string + f"\n{indent_string}".join(render(record, indent + 1) for record in records)

        case Entity():
            key_len = max((len(key) for key in value.attributes), default=EMPTY_RECORD_KEY_WIDTH)
            lines = [
                f"{key}{' ' * (key_len - len(key))} = {render(value.attributes[key], indent + 1)}" for key in sorted(value.attributes)
            ]
            return f"{value.logical_name} {value.id}\n{indent_string}" + f"\n{indent_string}".join(lines)

        case ColumnSet():
            return f"\n{indent_string}" + f"\n{indent_string}".join(sorted(value.columns))

        case FetchExpression():
            return f"{value}\n{indent_string}{value.query}"

        case QueryExpression() if convert_queries and service is not None:
            response = service.execute(QueryExpressionToFetchXmlRequest(value))
            if not isinstance(response, QueryExpressionToFetchXmlResponse):
                raise TypeError(f"QueryExpressionToFetchXml returned {type(response).__name__}")
            return f"{value}\n{indent_string}{response.fetch_xml}"

    result = _scalar_to_string(value, indent_string)
    if attribute_types:
        result += f" \t({type_name(value)})"
    return result


def _scalar_to_string(value: Any, indent_string: str) -> str:
    match value:
        case EntityReference(logical_name=logical_name, id=id, name=name):
            return f"{logical_name} {id} {name or ''}"
        case OptionSetValue(value=code):
            return str(code)
        case Money(value=amount):
            return format_decimal(amount)
        case _:
            return str(value).replace("\n", f"\n{INDENT_UNIT}{indent_string}")


def format_decimal(amount: Decimal) -> str:
    """Format a decimal with the active locale's decimal point.

    Digit grouping is left out on purpose: amounts keep their scale and
    read as plain numbers, e.g. `1234.50` or `1234,50`.
    """
    return str(amount).replace(".", locale.localeconv()["decimal_point"])


def type_name(value: Any) -> str:
    """Qualified runtime type name; builtins are left unqualified."""
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"
