"""
Builds catalog queries from extracted search filters.

A CatalogQuery is backend-neutral; `to_params` renders it for the Supabase
PostgREST endpoint (`/rest/v1/<table>`).
"""

import re
from typing import List, Optional, Tuple
from models import AttributeFilter, CatalogQuery
from text_utils import split_terms
from app_config import CATALOG_TABLE, SEARCH_LIMIT


# Every text column a search term may hit
SEARCHABLE_FIELDS = [
    "title", "description", "tags", "category", "sub_category", "product_type",
    "vendor", "ai_color", "ai_material", "style", "room", "chat_text",
]

# Attribute → columns it is matched against
ATTRIBUTE_FIELDS = {
    "color":    ("ai_color", "title"),
    "material": ("ai_material", "title"),
    "style":    ("style", "tags"),
    "room":     ("room", "tags"),
}

# Characters with a meaning inside PostgREST filter expressions
_POSTGREST_RESERVED_RE = re.compile(r"[,()*%:\"\\]")


def _clean_term(term: str) -> str:
    return _POSTGREST_RESERVED_RE.sub("", term).strip()


def search_terms(text: str) -> List[str]:
    """Whitespace terms longer than 2 chars, safe to embed in a filter."""
    terms = []
    for term in split_terms(text, min_length=3):
        term = _clean_term(term)
        if len(term) >= 3 and term not in terms:
            terms.append(term)
    return terms


def build_catalog_query(
    filters: AttributeFilter,
    scope_id: Optional[str] = None,
    scope_field: str = "store_id",
    limit: int = SEARCH_LIMIT,
    table: str = CATALOG_TABLE,
) -> CatalogQuery:
    """Translate an AttributeFilter into a catalog read."""
    query = CatalogQuery(table=table, limit=limit)
    query.equals["status"] = "active"
    if scope_id:
        query.equals[scope_field] = str(scope_id)

    # ─── Primary anchor: any term in any searchable field ───
    anchor = filters.type or filters.query
    terms = search_terms(anchor) if anchor else []
    if terms:
        query.or_groups.append(
            [(field, term) for term in terms for field in SEARCHABLE_FIELDS]
        )

    # ─── Attribute constraints ───
    for attribute, fields in ATTRIBUTE_FIELDS.items():
        value = getattr(filters, attribute)
        value = _clean_term(value) if value else ""
        if value:
            query.or_groups.append([(field, value) for field in fields])

    # ─── Numeric constraints ───
    if filters.price_range:
        if filters.price_range.min is not None:
            query.ranges.append(("price", "gte", filters.price_range.min))
        if filters.price_range.max is not None:
            query.ranges.append(("price", "lte", filters.price_range.max))
    if filters.in_stock:
        query.ranges.append(("inventory_quantity", "gt", 0))

    parts = [f"terms={terms}"] if terms else []
    parts += [f"{a}={getattr(filters, a)}" for a in ATTRIBUTE_FIELDS if getattr(filters, a)]
    if scope_id:
        parts.append(f"{scope_field}={scope_id}")
    query.description = "Product search: " + (", ".join(parts) or "all active")
    return query


def without_scope(query: CatalogQuery, scope_field: str = "store_id") -> CatalogQuery:
    """Same query with the store/seller restriction removed."""
    equals = {k: v for k, v in query.equals.items() if k != scope_field}
    return CatalogQuery(
        table=query.table,
        select=query.select,
        equals=equals,
        or_groups=list(query.or_groups),
        ranges=list(query.ranges),
        limit=query.limit,
        description=query.description + " (unscoped)",
    )


def _format_number(value) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def _or_expression(group: List[Tuple[str, str]]) -> str:
    return ",".join(f"{field}.ilike.*{term}*" for field, term in group)


def to_params(query: CatalogQuery) -> List[Tuple[str, str]]:
    """
    Render a CatalogQuery as PostgREST query-string parameters.

    One OR group → `or=(...)`; several → `and=(or(...),or(...))` since a
    repeated `or` key would be ambiguous.
    """
    params = [("select", query.select)]
    for column, value in query.equals.items():
        params.append((column, f"eq.{value}"))
    for column, op, value in query.ranges:
        params.append((column, f"{op}.{_format_number(value)}"))

    if len(query.or_groups) == 1:
        params.append(("or", f"({_or_expression(query.or_groups[0])})"))
    elif query.or_groups:
        inner = ",".join(f"or({_or_expression(g)})" for g in query.or_groups)
        params.append(("and", f"({inner})"))

    params.append(("limit", str(query.limit)))
    return params
