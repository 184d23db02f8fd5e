"""
Product Search — runs the catalog query built from the extracted filters.

Scoped to a store/seller first; an empty scoped result is retried once
without the scope. Catalog failures are logged and yield no products.
"""

from typing import List, Optional
from models import AttributeFilter, CatalogQuery, Product
from query_builder import build_catalog_query, without_scope
from services.product_formatter import product_from_row
from chat_logger import get_logger
from app_config import SEARCH_LIMIT

logger = get_logger("omnia_chat")


def _run(catalog, query: CatalogQuery) -> Optional[list]:
    """Rows for a query, or None when the catalog failed."""
    try:
        result = catalog.fetch(query)
    except Exception as e:
        logger.error(f"Step 3: catalog read raised | {query.description} | error={str(e)}")
        return None

    if not result.get("success"):
        logger.error(
            f"Step 3: catalog read failed | {query.description} | "
            f"status={result.get('status_code')} | error={result.get('error')}"
        )
        return None
    return result.get("data") or []


def search_products(
    filters: AttributeFilter,
    catalog,
    scope_id: Optional[str] = None,
    scope_field: str = "store_id",
    limit: int = SEARCH_LIMIT,
) -> List[Product]:
    """Unordered candidates for the filters, at most `limit` of them."""
    if catalog is None:
        logger.warning("Step 3: no catalog configured, skipping search")
        return []

    query = build_catalog_query(filters, scope_id=scope_id, scope_field=scope_field, limit=limit)
    rows = _run(catalog, query)
    if rows is None:
        return []

    if not rows and scope_id:
        logger.info(f"Step 3: no rows for {scope_field}={scope_id}, retrying without scope")
        rows = _run(catalog, without_scope(query, scope_field))
        if rows is None:
            return []

    products = [p for p in (product_from_row(r) for r in rows) if p is not None]
    if len(products) < len(rows):
        logger.warning(f"Step 3: skipped {len(rows) - len(products)} malformed catalog rows")

    if filters.on_sale:
        products = [p for p in products if p.is_on_sale]

    logger.info(f"Step 3: search returned {len(products)} products")
    return products[:limit]
