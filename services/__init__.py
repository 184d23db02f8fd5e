"""Services package - catalog access, product formatting and suggestions."""

from .catalog_client import CatalogClient
from .product_formatter import (
    product_from_row,
    format_product,
    product_facts,
    summarize_products,
)
from .suggestion_generator import generate_suggestions

__all__ = [
    "CatalogClient",
    "product_from_row",
    "format_product",
    "product_facts",
    "summarize_products",
    "generate_suggestions",
]
