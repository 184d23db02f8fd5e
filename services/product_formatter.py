"""
Product Formatter

Converts raw catalog rows to Product objects and Products to the compact
shapes used by the API response and by the LLM fact sheet.
"""

import re
from typing import Any, Dict, List, Optional

from models import Product
from text_utils import truncate

DESCRIPTION_FACT_LIMIT = 200


def product_from_row(row: dict) -> Optional[Product]:
    """Build a Product from a catalog row. Rows without id or title are skipped (None)."""
    if not isinstance(row, dict):
        return None
    product_id = row.get("id") or row.get("external_id")
    title = (row.get("title") or row.get("name") or "").strip()
    if product_id in (None, "") or not title:
        return None

    tags = row.get("tags") or ""
    if isinstance(tags, list):
        tags = ", ".join(str(t) for t in tags if t)

    image_url = row.get("image_url")
    if not image_url and isinstance(row.get("images"), list) and row["images"]:
        first = row["images"][0]
        image_url = first.get("src") if isinstance(first, dict) else first

    compare_at = row.get("compare_at_price")
    compare_at = _safe_float(compare_at) if compare_at not in ("", None) else None

    return Product(
        id=str(product_id),
        title=title,
        price=_safe_float(row.get("price")),
        compare_at_price=compare_at or None,
        category=row.get("category") or "",
        sub_category=row.get("sub_category") or row.get("subcategory") or "",
        product_type=row.get("product_type") or "",
        vendor=row.get("vendor") or "",
        style=row.get("style") or None,
        color=row.get("color") or None,
        ai_color=row.get("ai_color") or None,
        material=row.get("material") or None,
        ai_material=row.get("ai_material") or None,
        ai_shape=row.get("ai_shape") or None,
        room=row.get("room") or None,
        tags=str(tags),
        description=_clean_html(row.get("description") or "") or None,
        chat_text=row.get("chat_text") or None,
        smart_width=_optional_float(row.get("smart_width")),
        smart_height=_optional_float(row.get("smart_height")),
        smart_length=_optional_float(row.get("smart_length")),
        smart_width_unit=row.get("smart_width_unit") or None,
        smart_height_unit=row.get("smart_height_unit") or None,
        smart_length_unit=row.get("smart_length_unit") or None,
        image_url=image_url or None,
        inventory_quantity=_optional_int(row.get("inventory_quantity")),
        currency=row.get("currency") or None,
        handle=row.get("handle") or None,
        shop_name=row.get("shop_name") or None,
        store_id=_optional_str(row.get("store_id")),
        seller_id=_optional_str(row.get("seller_id")),
    )


def discount_percentage(product: Product) -> Optional[int]:
    """Rounded discount when compare_at_price > price, else None."""
    if not product.is_on_sale or not product.compare_at_price:
        return None
    return round((product.compare_at_price - product.price) / product.compare_at_price * 100)


def format_dimensions(product: Product) -> Optional[str]:
    """
    "110 × 60 × 40 cm" (width × length × height) from the smart_* fields.
    Units are shown once when they agree, per value otherwise.
    """
    values = [
        (product.smart_width, product.smart_width_unit),
        (product.smart_length, product.smart_length_unit),
        (product.smart_height, product.smart_height_unit),
    ]
    values = [(v, u or "cm") for v, u in values if v]
    if not values:
        return None

    units = {u for _, u in values}
    if len(units) == 1:
        return " × ".join(_format_number(v) for v, _ in values) + f" {units.pop()}"
    return " × ".join(f"{_format_number(v)} {u}" for v, u in values)


def _currency_symbol(product: Product) -> str:
    currency = product.currency or "EUR"
    return "€" if currency.upper() == "EUR" else f" {currency}"


def format_price(product: Product) -> str:
    return f"{_format_number(product.price)}{_currency_symbol(product)}"


def product_facts(product: Product) -> Dict[str, Any]:
    """Fact sheet for one product, the only product data the LLM ever sees."""
    facts: Dict[str, Any] = {
        "titre": product.title,
        "prix": format_price(product),
    }
    discount = discount_percentage(product)
    if discount:
        facts["prix_barre"] = f"{_format_number(product.compare_at_price)}{_currency_symbol(product)}"
        facts["promotion"] = f"-{discount}%"
    if product.category:
        facts["categorie"] = product.category
    if product.sub_category:
        facts["sous_categorie"] = product.sub_category
    if product.style:
        facts["style"] = product.style
    if product.color_value:
        facts["couleur"] = product.color_value
    if product.material_value:
        facts["materiau"] = product.material_value
    if product.room:
        facts["piece"] = product.room
    dimensions = format_dimensions(product)
    if dimensions:
        facts["dimensions"] = dimensions
    if product.description:
        facts["description"] = truncate(product.description, DESCRIPTION_FACT_LIMIT)
    if product.tags:
        facts["tags"] = product.tags
    if product.in_stock is not None:
        facts["stock"] = "en stock" if product.in_stock else "rupture de stock"
    return facts


def format_product(product: Product, relevance_score: Optional[int] = None) -> dict:
    """Convert a Product to the clean API response format."""
    data = {
        "id": product.id,
        "title": product.title,
        "price": product.price,
        "compare_at_price": product.compare_at_price,
        "discount_percentage": discount_percentage(product),
        "on_sale": product.is_on_sale,
        "currency": product.currency or "EUR",
        "category": product.category,
        "sub_category": product.sub_category,
        "style": product.style,
        "color": product.color_value,
        "material": product.material_value,
        "room": product.room,
        "dimensions": format_dimensions(product),
        "image_url": product.image_url,
        "handle": product.handle,
        "shop_name": product.shop_name,
        "in_stock": product.in_stock,
        "inventory_quantity": product.inventory_quantity,
        "store_id": product.store_id,
    }
    if relevance_score is not None:
        data["relevance_score"] = relevance_score
    return data


def summarize_products(products: List[Product]) -> Dict[str, Any]:
    """Aggregate view of a result set (categories, styles, materials, ...)."""
    def distinct(values):
        seen = []
        for v in values:
            if v and v not in seen:
                seen.append(v)
        return seen

    prices = [p.price for p in products if p.price]
    return {
        "count": len(products),
        "categories": distinct(p.category for p in products),
        "sub_categories": distinct(p.sub_category for p in products),
        "styles": distinct(p.style for p in products),
        "materials": distinct(p.material_value for p in products),
        "colors": distinct(p.color_value for p in products),
        "dimensions": distinct(format_dimensions(p) for p in products),
        "has_promo": any(p.is_on_sale for p in products),
        "price_min": min(prices) if prices else None,
        "price_max": max(prices) if prices else None,
    }


def _format_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:.2f}"


def _safe_float(val) -> float:
    """Safely convert to float."""
    try:
        return float(val) if val not in ("", None) else 0.0
    except (ValueError, TypeError):
        return 0.0


def _optional_float(val) -> Optional[float]:
    if val in ("", None):
        return None
    try:
        return float(val)
    except (ValueError, TypeError):
        return None


def _optional_int(val) -> Optional[int]:
    number = _optional_float(val)
    return int(number) if number is not None else None


def _optional_str(val) -> Optional[str]:
    return str(val) if val not in ("", None) else None


def _clean_html(html: str) -> str:
    """Strip HTML tags from description."""
    if not html:
        return ""
    clean = re.sub(r'<[^>]+>', '', html)
    clean = re.sub(r'\s+', ' ', clean).strip()
    return clean
