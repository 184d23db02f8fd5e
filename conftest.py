"""
Pytest configuration and fixtures for omnia-chat tests.

Provides an in-memory catalog that evaluates CatalogQuery objects the way the
PostgREST endpoint does, and a scripted LLM client.
"""

import copy
import pytest
from typing import Dict, List, Optional

from models import CatalogQuery


# Catalog rows as the products table returns them
SAMPLE_ROWS = [
    {
        "id": "p1", "title": "Table basse Oslo en chêne", "status": "active",
        "price": "249.00", "compare_at_price": "299.00", "currency": "EUR",
        "category": "Table", "sub_category": "Table basse", "product_type": "Table basse",
        "vendor": "Nordik Home", "style": "scandinave", "ai_color": "naturel",
        "ai_material": "bois de chêne", "room": "salon", "tags": "scandinave, salon, bois",
        "description": "<p>Table basse en bois massif de chêne, lignes épurées.</p>",
        "smart_width": 110, "smart_length": 60, "smart_height": 40,
        "smart_width_unit": "cm", "smart_length_unit": "cm", "smart_height_unit": "cm",
        "inventory_quantity": 5, "image_url": "https://cdn.example.com/oslo.jpg",
        "handle": "table-basse-oslo", "shop_name": "Maison Lumi", "store_id": "store-1",
    },
    {
        "id": "p2", "title": "Chaise Lina velours bleu", "status": "active",
        "price": 89, "currency": "EUR",
        "category": "Chaise", "sub_category": "Chaise de salle à manger",
        "style": "moderne", "ai_color": "bleu", "ai_material": "velours",
        "room": "salle à manger", "tags": "velours, bleu",
        "inventory_quantity": 12, "store_id": "store-1",
    },
    {
        "id": "p3", "title": "Lampe Arc", "status": "active",
        "price": 129, "currency": "EUR",
        "category": "Luminaire", "sub_category": "Lampadaire",
        "style": "industriel", "ai_color": "noir", "ai_material": "métal",
        "room": "salon", "tags": "lumière",
        "description": "Lampe arc idéale à côté d'une table basse.",
        "inventory_quantity": 3, "store_id": "store-1",
    },
    {
        "id": "p4", "title": "Canapé Milo 3 places", "status": "active",
        "price": 899, "compare_at_price": 999, "currency": "EUR",
        "category": "Canapé", "sub_category": "Canapé droit",
        "style": "contemporain", "ai_color": "gris", "ai_material": "tissu",
        "room": "salon", "tags": "canapé, salon",
        "inventory_quantity": 2, "store_id": "store-2",
    },
    {
        "id": "p5", "title": "Chaise Nordic bois", "status": "active",
        "price": 119, "currency": "EUR",
        "category": "Chaise", "style": "scandinave", "ai_color": "blanc",
        "ai_material": "bois", "room": "cuisine", "tags": "scandinave",
        "inventory_quantity": 0, "store_id": "store-2",
    },
    {
        "id": "p6", "title": "Table à manger Rustica", "status": "draft",
        "price": 540, "category": "Table", "sub_category": "Table à manger",
        "style": "rustique", "ai_material": "bois", "store_id": "store-1",
    },
]


class MockCatalogClient:
    """
    In-memory catalog client.
    Applies equals / ranges / OR groups case-insensitively, like ilike filters.
    """

    def __init__(self, rows: Optional[List[Dict]] = None, fail: bool = False):
        self.rows = copy.deepcopy(SAMPLE_ROWS if rows is None else rows)
        self.fail = fail
        self.queries: List[CatalogQuery] = []

    def fetch(self, query: CatalogQuery) -> dict:
        self.queries.append(query)
        if self.fail:
            return {"success": False, "error": "connection refused", "status_code": None}
        rows = [r for r in self.rows if self._matches(r, query)]
        return {"success": True, "data": rows[:query.limit], "status_code": 200}

    @staticmethod
    def _matches(row: Dict, query: CatalogQuery) -> bool:
        for column, value in query.equals.items():
            if str(row.get(column)) != str(value):
                return False

        for column, op, value in query.ranges:
            raw = row.get(column)
            if raw in (None, ""):
                return False
            number = float(raw)
            if op == "gt" and not number > value:
                return False
            if op == "gte" and not number >= value:
                return False
            if op == "lt" and not number < value:
                return False
            if op == "lte" and not number <= value:
                return False

        for group in query.or_groups:
            if not any(
                term.lower() in str(row.get(field) or "").lower()
                for field, term in group
            ):
                return False
        return True


class FakeLLMClient:
    """Scripted completion client: returns queued replies or raises `error`."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Dict] = []

    def complete(self, messages, max_tokens=None) -> str:
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return ""


@pytest.fixture(scope="function")
def catalog():
    """Fresh in-memory catalog with the sample rows."""
    return MockCatalogClient()


@pytest.fixture(scope="function")
def failing_catalog():
    """Catalog whose every read fails."""
    return MockCatalogClient(fail=True)


@pytest.fixture(scope="function")
def fake_llm():
    """Factory: fake_llm(replies=[...]) or fake_llm(error=Exception(...))."""
    def _make(replies=None, error=None):
        return FakeLLMClient(replies=replies, error=error)
    return _make
