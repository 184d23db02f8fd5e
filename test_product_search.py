"""
Tests for product search: scoping, unscoped retry, failure handling.
"""

from unittest.mock import Mock

from product_search import search_products
from models import AttributeFilter, PriceRange, SearchIntent
from conftest import MockCatalogClient


def _search(**kwargs) -> AttributeFilter:
    return AttributeFilter(intent=SearchIntent.PRODUCT_SEARCH, **kwargs)


class TestSearch:
    def test_finds_matching_active_products(self, catalog):
        products = search_products(_search(type="table"), catalog)
        ids = {p.id for p in products}
        # p3 mentions "table basse" in its description; p6 is a draft
        assert ids == {"p1", "p3"}

    def test_attribute_constraint(self, catalog):
        products = search_products(_search(type="chaise", color="bleu"), catalog)
        assert [p.id for p in products] == ["p2"]

    def test_rows_become_products(self, catalog):
        product = search_products(_search(type="table basse", style="scandinave"), catalog)[0]
        assert product.title == "Table basse Oslo en chêne"
        assert product.price == 249.0
        assert product.compare_at_price == 299.0
        assert product.description == "Table basse en bois massif de chêne, lignes épurées."

    def test_scope_restricts(self, catalog):
        products = search_products(_search(type="chaise"), catalog, scope_id="store-2")
        assert [p.id for p in products] == ["p5"]
        assert len(catalog.queries) == 1

    def test_price_range(self, catalog):
        products = search_products(_search(type="canapé", price_range=PriceRange(max=500)), catalog)
        assert products == []

    def test_in_stock(self, catalog):
        products = search_products(_search(type="chaise", in_stock=True), catalog)
        assert [p.id for p in products] == ["p2"]

    def test_on_sale_post_filter(self, catalog):
        products = search_products(_search(type="table", on_sale=True), catalog)
        assert [p.id for p in products] == ["p1"]

    def test_limit(self, catalog):
        products = search_products(_search(type="chaise"), catalog, limit=1)
        assert len(products) == 1


class TestScopeFallback:
    def test_empty_scope_retries_unscoped(self, catalog):
        """A store with no match falls back to the global catalog."""
        products = search_products(_search(type="table basse"), catalog, scope_id="store-2")
        assert "p1" in {p.id for p in products}
        assert len(catalog.queries) == 2
        assert "store_id" in catalog.queries[0].equals
        assert "store_id" not in catalog.queries[1].equals

    def test_no_retry_without_scope(self, catalog):
        products = search_products(_search(type="armoire"), catalog)
        assert products == []
        assert len(catalog.queries) == 1

    def test_unknown_store_everywhere_empty(self, catalog):
        products = search_products(_search(type="armoire"), catalog, scope_id="store-1")
        assert products == []
        assert len(catalog.queries) == 2


class TestFailures:
    def test_catalog_error_yields_empty(self, failing_catalog):
        assert search_products(_search(type="table"), failing_catalog, scope_id="store-1") == []
        # A failure is not an empty result: no unscoped retry
        assert len(failing_catalog.queries) == 1

    def test_catalog_exception_yields_empty(self):
        broken = Mock()
        broken.fetch.side_effect = ConnectionError("down")
        assert search_products(_search(type="table"), broken) == []

    def test_no_catalog(self):
        assert search_products(_search(type="table"), None) == []

    def test_malformed_rows_skipped(self):
        catalog = MockCatalogClient(rows=[
            {"id": "ok", "title": "Lit Nova", "status": "active", "price": "not a price"},
            {"title": "Lit sans identifiant", "status": "active"},
        ])
        products = search_products(_search(type="lit"), catalog)
        assert [p.id for p in products] == ["ok"]
        assert products[0].price == 0.0
