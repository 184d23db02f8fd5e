"""
Tests for catalog query construction and its PostgREST rendering.
"""

from query_builder import (
    build_catalog_query, without_scope, to_params, search_terms, SEARCHABLE_FIELDS,
)
from models import AttributeFilter, PriceRange, SearchIntent


def _search(**kwargs) -> AttributeFilter:
    return AttributeFilter(intent=SearchIntent.PRODUCT_SEARCH, **kwargs)


class TestBuildCatalogQuery:
    def test_always_active(self):
        query = build_catalog_query(_search(type="lit"))
        assert query.equals["status"] == "active"

    def test_scope(self):
        query = build_catalog_query(_search(type="lit"), scope_id="store-9")
        assert query.equals["store_id"] == "store-9"

    def test_seller_scope_field(self):
        query = build_catalog_query(_search(type="lit"), scope_id="s-1", scope_field="seller_id")
        assert query.equals["seller_id"] == "s-1"
        assert "store_id" not in query.equals

    def test_type_terms_or_across_fields(self):
        """Each term is tried against every searchable field in a single OR group."""
        query = build_catalog_query(_search(type="table basse"))
        group = query.or_groups[0]
        assert len(group) == 2 * len(SEARCHABLE_FIELDS)
        assert ("title", "table") in group
        assert ("chat_text", "basse") in group

    def test_short_terms_dropped(self):
        assert search_terms("table à manger") == ["table", "manger"]

    def test_reserved_characters_removed(self):
        assert search_terms("chaise,(velours)*") == ["chaisevelours"]

    def test_generic_query_when_no_type(self):
        query = build_catalog_query(AttributeFilter(query="miroir doré"))
        assert ("title", "miroir") in query.or_groups[0]

    def test_attribute_groups(self):
        query = build_catalog_query(_search(type="chaise", color="bleu", style="moderne"))
        assert [("ai_color", "bleu"), ("title", "bleu")] in query.or_groups
        assert [("style", "moderne"), ("tags", "moderne")] in query.or_groups
        assert len(query.or_groups) == 3

    def test_price_and_stock(self):
        query = build_catalog_query(_search(type="lit", price_range=PriceRange(min=200, max=600), in_stock=True))
        assert ("price", "gte", 200) in query.ranges
        assert ("price", "lte", 600) in query.ranges
        assert ("inventory_quantity", "gt", 0) in query.ranges

    def test_limit(self):
        assert build_catalog_query(_search(type="lit"), limit=18).limit == 18


class TestWithoutScope:
    def test_removes_only_scope(self):
        query = build_catalog_query(_search(type="lit", color="gris"), scope_id="store-1")
        broad = without_scope(query)
        assert "store_id" not in broad.equals
        assert broad.equals["status"] == "active"
        assert broad.or_groups == query.or_groups
        assert query.equals["store_id"] == "store-1"


class TestToParams:
    def test_single_group_uses_or(self):
        params = dict(to_params(build_catalog_query(_search(type="lit"), limit=12)))
        assert params["status"] == "eq.active"
        assert params["or"].startswith("(title.ilike.*lit*,")
        assert params["limit"] == "12"
        assert "and" not in params

    def test_several_groups_use_and(self):
        params = dict(to_params(build_catalog_query(_search(type="lit", color="gris"))))
        assert params["and"].startswith("(or(title.ilike.*lit*")
        assert "or(ai_color.ilike.*gris*,title.ilike.*gris*)" in params["and"]
        assert "or" not in params

    def test_numbers(self):
        params = to_params(build_catalog_query(_search(type="lit", price_range=PriceRange(max=499.5))))
        assert ("price", "lte.499.5") in params
        params = to_params(build_catalog_query(_search(type="lit", price_range=PriceRange(min=300.0))))
        assert ("price", "gte.300") in params
