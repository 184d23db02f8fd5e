"""
Tests for the PostgREST catalog client. The HTTP session is mocked.
"""

import requests
from unittest.mock import patch, MagicMock

from services.catalog_client import CatalogClient
from query_builder import build_catalog_query
from models import AttributeFilter, SearchIntent


def _query():
    return build_catalog_query(AttributeFilter(intent=SearchIntent.PRODUCT_SEARCH, type="lit"),
                               scope_id="store-1", limit=6)


def _client():
    return CatalogClient(base_url="https://db.example.supabase.co/", api_key="service-key", timeout=5)


def _response(payload, status=200):
    response = MagicMock()
    response.status_code = status
    response.url = "https://db.example.supabase.co/rest/v1/shopify_products?apikey=service-key"
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestCatalogClient:
    def test_headers(self):
        client = _client()
        assert client.session.headers["apikey"] == "service-key"
        assert client.session.headers["Authorization"] == "Bearer service-key"
        assert client.is_configured

    def test_not_configured(self):
        assert not CatalogClient(base_url="", api_key="").is_configured

    def test_fetch_rows(self):
        client = _client()
        rows = [{"id": "l1", "title": "Lit Nova"}]
        with patch.object(client.session, "get", return_value=_response(rows)) as get:
            result = client.fetch(_query())

        assert result == {"success": True, "data": rows, "status_code": 200}
        url = get.call_args.args[0]
        assert url == f"https://db.example.supabase.co/rest/v1/{_query().table}"
        params = dict(get.call_args.kwargs["params"])
        assert params["store_id"] == "eq.store-1"
        assert params["limit"] == "6"
        assert get.call_args.kwargs["timeout"] == 5

    def test_http_error(self):
        client = _client()
        response = _response([], status=401)
        error = requests.exceptions.HTTPError("401 Unauthorized", response=response)
        response.raise_for_status.side_effect = error
        with patch.object(client.session, "get", return_value=response):
            result = client.fetch(_query())
        assert result["success"] is False
        assert result["status_code"] == 401

    def test_connection_error(self):
        client = _client()
        with patch.object(client.session, "get", side_effect=requests.exceptions.ConnectionError("refused")):
            result = client.fetch(_query())
        assert result["success"] is False
        assert "refused" in result["error"]

    def test_unexpected_payload(self):
        client = _client()
        with patch.object(client.session, "get", return_value=_response({"message": "oops"})):
            result = client.fetch(_query())
        assert result["success"] is False
        assert result["error"] == "Unexpected catalog payload"
