"""
HTTP client for the product catalog (Supabase PostgREST).
Read-only: the chat engine never writes products.
"""

import requests
from models import CatalogQuery
from query_builder import to_params
from chat_logger import get_logger, sanitize_url
from app_config import SUPABASE_URL, SUPABASE_KEY, CATALOG_TIMEOUT_SECONDS

logger = get_logger("omnia_chat")


class CatalogClient:
    def __init__(self, base_url: str = None, api_key: str = None, timeout: int = None):
        self.base_url = (base_url or SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_KEY
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS

        self.session = requests.Session()
        self.session.headers.update({
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        })

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def fetch(self, query: CatalogQuery) -> dict:
        """Execute a single catalog read."""
        url = f"{self.base_url}/rest/v1/{query.table}"
        try:
            response = self.session.get(url, params=to_params(query), timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
            if not isinstance(rows, list):
                return {
                    "success": False,
                    "error": "Unexpected catalog payload",
                    "status_code": response.status_code,
                }
            logger.info(
                f"Catalog read ok | {query.description} | rows={len(rows)} | "
                f"url={sanitize_url(response.url or url)}"
            )
            return {
                "success": True,
                "data": rows,
                "status_code": response.status_code,
            }
        except (requests.exceptions.RequestException, ValueError) as e:
            return {
                "success": False,
                "error": str(e),
                "status_code": getattr(getattr(e, "response", None), "status_code", None),
            }
