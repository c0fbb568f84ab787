"""Read-only client for the commerce backend's public product endpoint."""
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from storefront.config import Settings
from storefront.errors import WARN_PRODUCT_FETCH_FAILED
from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class CatalogClient:
    """Fetches product records by id. Every failure is reported as None."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazily create the shared httpx client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.catalog_timeout),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """GET /api/public/products/<id>; unwraps {"product": {...}} responses."""
        url = self.settings.api_url(f"/public/products/{quote(str(product_id), safe='')}")
        client = await self._get_http_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"{WARN_PRODUCT_FETCH_FAILED} {sanitize_id_for_logging(product_id)}: HTTP {e.response.status_code}"
            )
            return None
        except httpx.RequestError as e:
            logger.warning(f"{WARN_PRODUCT_FETCH_FAILED} {sanitize_id_for_logging(product_id)}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"{WARN_PRODUCT_FETCH_FAILED} {sanitize_id_for_logging(product_id)}: bad JSON ({e})")
            return None

        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            return data["product"]
        if isinstance(data, dict) and data:
            return data
        return None

    async def aclose(self) -> None:
        """Close the http client if it was created."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
