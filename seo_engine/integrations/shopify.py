"""Shopify Admin GraphQL integration for the product catalog."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from seo_engine.config import settings
from seo_engine.core.exceptions import APIKeyMissingError, ExternalAPIError, RateLimitExceededError

logger = logging.getLogger(__name__)

API_NAME = "Shopify"

PRODUCTS_QUERY = """
query GetProducts($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    edges {
      node {
        id
        handle
        title
        descriptionHtml
        tags
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""


@dataclass(slots=True)
class CatalogProduct:
    """Product as returned by the storefront admin API."""

    id: str
    handle: str
    title: str
    description: str | None = None
    tags: list[str] = field(default_factory=list)


class ShopifyCatalogClient:
    """Client that pages through every product in the store."""

    def __init__(
        self,
        store: str | None = None,
        admin_api_token: str | None = None,
        api_version: str | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store or settings.shopify_store
        self.admin_api_token = admin_api_token or settings.shopify_admin_api_token
        self.api_version = api_version or settings.shopify_api_version
        self.page_size = page_size or settings.shopify_page_size
        self.timeout = timeout or settings.http_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self.store or not self.admin_api_token:
            raise APIKeyMissingError(API_NAME, ["SHOPIFY_STORE", "SHOPIFY_ADMIN_API_TOKEN"])

    @property
    def graphql_url(self) -> str:
        return f"https://{self.store}.myshopify.com/admin/api/{self.api_version}/graphql.json"

    async def __aenter__(self) -> "ShopifyCatalogClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "X-Shopify-Access-Token": self.admin_api_token or "",
                "Content-Type": "application/json",
            },
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client must be used as async context manager")
        return self._client

    async def _request_page(self, cursor: str | None) -> dict[str, Any]:
        try:
            response = await self.client.post(
                self.graphql_url,
                json={
                    "query": PRODUCTS_QUERY,
                    "variables": {"first": self.page_size, "after": cursor},
                },
            )
            if response.status_code == 429:
                logger.warning("Shopify rate limit hit", extra={"store": self.store})
                raise RateLimitExceededError(API_NAME)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Shopify HTTP error", extra={"store": self.store, "error": str(e)})
            raise ExternalAPIError(API_NAME, str(e)) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ExternalAPIError(API_NAME, "response body is not valid JSON") from e
        if not isinstance(payload, dict):
            raise ExternalAPIError(API_NAME, "unexpected response shape")
        if payload.get("errors"):
            raise ExternalAPIError(API_NAME, str(payload["errors"]))

        products = (payload.get("data") or {}).get("products")
        if products is None:
            raise ExternalAPIError(API_NAME, "response did not include products")
        return products

    async def fetch_products(self) -> list[CatalogProduct]:
        """Fetch the full product catalog."""
        products: list[CatalogProduct] = []
        cursor: str | None = None

        while True:
            page = await self._request_page(cursor)
            for edge in page.get("edges", []):
                node = edge.get("node") or {}
                products.append(
                    CatalogProduct(
                        id=str(node.get("id", "")),
                        handle=str(node.get("handle", "")),
                        title=str(node.get("title", "")),
                        description=node.get("descriptionHtml"),
                        tags=[tag for tag in node.get("tags") or [] if isinstance(tag, str)],
                    )
                )

            page_info = page.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        logger.info("Fetched Shopify products", extra={"products": len(products)})
        return products
