"""BigCommerce catalog client (v3 REST API) with internal pagination."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from rcb.errors import SourceUnavailable
from rcb.schemas.catalog import Brand, Category, Product, ProductImage

logger = logging.getLogger(__name__)


class BigCommerceClient:
    """Fetch categories and products from a BigCommerce store."""

    def __init__(
        self,
        store_hash: str,
        access_token: str,
        *,
        page_limit: int = 250,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = f"https://api.bigcommerce.com/stores/{store_hash}/v3"
        self._access_token = access_token
        self._page_limit = page_limit
        self._timeout = timeout
        self._transport = transport
        self._category_names: dict[int, str] | None = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._api_url,
            headers={
                "X-Auth-Token": self._access_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _paginate(self, path: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Collect every page; a short page ends the walk."""
        items: list[dict] = []
        page = 1
        try:
            async with self._client() as client:
                while True:
                    query = {**(params or {}), "page": page, "limit": self._page_limit}
                    response = await client.get(path, params=query)
                    response.raise_for_status()
                    data = response.json().get("data", [])
                    items.extend(data)
                    logger.debug("Fetched %s page %d, %d items so far", path, page, len(items))
                    if len(data) < self._page_limit:
                        break
                    page += 1
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(f"BigCommerce API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"BigCommerce unreachable: {e}") from e
        return items

    async def get_categories(self) -> list[Category]:
        raw = await self._paginate("/catalog/categories")
        self._category_names = {c["id"]: c.get("name", "") for c in raw}
        return [
            Category(id=c["id"], name=c.get("name", ""), product_count=c.get("product_count") or 0)
            for c in raw
        ]

    async def get_products_by_category(self, category_id: int) -> list[Product]:
        raw = await self._paginate(
            "/catalog/products",
            {"categories:in": category_id, "include": "images"},
        )
        return await self._transform_products(raw)

    async def get_all_products(self) -> list[Product]:
        raw = await self._paginate("/catalog/products", {"include": "images"})
        logger.info("Finished fetching all products. Total: %d", len(raw))
        return await self._transform_products(raw)

    async def get_product(self, product_id: int) -> Product | None:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"/catalog/products/{product_id}", params={"include": "images"}
                )
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                data = response.json().get("data")
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(f"BigCommerce API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"BigCommerce unreachable: {e}") from e
        if not data:
            return None
        return (await self._transform_products([data]))[0]

    async def _transform_products(self, raw: list[dict]) -> list[Product]:
        if self._category_names is None and any(
            isinstance(c, int) for p in raw for c in p.get("categories") or []
        ):
            await self.get_categories()
        return [transform_product(p, self._category_names or {}) for p in raw]


def transform_product(api_product: dict, category_names: dict[int, str]) -> Product:
    """Map a BigCommerce product payload onto the Product snapshot."""
    product_id = api_product["id"]
    name = api_product.get("name", "")
    categories: list[str] = []
    for cat in api_product.get("categories") or []:
        if isinstance(cat, dict):
            categories.append(cat.get("name", ""))
        else:
            categories.append(category_names.get(cat, str(cat)))
    images = api_product.get("images") or []
    first_image = images[0] if images else {}
    brand = api_product.get("brand") or {}
    try:
        price = float(api_product.get("price") or 0)
    except (TypeError, ValueError):
        price = 0.0
    custom_url = api_product.get("custom_url") or {}
    return Product(
        entity_id=product_id,
        product_id=product_id,
        name=name,
        price=price,
        categories=categories,
        description=api_product.get("description") or "",
        brand=Brand(name=brand.get("name") or "Unknown") if isinstance(brand, dict) else Brand(),
        default_image=ProductImage(
            url=first_image.get("url_standard", ""),
            alt_text=first_image.get("description") or name,
        ),
        path=custom_url.get("url") or f"/products/{product_id}",
    )
